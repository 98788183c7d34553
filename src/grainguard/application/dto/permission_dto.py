"""Permission DTOs."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass
class EffectivePermissionsOutput:
    """Resolved permission set for a principal and optional scope."""

    grain: str | None
    securable_item: str | None
    permissions: list[str]


@dataclass
class RoleCreateInput:
    """Input for creating a role."""

    grain: str
    securable_item: str
    name: str
    parent_role: UUID | None = None
    permissions: list[UUID] = field(default_factory=list)
    denied_permissions: list[UUID] = field(default_factory=list)
