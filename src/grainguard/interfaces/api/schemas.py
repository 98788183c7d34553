"""Request bodies validated at the API boundary."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from grainguard.application.dto.permission_dto import RoleCreateInput
from grainguard.domain.entities import GranularPermission
from grainguard.domain.value_objects import GroupSource, PermissionAction, PermissionKey


class _Body(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class PermissionBody(_Body):
    """POST /v1/permissions."""

    grain: str = Field(min_length=1)
    securable_item: str = Field(min_length=1)
    name: str = Field(min_length=1)


class GranularPermissionBody(PermissionBody):
    """One entry of a granular grant/revoke batch."""

    permission_action: PermissionAction = PermissionAction.ALLOW

    def to_domain(self) -> GranularPermission:
        return GranularPermission(
            key=PermissionKey(self.grain, self.securable_item, self.name),
            action=self.permission_action,
        )


class PermissionRefBody(_Body):
    """Reference to a catalog permission by id."""

    id: UUID


class RoleBody(_Body):
    """POST /v1/roles."""

    grain: str = Field(min_length=1)
    securable_item: str = Field(min_length=1)
    name: str = Field(min_length=1)
    parent_role: UUID | None = None
    permissions: list[PermissionRefBody] = Field(default_factory=list)
    denied_permissions: list[PermissionRefBody] = Field(default_factory=list)

    def to_input(self) -> RoleCreateInput:
        return RoleCreateInput(
            grain=self.grain,
            securable_item=self.securable_item,
            name=self.name,
            parent_role=self.parent_role,
            permissions=[p.id for p in self.permissions],
            denied_permissions=[p.id for p in self.denied_permissions],
        )


class GroupBody(_Body):
    """POST /v1/groups."""

    group_name: str = Field(min_length=1)
    group_source: GroupSource = GroupSource.DIRECTORY
    id: str | None = None


class GroupRoleBody(_Body):
    """POST/DELETE /v1/groups/{name}/roles."""

    id: UUID


class GroupUserBody(_Body):
    """POST/DELETE /v1/groups/{name}/users."""

    identity_provider: str = Field(min_length=1)
    subject_id: str = Field(min_length=1)


class ClientBody(_Body):
    """POST /v1/clients."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)


class SecurableItemBody(_Body):
    """POST /v1/clients/{client_id}/securableitems[/{securable_item_id}]."""

    name: str = Field(min_length=1)


granular_permissions_adapter = TypeAdapter(list[GranularPermissionBody])
permission_refs_adapter = TypeAdapter(list[PermissionRefBody])
