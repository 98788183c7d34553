"""Permission identity."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class PermissionKey:
    """Identity of a permission: grain, securable item and name.

    The allow/deny action is not part of the identity.
    """

    grain: str
    securable_item: str
    name: str

    def __post_init__(self) -> None:
        if not self.grain or not self.securable_item or not self.name:
            raise ValueError("grain, securable_item and name must be non-empty")

    @property
    def qualified_name(self) -> str:
        """Display form ``grain/securable_item.name``."""
        return f"{self.grain}/{self.securable_item}.{self.name}"

    def in_scope(self, grain: str | None, securable_item: str | None) -> bool:
        """True when the key matches the given (optional) scope filters."""
        if grain and self.grain != grain:
            return False
        if securable_item and self.securable_item != securable_item:
            return False
        return True

    @classmethod
    def parse(cls, qualified_name: str) -> "PermissionKey":
        """Parse ``grain/securable_item.name``."""
        grain, sep, rest = qualified_name.partition("/")
        securable_item, dot, name = rest.partition(".")
        if not sep or not dot:
            raise ValueError(f"Invalid permission name: {qualified_name}")
        return cls(grain=grain, securable_item=securable_item, name=name)
