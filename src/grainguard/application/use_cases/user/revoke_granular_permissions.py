"""Revoke granular permissions use case."""

from datetime import UTC, datetime

from grainguard.application.services import granular_permissions
from grainguard.domain.entities import GranularPermission, User


class RevokeGranularPermissionsUseCase:
    """Remove allow/deny overrides from a principal, all or nothing."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        identity_provider: str,
        subject_id: str,
        permissions: list[GranularPermission],
    ) -> User | None:
        """Remove matching overrides; raises ValidationError listing every mismatch."""
        async with self._uow_factory() as uow:
            user = await uow.users.get_for_update(identity_provider, subject_id)
            existing = user.granular_permissions if user else []
            remaining = granular_permissions.revoke(existing, permissions)
            if user is None:
                return None
            user.granular_permissions = remaining
            user.modified_at = datetime.now(UTC)
            await uow.users.update(user)
            return user
