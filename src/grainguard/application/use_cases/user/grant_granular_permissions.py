"""Grant granular permissions use case."""

from datetime import UTC, datetime

from grainguard.application.services import granular_permissions
from grainguard.domain.entities import GranularPermission, User


class GrantGranularPermissionsUseCase:
    """Attach allow/deny overrides directly to a principal."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        identity_provider: str,
        subject_id: str,
        permissions: list[GranularPermission],
    ) -> User:
        """Upsert overrides; creates the user record on first grant."""
        async with self._uow_factory() as uow:
            now = datetime.now(UTC)
            user = await uow.users.get_for_update(identity_provider, subject_id)
            if user is None:
                user = User(
                    identity_provider=identity_provider,
                    subject_id=subject_id,
                    created_at=now,
                    granular_permissions=granular_permissions.grant([], permissions),
                )
                await uow.users.create(user)
                return user

            user.granular_permissions = granular_permissions.grant(
                user.granular_permissions, permissions
            )
            user.modified_at = now
            await uow.users.update(user)
            return user
