"""Get granular permissions use case."""

from grainguard.domain.entities import GranularPermission


class GetGranularPermissionsUseCase:
    """List the overrides stored for a principal."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, identity_provider: str, subject_id: str) -> list[GranularPermission]:
        async with self._uow_factory() as uow:
            user = await uow.users.get(identity_provider, subject_id)
        return list(user.granular_permissions) if user else []
