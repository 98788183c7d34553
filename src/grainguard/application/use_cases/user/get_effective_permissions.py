"""Get effective permissions use case."""

from grainguard.application.dto.permission_dto import EffectivePermissionsOutput
from grainguard.application.dto.principal import PrincipalContext
from grainguard.application.services.permission_resolver import PermissionResolver


class GetEffectivePermissionsUseCase:
    """Resolve the caller's effective permissions, optionally for one scope."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        principal: PrincipalContext,
        grain: str | None = None,
        securable_item: str | None = None,
    ) -> EffectivePermissionsOutput:
        """Return sorted qualified names of the effective permission set."""
        async with self._uow_factory() as uow:
            keys = await PermissionResolver(uow).resolve(principal, grain, securable_item)
        return EffectivePermissionsOutput(
            grain=grain,
            securable_item=securable_item,
            permissions=sorted(k.qualified_name for k in keys),
        )
