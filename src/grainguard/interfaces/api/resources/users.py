"""User permission API resources."""

import falcon.asgi

from grainguard.application.use_cases.user.get_effective_permissions import (
    GetEffectivePermissionsUseCase,
)
from grainguard.application.use_cases.user.get_granular_permissions import (
    GetGranularPermissionsUseCase,
)
from grainguard.application.use_cases.user.grant_granular_permissions import (
    GrantGranularPermissionsUseCase,
)
from grainguard.application.use_cases.user.revoke_granular_permissions import (
    RevokeGranularPermissionsUseCase,
)
from grainguard.domain.exceptions import ValidationError
from grainguard.interfaces.api.errors import BadRequest, load_body, set_error
from grainguard.interfaces.api.schemas import granular_permissions_adapter


class UserPermissionsResource:
    """GET /v1/user/permissions - effective permissions of the caller."""

    def __init__(self, get_effective_permissions: GetEffectivePermissionsUseCase) -> None:
        self._get_effective = get_effective_permissions

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Resolve permissions, optionally scoped by grain and securable item."""
        principal = getattr(req.context, "principal", None)
        if not principal or principal.is_anonymous:
            set_error(resp, falcon.HTTP_401, "Unauthorized")
            return

        grain = req.get_param("grain") or None
        securable_item = (
            req.get_param("securable_item") or req.get_param("securableItem") or None
        )
        result = await self._get_effective.execute(
            principal.to_context(), grain=grain, securable_item=securable_item
        )
        resp.media = {
            "grain": result.grain,
            "securable_item": result.securable_item,
            "permissions": result.permissions,
        }
        resp.status = falcon.HTTP_200


class GranularPermissionsResource:
    """GET/POST/DELETE /v1/user/{identity_provider}/{subject_id}/permissions."""

    def __init__(
        self,
        get_granular: GetGranularPermissionsUseCase,
        grant_granular: GrantGranularPermissionsUseCase,
        revoke_granular: RevokeGranularPermissionsUseCase,
    ) -> None:
        self._get = get_granular
        self._grant = grant_granular
        self._revoke = revoke_granular

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        identity_provider: str,
        subject_id: str,
    ) -> None:
        """List stored overrides."""
        overrides = await self._get.execute(identity_provider, subject_id)
        resp.media = {
            "items": [
                {
                    "grain": o.key.grain,
                    "securable_item": o.key.securable_item,
                    "name": o.key.name,
                    "permission_action": o.action.value,
                }
                for o in overrides
            ]
        }
        resp.status = falcon.HTTP_200

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        identity_provider: str,
        subject_id: str,
    ) -> None:
        """Grant overrides."""
        try:
            body = await load_body(req, granular_permissions_adapter)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        try:
            await self._grant.execute(
                identity_provider, subject_id, [b.to_domain() for b in body]
            )
            resp.status = falcon.HTTP_204
        except ValidationError as e:
            set_error(resp, falcon.HTTP_400, str(e), e.details)

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        identity_provider: str,
        subject_id: str,
    ) -> None:
        """Revoke overrides; 400 lists every invalid entry."""
        try:
            body = await load_body(req, granular_permissions_adapter)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        try:
            await self._revoke.execute(
                identity_provider, subject_id, [b.to_domain() for b in body]
            )
            resp.status = falcon.HTTP_204
        except ValidationError as e:
            set_error(resp, falcon.HTTP_400, str(e), e.details)
