"""Permission catalog API resources."""

from uuid import UUID

import falcon.asgi
from pydantic import TypeAdapter

from grainguard.application.use_cases.permission.add_permission import AddPermissionUseCase
from grainguard.application.use_cases.permission.delete_permission import (
    DeletePermissionUseCase,
)
from grainguard.application.use_cases.permission.get_permissions import GetPermissionsUseCase
from grainguard.domain.exceptions import AlreadyExists, NotFound
from grainguard.interfaces.api.errors import BadRequest, load_body, set_error
from grainguard.interfaces.api.resources.serializers import permission_to_dict
from grainguard.interfaces.api.schemas import PermissionBody

_permission_body = TypeAdapter(PermissionBody)


class PermissionsResource:
    """GET/POST /v1/permissions - list by scope and create."""

    def __init__(
        self,
        add_permission: AddPermissionUseCase,
        get_permissions: GetPermissionsUseCase,
    ) -> None:
        self._add = add_permission
        self._get = get_permissions

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List permissions of grain and securable_item, optionally by name."""
        grain = req.get_param("grain")
        securable_item = req.get_param("securable_item")
        if not grain or not securable_item:
            set_error(resp, falcon.HTTP_400, "grain and securable_item are required")
            return

        permissions = await self._get.execute(grain, securable_item, req.get_param("name"))
        resp.media = {"items": [permission_to_dict(p) for p in permissions]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create permission."""
        try:
            body = await load_body(req, _permission_body)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        principal = getattr(req.context, "principal", None)
        try:
            permission = await self._add.execute(
                body.grain,
                body.securable_item,
                body.name,
                actor_id=principal.subject_id if principal else None,
            )
            resp.media = permission_to_dict(permission)
            resp.status = falcon.HTTP_201
        except AlreadyExists as e:
            set_error(resp, falcon.HTTP_409, str(e))


class PermissionResource:
    """GET/DELETE /v1/permissions/{permission_id}."""

    def __init__(
        self,
        get_permissions: GetPermissionsUseCase,
        delete_permission: DeletePermissionUseCase,
    ) -> None:
        self._get = get_permissions
        self._delete = delete_permission

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: str
    ) -> None:
        try:
            perm_id = UUID(permission_id)
        except ValueError:
            set_error(resp, falcon.HTTP_400, "permission_id must be a UUID")
            return

        try:
            permission = await self._get.get(perm_id)
            resp.media = permission_to_dict(permission)
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, permission_id: str
    ) -> None:
        try:
            perm_id = UUID(permission_id)
        except ValueError:
            set_error(resp, falcon.HTTP_400, "permission_id must be a UUID")
            return

        try:
            await self._delete.execute(perm_id)
            resp.status = falcon.HTTP_204
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))
