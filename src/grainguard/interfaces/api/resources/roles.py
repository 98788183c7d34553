"""Role API resources."""

from uuid import UUID

import falcon.asgi
from pydantic import TypeAdapter

from grainguard.application.use_cases.role.add_permissions_to_role import (
    AddPermissionsToRoleUseCase,
)
from grainguard.application.use_cases.role.add_role import AddRoleUseCase
from grainguard.application.use_cases.role.delete_role import DeleteRoleUseCase
from grainguard.application.use_cases.role.get_roles import GetRolesUseCase
from grainguard.application.use_cases.role.remove_permissions_from_role import (
    RemovePermissionsFromRoleUseCase,
)
from grainguard.domain.entities import Role
from grainguard.domain.exceptions import (
    AlreadyExists,
    IncompatiblePermission,
    NotFound,
    ValidationError,
)
from grainguard.interfaces.api.errors import BadRequest, load_body, set_error
from grainguard.interfaces.api.resources.serializers import role_to_dict
from grainguard.interfaces.api.schemas import RoleBody, permission_refs_adapter

_role_body = TypeAdapter(RoleBody)


async def _expand(uow_factory, roles: list[Role]) -> list[dict]:
    """Serialize roles with their permissions inlined."""
    ids = {pid for r in roles for pid in (*r.permissions, *r.denied_permissions)}
    async with uow_factory() as uow:
        permissions = await uow.permissions.get_many(ids) if ids else []
    index = {p.id: p for p in permissions}
    return [role_to_dict(r, index) for r in roles]


def _actor(req: falcon.asgi.Request) -> str | None:
    principal = getattr(req.context, "principal", None)
    return principal.subject_id if principal else None


class RolesResource:
    """GET/POST /v1/roles - list by scope and create."""

    def __init__(
        self,
        get_roles: GetRolesUseCase,
        add_role: AddRoleUseCase,
        unit_of_work_factory: type,
    ) -> None:
        self._get_roles = get_roles
        self._add_role = add_role
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List roles of grain and securable_item, optionally by name."""
        grain = req.get_param("grain")
        securable_item = req.get_param("securable_item")
        if not grain or not securable_item:
            set_error(resp, falcon.HTTP_400, "grain and securable_item are required")
            return

        roles = await self._get_roles.execute(grain, securable_item, req.get_param("name"))
        resp.media = {"items": await _expand(self._uow_factory, roles)}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create role."""
        try:
            body = await load_body(req, _role_body)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        try:
            role = await self._add_role.execute(body.to_input(), actor_id=_actor(req))
            resp.media = (await _expand(self._uow_factory, [role]))[0]
            resp.status = falcon.HTTP_201
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))
        except IncompatiblePermission as e:
            set_error(resp, falcon.HTTP_400, str(e))
        except AlreadyExists as e:
            set_error(resp, falcon.HTTP_409, str(e))


class RoleResource:
    """GET/DELETE /v1/roles/{role_id}."""

    def __init__(
        self,
        get_roles: GetRolesUseCase,
        delete_role: DeleteRoleUseCase,
        unit_of_work_factory: type,
    ) -> None:
        self._get_roles = get_roles
        self._delete_role = delete_role
        self._uow_factory = unit_of_work_factory

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        try:
            rid = UUID(role_id)
        except ValueError:
            set_error(resp, falcon.HTTP_400, "role_id must be a UUID")
            return

        try:
            role = await self._get_roles.get(rid)
            resp.media = (await _expand(self._uow_factory, [role]))[0]
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        try:
            rid = UUID(role_id)
        except ValueError:
            set_error(resp, falcon.HTTP_400, "role_id must be a UUID")
            return

        try:
            await self._delete_role.execute(rid, actor_id=_actor(req))
            resp.status = falcon.HTTP_204
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))


class RolePermissionsResource:
    """POST/DELETE /v1/roles/{role_id}/permissions - attach or detach permissions."""

    def __init__(
        self,
        add_permissions: AddPermissionsToRoleUseCase,
        remove_permissions: RemovePermissionsFromRoleUseCase,
        unit_of_work_factory: type,
    ) -> None:
        self._add = add_permissions
        self._remove = remove_permissions
        self._uow_factory = unit_of_work_factory

    async def _update(self, req, resp, role_id: str, use_case) -> None:
        try:
            rid = UUID(role_id)
            body = await load_body(req, permission_refs_adapter)
        except ValueError:
            set_error(resp, falcon.HTTP_400, "role_id must be a UUID")
            return
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        denied = req.get_param_as_bool("denied") or False
        try:
            role = await use_case.execute(
                rid, [p.id for p in body], denied=denied, actor_id=_actor(req)
            )
            resp.media = (await _expand(self._uow_factory, [role]))[0]
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))
        except (IncompatiblePermission, ValidationError) as e:
            set_error(resp, falcon.HTTP_400, str(e))

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        """Attach permissions (denied=true for the denied list)."""
        await self._update(req, resp, role_id, self._add)

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        """Detach permissions (denied=true for the denied list)."""
        await self._update(req, resp, role_id, self._remove)
