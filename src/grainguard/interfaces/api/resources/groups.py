"""Group API resources."""

import falcon.asgi
from pydantic import TypeAdapter

from grainguard.application.use_cases.group.add_group import AddGroupUseCase
from grainguard.application.use_cases.group.add_role_to_group import AddRoleToGroupUseCase
from grainguard.application.use_cases.group.add_user_to_group import AddUserToGroupUseCase
from grainguard.application.use_cases.group.delete_group import DeleteGroupUseCase
from grainguard.application.use_cases.group.get_group_roles import GetGroupRolesUseCase
from grainguard.application.use_cases.group.remove_role_from_group import (
    RemoveRoleFromGroupUseCase,
)
from grainguard.application.use_cases.group.remove_user_from_group import (
    RemoveUserFromGroupUseCase,
)
from grainguard.domain.exceptions import AlreadyExists, NotFound, ValidationError
from grainguard.interfaces.api.errors import BadRequest, load_body, set_error
from grainguard.interfaces.api.resources.serializers import group_to_dict
from grainguard.interfaces.api.schemas import GroupBody, GroupRoleBody, GroupUserBody

_group_body = TypeAdapter(GroupBody)
_group_role_body = TypeAdapter(GroupRoleBody)
_group_user_body = TypeAdapter(GroupUserBody)


class GroupsResource:
    """POST /v1/groups - register a group."""

    def __init__(self, add_group: AddGroupUseCase) -> None:
        self._add = add_group

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            body = await load_body(req, _group_body)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        try:
            group = await self._add.execute(body.group_name, body.group_source, body.id)
            resp.media = group_to_dict(group)
            resp.status = falcon.HTTP_201
        except AlreadyExists as e:
            set_error(resp, falcon.HTTP_409, str(e))


class GroupResource:
    """GET/DELETE /v1/groups/{group_name}."""

    def __init__(self, get_group_roles: GetGroupRolesUseCase, delete_group: DeleteGroupUseCase) -> None:
        self._get = get_group_roles
        self._delete = delete_group

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group_name: str
    ) -> None:
        try:
            group, roles = await self._get.execute(group_name)
            resp.media = group_to_dict(group, roles)
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group_name: str
    ) -> None:
        try:
            await self._delete.execute(group_name)
            resp.status = falcon.HTTP_204
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))


class GroupRolesResource:
    """GET/POST/DELETE /v1/groups/{group_name}/roles."""

    def __init__(
        self,
        get_group_roles: GetGroupRolesUseCase,
        add_role: AddRoleToGroupUseCase,
        remove_role: RemoveRoleFromGroupUseCase,
    ) -> None:
        self._get = get_group_roles
        self._add = add_role
        self._remove = remove_role

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group_name: str
    ) -> None:
        """Roles of the group, optionally scoped by grain and securable_item."""
        try:
            group, roles = await self._get.execute(
                group_name,
                grain=req.get_param("grain") or None,
                securable_item=req.get_param("securable_item") or None,
            )
            resp.media = group_to_dict(group, roles)
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))

    async def _update(self, req, resp, group_name: str, use_case) -> None:
        try:
            body = await load_body(req, _group_role_body)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        try:
            group = await use_case.execute(group_name, body.id)
            resp.media = group_to_dict(group)
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group_name: str
    ) -> None:
        await self._update(req, resp, group_name, self._add)

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group_name: str
    ) -> None:
        await self._update(req, resp, group_name, self._remove)


class GroupUsersResource:
    """POST/DELETE /v1/groups/{group_name}/users - custom group membership."""

    def __init__(
        self, add_user: AddUserToGroupUseCase, remove_user: RemoveUserFromGroupUseCase
    ) -> None:
        self._add = add_user
        self._remove = remove_user

    async def _update(self, req, resp, group_name: str, use_case) -> None:
        try:
            body = await load_body(req, _group_user_body)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        try:
            group = await use_case.execute(group_name, body.identity_provider, body.subject_id)
            resp.media = group_to_dict(group)
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))
        except ValidationError as e:
            set_error(resp, falcon.HTTP_400, str(e), e.details)

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group_name: str
    ) -> None:
        await self._update(req, resp, group_name, self._add)

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group_name: str
    ) -> None:
        await self._update(req, resp, group_name, self._remove)
