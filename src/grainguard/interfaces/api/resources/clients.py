"""Client and securable item API resources."""

from uuid import UUID

import falcon.asgi
from pydantic import TypeAdapter

from grainguard.application.use_cases.client.add_client import AddClientUseCase
from grainguard.application.use_cases.client.add_securable_item import AddSecurableItemUseCase
from grainguard.application.use_cases.client.delete_client import DeleteClientUseCase
from grainguard.application.use_cases.client.get_clients import GetClientsUseCase
from grainguard.application.use_cases.client.get_securable_item import GetSecurableItemUseCase
from grainguard.domain.exceptions import AlreadyExists, NotFound
from grainguard.interfaces.api.errors import BadRequest, load_body, set_error
from grainguard.interfaces.api.resources.serializers import (
    client_to_dict,
    securable_item_to_dict,
)
from grainguard.interfaces.api.schemas import ClientBody, SecurableItemBody

_client_body = TypeAdapter(ClientBody)
_securable_item_body = TypeAdapter(SecurableItemBody)


def _actor(req: falcon.asgi.Request) -> str | None:
    principal = getattr(req.context, "principal", None)
    return principal.subject_id if principal else None


class ClientsResource:
    """GET/POST /v1/clients - list and register clients."""

    def __init__(self, get_clients: GetClientsUseCase, add_client: AddClientUseCase) -> None:
        self._get = get_clients
        self._add = add_client

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        clients = await self._get.execute()
        resp.media = {"items": [client_to_dict(c) for c in clients]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            body = await load_body(req, _client_body)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        try:
            client = await self._add.execute(body.id, body.name, actor_id=_actor(req))
            resp.media = client_to_dict(client)
            resp.status = falcon.HTTP_201
        except AlreadyExists as e:
            set_error(resp, falcon.HTTP_409, str(e))


class ClientResource:
    """GET/DELETE /v1/clients/{client_id}."""

    def __init__(self, get_clients: GetClientsUseCase, delete_client: DeleteClientUseCase) -> None:
        self._get = get_clients
        self._delete = delete_client

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, client_id: str
    ) -> None:
        try:
            client = await self._get.get(client_id)
            resp.media = client_to_dict(client)
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, client_id: str
    ) -> None:
        try:
            await self._delete.execute(client_id)
            resp.status = falcon.HTTP_204
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))


class SecurableItemsResource:
    """Securable items of a client.

    GET/POST /v1/clients/{client_id}/securableitems act on the top-level item;
    the ``/{securable_item_id}`` form acts on a nested item. POST adds a child.
    """

    def __init__(
        self,
        get_securable_item: GetSecurableItemUseCase,
        add_securable_item: AddSecurableItemUseCase,
    ) -> None:
        self._get = get_securable_item
        self._add = add_securable_item

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, client_id: str
    ) -> None:
        await self._show(resp, client_id, None)

    async def on_get_item(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        client_id: str,
        securable_item_id: str,
    ) -> None:
        try:
            item_id = UUID(securable_item_id)
        except ValueError:
            set_error(resp, falcon.HTTP_400, "securable_item_id must be a UUID")
            return
        await self._show(resp, client_id, item_id)

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, client_id: str
    ) -> None:
        await self._create(req, resp, client_id, None)

    async def on_post_item(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        client_id: str,
        securable_item_id: str,
    ) -> None:
        try:
            parent_id = UUID(securable_item_id)
        except ValueError:
            set_error(resp, falcon.HTTP_400, "securable_item_id must be a UUID")
            return
        await self._create(req, resp, client_id, parent_id)

    async def _show(self, resp, client_id: str, item_id: UUID | None) -> None:
        try:
            item = await self._get.execute(client_id, item_id)
            resp.media = securable_item_to_dict(item)
            resp.status = falcon.HTTP_200
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))

    async def _create(self, req, resp, client_id: str, parent_id: UUID | None) -> None:
        try:
            body = await load_body(req, _securable_item_body)
        except BadRequest as e:
            set_error(resp, falcon.HTTP_400, str(e))
            return

        try:
            item = await self._add.execute(
                client_id, body.name, parent_id=parent_id, actor_id=_actor(req)
            )
            resp.media = securable_item_to_dict(item)
            resp.status = falcon.HTTP_201
        except NotFound as e:
            set_error(resp, falcon.HTTP_404, str(e))
        except AlreadyExists as e:
            set_error(resp, falcon.HTTP_409, str(e))
