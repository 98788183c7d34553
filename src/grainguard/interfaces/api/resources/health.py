"""Health check endpoints."""

import logging

import falcon.asgi

from grainguard.domain.exceptions import StorageError, TransientStorageError

logger = logging.getLogger(__name__)


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - storage reachable."""
        try:
            async with self._uow_factory() as uow:
                await uow.roles.list_by_scope(grain="__health__")
        except (StorageError, TransientStorageError) as e:
            logger.warning("Readiness check failed: %s", e)
            resp.media = {"status": "unavailable"}
            resp.status = falcon.HTTP_503
            return
        resp.media = {"status": "ready"}
        resp.status = falcon.HTTP_200
