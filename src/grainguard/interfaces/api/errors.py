"""Request parsing and error responses shared by resources."""

import logging
from typing import TypeVar

import falcon
import falcon.asgi
import pydantic
from pydantic import TypeAdapter

from grainguard.domain.exceptions import DataIntegrityError, StorageError, TransientStorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BadRequest(Exception):
    """Request body or parameters failed boundary validation."""

    pass


def set_error(
    resp: falcon.asgi.Response,
    status: str,
    message: str,
    details: dict[str, list[str]] | None = None,
) -> None:
    """Write a JSON error body."""
    resp.status = status
    resp.media = {"error": message}
    if details:
        resp.media["details"] = details


def _describe(e: pydantic.ValidationError) -> str:
    parts = []
    for err in e.errors():
        location = ".".join(str(p) for p in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


async def load_body(req: falcon.asgi.Request, adapter: TypeAdapter[T]) -> T:
    """Read JSON media and validate it into the given type."""
    try:
        media = await req.get_media()
    except (falcon.MediaMalformedError, falcon.MediaNotFoundError) as e:
        raise BadRequest("Request body must be valid JSON") from e
    try:
        return adapter.validate_python(media)
    except pydantic.ValidationError as e:
        raise BadRequest(_describe(e)) from e


async def handle_data_integrity(req, resp, ex: DataIntegrityError, params) -> None:
    logger.error("Data integrity error on %s %s: %s", req.method, req.path, ex)
    set_error(resp, falcon.HTTP_500, "Stored role hierarchy is inconsistent")


async def handle_storage_error(
    req, resp, ex: StorageError | TransientStorageError, params
) -> None:
    logger.error("Storage error on %s %s: %s", req.method, req.path, ex)
    set_error(resp, falcon.HTTP_503, "Storage unavailable")


async def handle_unexpected(req, resp, ex: Exception, params) -> None:
    logger.error("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    set_error(resp, falcon.HTTP_500, "500 Internal Server Error")


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Map server-side domain failures to responses."""
    app.add_error_handler(Exception, handle_unexpected)
    app.add_error_handler(DataIntegrityError, handle_data_integrity)
    app.add_error_handler(StorageError, handle_storage_error)
    app.add_error_handler(TransientStorageError, handle_storage_error)
