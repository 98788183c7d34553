"""Fixtures for API tests."""

import falcon.asgi
import pytest
from falcon.testing import TestClient

from grainguard.interfaces.api.errors import register_error_handlers
from grainguard.interfaces.api.middleware.auth import RequestPrincipal
from grainguard.main import add_routes

from tests.conftest import IDP, SUBJECT


class AuthBypassMiddleware:
    """Middleware that sets context.principal for testing."""

    def __init__(self, groups: list[str]) -> None:
        self._groups = groups

    async def process_request(self, req, resp):
        req.context.principal = RequestPrincipal(
            subject_id=SUBJECT, identity_provider=IDP, groups=list(self._groups)
        )


@pytest.fixture
def claimed_groups() -> list[str]:
    """Group claims carried by the test principal."""
    return ["staff"]


@pytest.fixture
def app(uow_factory, claimed_groups):
    """Falcon ASGI app with API resources over the in-memory stores."""
    app = falcon.asgi.App(middleware=[AuthBypassMiddleware(claimed_groups)])
    register_error_handlers(app)
    add_routes(app, uow_factory)
    return app


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    return TestClient(app)
