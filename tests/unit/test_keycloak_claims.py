"""Unit tests for principal extraction from introspected token claims."""

from unittest.mock import MagicMock

import pytest
from keycloak.exceptions import KeycloakError

from grainguard.infrastructure.auth.keycloak_provider import KeycloakProvider


@pytest.fixture
def provider() -> KeycloakProvider:
    return KeycloakProvider(
        server_url="http://keycloak.local",
        realm="grainguard",
        client_id="grainguard-api",
        client_secret="secret",
    )


def test_inactive_token(provider: KeycloakProvider) -> None:
    assert provider.principal_from_claims({"active": False, "sub": "u1"}) is None


def test_user_token_claims(provider: KeycloakProvider) -> None:
    principal = provider.principal_from_claims(
        {
            "active": True,
            "sub": "u1",
            "idp": "windows",
            "groups": ["/admins", "nurses"],
            "preferred_username": "alice",
        }
    )
    assert principal.subject_id == "u1"
    assert principal.identity_provider == "windows"
    assert principal.groups == ["admins", "nurses"]
    assert principal.username == "alice"


def test_default_identity_provider(provider: KeycloakProvider) -> None:
    principal = provider.principal_from_claims({"active": True, "sub": "u1"})
    assert principal.identity_provider == "keycloak"
    assert principal.groups == []


def test_client_credentials_use_client_id(provider: KeycloakProvider) -> None:
    principal = provider.principal_from_claims({"active": True, "azp": "reporting-service"})
    assert principal.subject_id == "reporting-service"
    assert principal.client_id == "reporting-service"


def test_single_group_string(provider: KeycloakProvider) -> None:
    principal = provider.principal_from_claims({"active": True, "sub": "u1", "groups": "/ops"})
    assert principal.groups == ["ops"]


def test_decode_token_failure_returns_none(provider: KeycloakProvider) -> None:
    provider._keycloak = MagicMock()
    provider._keycloak.introspect.side_effect = KeycloakError("unreachable")
    assert provider.decode_token("token") is None


def test_decode_token_introspects(provider: KeycloakProvider) -> None:
    provider._keycloak = MagicMock()
    provider._keycloak.introspect.return_value = {"active": True, "sub": "u2"}
    principal = provider.decode_token("token")
    assert principal.subject_id == "u2"
    provider._keycloak.introspect.assert_called_once_with("token")
