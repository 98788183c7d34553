"""Keycloak OIDC provider for token validation."""

import logging

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

from grainguard.application.ports import AuthenticatedPrincipal

logger = logging.getLogger(__name__)


class KeycloakProvider:
    """Keycloak OIDC - introspects tokens and extracts principal and group claims."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
        groups_claim: str = "groups",
        identity_provider_claim: str = "idp",
        default_identity_provider: str = "keycloak",
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )
        self._groups_claim = groups_claim
        self._idp_claim = identity_provider_claim
        self._default_idp = default_identity_provider

    def principal_from_claims(self, token_info: dict) -> AuthenticatedPrincipal | None:
        """Build the principal from introspected claims; None if inactive."""
        if not token_info.get("active"):
            return None
        client_id = token_info.get("client_id") or token_info.get("azp")
        subject = token_info.get("sub") or client_id
        if not subject:
            return None
        groups = token_info.get(self._groups_claim) or []
        if isinstance(groups, str):
            groups = [groups]
        return AuthenticatedPrincipal(
            subject_id=subject,
            identity_provider=token_info.get(self._idp_claim) or self._default_idp,
            groups=[g.lstrip("/") for g in groups],
            username=token_info.get("preferred_username"),
            client_id=client_id,
        )

    def decode_token(self, token: str) -> AuthenticatedPrincipal | None:
        """Introspect token, return principal or None."""
        try:
            token_info = self._keycloak.introspect(token)
        except KeycloakError as e:
            logger.warning("Token introspection failed: %s", e)
            return None
        return self.principal_from_claims(token_info)
