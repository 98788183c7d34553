"""Auth middleware - extracts the principal from a bearer token or allows anonymous."""

from dataclasses import dataclass, field

import falcon.asgi

from grainguard.application.dto.principal import PrincipalContext

ANONYMOUS = "anonymous"


@dataclass
class RequestPrincipal:
    """Principal from request context."""

    subject_id: str
    identity_provider: str
    groups: list[str] = field(default_factory=list)
    username: str | None = None

    @property
    def is_anonymous(self) -> bool:
        return self.subject_id == ANONYMOUS and self.identity_provider == ANONYMOUS

    def to_context(self) -> PrincipalContext:
        return PrincipalContext(
            identity_provider=self.identity_provider,
            subject_id=self.subject_id,
            groups=frozenset(self.groups),
        )


class AuthMiddleware:
    """Middleware that validates the bearer token and sets req.context.principal."""

    def __init__(self, token_provider=None) -> None:
        self._token_provider = token_provider

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract principal and group claims from Authorization header."""
        auth = req.get_header("Authorization")
        if auth and auth.startswith("Bearer "):
            token = auth[7:]
            if self._token_provider:
                principal = self._token_provider.decode_token(token)
                if principal:
                    req.context.principal = RequestPrincipal(
                        subject_id=principal.subject_id,
                        identity_provider=principal.identity_provider,
                        groups=list(principal.groups),
                        username=principal.username,
                    )
                    return
            req.context.principal = None
        else:
            req.context.principal = RequestPrincipal(
                subject_id=ANONYMOUS, identity_provider=ANONYMOUS
            )
