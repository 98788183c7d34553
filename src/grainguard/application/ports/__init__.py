"""Application ports - interfaces for external adapters."""

from grainguard.application.ports.token_provider import AuthenticatedPrincipal, TokenProvider
from grainguard.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AuthenticatedPrincipal",
    "TokenProvider",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
