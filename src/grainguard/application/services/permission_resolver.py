"""Permission resolution engine - effective permissions for a principal."""

import logging

from grainguard.application.dto.principal import PrincipalContext
from grainguard.application.ports import UnitOfWork
from grainguard.application.services import granular_permissions
from grainguard.application.services.membership_resolver import MembershipResolver
from grainguard.application.services.role_aggregator import RoleAggregator
from grainguard.application.services.role_graph import RoleGraph
from grainguard.domain.exceptions import DataIntegrityError
from grainguard.domain.value_objects import PermissionKey

logger = logging.getLogger(__name__)


def merge(
    role_effective: set[PermissionKey],
    user_allow: set[PermissionKey],
    user_deny: set[PermissionKey],
) -> set[PermissionKey]:
    """(role grants ∪ user allows) − user denies."""
    return (role_effective | user_allow) - user_deny


class PermissionResolver:
    """Computes effective permission sets from data read in one unit of work.

    Holds no state between calls; construct one per unit of work.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._membership = MembershipResolver(uow.groups, uow.roles)

    async def role_permissions(
        self,
        principal: PrincipalContext,
        grain: str | None = None,
        securable_item: str | None = None,
    ) -> set[PermissionKey]:
        """Role-sourced permissions after role-level denials, restricted to scope."""
        roles = await self._membership.roles_for_principal(principal, grain, securable_item)
        if not roles:
            return set()
        aggregator = RoleAggregator(RoleGraph(self._uow.roles))
        try:
            aggregate = await aggregator.aggregate(roles)
        except DataIntegrityError as e:
            logger.error("Role hierarchy integrity error for role %s: %s", e.role_id, e)
            raise
        if not aggregate.effective:
            return set()
        permissions = await self._uow.permissions.get_many(aggregate.effective)
        return {
            p.key
            for p in permissions
            if not p.is_deleted and p.key.in_scope(grain, securable_item)
        }

    async def resolve(
        self,
        principal: PrincipalContext,
        grain: str | None = None,
        securable_item: str | None = None,
    ) -> set[PermissionKey]:
        """Effective permissions; no scope means the whole permission space."""
        role_effective = await self.role_permissions(principal, grain, securable_item)

        user = await self._uow.users.get(principal.identity_provider, principal.subject_id)
        overrides = user.granular_permissions if user else []
        user_allow, user_deny = granular_permissions.partition(overrides, grain, securable_item)

        return merge(role_effective, user_allow, user_deny)
