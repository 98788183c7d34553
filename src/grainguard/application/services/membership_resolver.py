"""Membership resolution - principal groups to directly-assigned roles."""

import logging
from uuid import UUID

from grainguard.application.dto.principal import PrincipalContext
from grainguard.application.ports.repositories import GroupRepository, RoleRepository
from grainguard.domain.entities import Group, Role

logger = logging.getLogger(__name__)


class MembershipResolver:
    """Maps a principal's groups to the roles assigned to those groups."""

    def __init__(self, groups: GroupRepository, roles: RoleRepository) -> None:
        self._groups = groups
        self._roles = roles

    async def groups_for_principal(self, principal: PrincipalContext) -> list[Group]:
        """Non-deleted groups from the claims plus custom groups listing the user."""
        by_name: dict[str, Group] = {}
        if principal.groups:
            for group in await self._groups.get_many_by_name(set(principal.groups)):
                by_name[group.name] = group
        for group in await self._groups.list_by_member(
            principal.identity_provider, principal.subject_id
        ):
            by_name.setdefault(group.name, group)
        return [g for g in by_name.values() if not g.is_deleted]

    async def roles_for_principal(
        self,
        principal: PrincipalContext,
        grain: str | None = None,
        securable_item: str | None = None,
    ) -> list[Role]:
        """Union of the non-deleted member roles of every group, optionally scoped."""
        role_ids: set[UUID] = set()
        for group in await self.groups_for_principal(principal):
            role_ids.update(group.roles)
        if not role_ids:
            return []

        roles = await self._roles.get_many(role_ids)
        found = {r.id for r in roles}
        for missing in role_ids - found:
            logger.warning("Group role %s not found or deleted, skipping", missing)

        result = [
            r for r in roles if not r.is_deleted and r.in_scope(grain, securable_item)
        ]
        result.sort(key=lambda r: (r.grain, r.securable_item, r.name, str(r.id)))
        return result
