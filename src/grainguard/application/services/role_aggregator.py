"""Role aggregation - granted and denied permissions across role chains."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from grainguard.application.services.role_graph import RoleGraph
from grainguard.domain.entities import Role


@dataclass
class RoleAggregate:
    """Flattened permission ids over a set of roles and all their ancestors."""

    granted: set[UUID] = field(default_factory=set)
    denied: set[UUID] = field(default_factory=set)

    @property
    def effective(self) -> set[UUID]:
        """Granted ids minus every denied id, whichever chain declared it."""
        return self.granted - self.denied


class RoleAggregator:
    """Unions role-level grants and denials over ancestor closures."""

    def __init__(self, graph: RoleGraph) -> None:
        self._graph = graph

    async def aggregate(self, roles: Iterable[Role]) -> RoleAggregate:
        """Aggregate the given directly-assigned roles."""
        result = RoleAggregate()
        seen: set[UUID] = set()
        for role in roles:
            for member in await self._graph.ancestor_chain(role):
                if member.id in seen:
                    continue
                seen.add(member.id)
                result.granted.update(member.permissions)
                result.denied.update(member.denied_permissions)
        return result
