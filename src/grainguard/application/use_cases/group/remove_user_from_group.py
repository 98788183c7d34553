"""Remove user from group use case."""

from grainguard.domain.entities import Group
from grainguard.domain.exceptions import NotFound


class RemoveUserFromGroupUseCase:
    """Remove a user from a custom group."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, group_name: str, identity_provider: str, subject_id: str) -> Group:
        async with self._uow_factory() as uow:
            group = await uow.groups.get_by_name(group_name)
            if not group:
                raise NotFound("Group", group_name)
            if not group.has_user(identity_provider, subject_id):
                raise NotFound("User", f"{identity_provider}:{subject_id}")
            group.users = [
                u
                for u in group.users
                if not (u.identity_provider == identity_provider and u.subject_id == subject_id)
            ]
            await uow.groups.update(group)
            return group
