"""Add user to group use case."""

from datetime import UTC, datetime

from grainguard.domain.entities import Group, GroupMember, User
from grainguard.domain.exceptions import NotFound, ValidationError


class AddUserToGroupUseCase:
    """Add a user to a custom group.

    Directory groups are synchronized from the identity provider and
    never hold users directly.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, group_name: str, identity_provider: str, subject_id: str) -> Group:
        async with self._uow_factory() as uow:
            group = await uow.groups.get_by_name(group_name)
            if not group:
                raise NotFound("Group", group_name)
            if not group.is_custom:
                raise ValidationError(
                    f"Group {group_name} is not a custom group; users can only be "
                    "added to custom groups"
                )

            if not await uow.users.get(identity_provider, subject_id):
                await uow.users.create(
                    User(
                        identity_provider=identity_provider,
                        subject_id=subject_id,
                        created_at=datetime.now(UTC),
                    )
                )

            if not group.has_user(identity_provider, subject_id):
                group.users.append(GroupMember(identity_provider, subject_id))
                await uow.groups.update(group)
            return group
