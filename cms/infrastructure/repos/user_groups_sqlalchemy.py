from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.interfaces.repositories.user_groups import UserGroupRepository
from cms.domain.models.user_group import UserGroup
from cms.infrastructure.db.orm.user_group import UserGroupORM


class UserGroupsSQLAlchemyRepository(UserGroupRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, group_id: int) -> UserGroup | None:
        orm = await self.session.get(UserGroupORM, group_id)
        if orm is None:
            return None
        return UserGroup(
            id=orm.id, name=orm.name, description=orm.description, parent=orm.parent
        )

    async def existing_ids(self, group_ids: Iterable[int]) -> set[int]:
        ids = set(group_ids)
        if not ids:
            return set()
        stmt = select(UserGroupORM.id).where(UserGroupORM.id.in_(ids))
        result = await self.session.execute(stmt)
        return set(result.scalars().all())
