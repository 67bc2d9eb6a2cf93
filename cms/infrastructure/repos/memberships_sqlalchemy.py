from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.errors import PersistenceFailure
from cms.application.interfaces.repositories.memberships import MembershipRepository
from cms.domain.models.membership import Membership
from cms.infrastructure.db.orm.user_group import UserGroupMemberORM


class MembershipsSQLAlchemyRepository(MembershipRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, row: UserGroupMemberORM) -> Membership:
        return Membership(
            id=row.id,
            member_id=row.member_id,
            group_id=row.group_id,
            role=row.role,
            rank=row.rank,
        )

    async def list_for_user(self, user_id: int) -> list[Membership]:
        stmt = (
            select(UserGroupMemberORM)
            .where(UserGroupMemberORM.member_id == user_id)
            .order_by(UserGroupMemberORM.rank, UserGroupMemberORM.id)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(row) for row in result.scalars().all()]

    async def add(self, membership: Membership) -> Membership:
        orm = UserGroupMemberORM(
            member_id=membership.member_id,
            group_id=membership.group_id,
            role=membership.role,
            rank=membership.rank,
        )
        self.session.add(orm)
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceFailure(
                "Error saving user group membership",
                details={"group_id": membership.group_id},
            ) from exc
        return self._to_domain(orm)

    async def update(self, membership: Membership) -> None:
        stmt = select(UserGroupMemberORM).where(
            UserGroupMemberORM.member_id == membership.member_id,
            UserGroupMemberORM.group_id == membership.group_id,
        )
        orm = (await self.session.execute(stmt)).scalar_one_or_none()
        if orm is None:
            raise PersistenceFailure(
                "User group membership disappeared", details={"group_id": membership.group_id}
            )
        orm.role = membership.role
        orm.rank = membership.rank
        await self.session.flush()

    async def remove(self, membership: Membership) -> None:
        stmt = delete(UserGroupMemberORM).where(
            UserGroupMemberORM.member_id == membership.member_id,
            UserGroupMemberORM.group_id == membership.group_id,
        )
        await self.session.execute(stmt)
