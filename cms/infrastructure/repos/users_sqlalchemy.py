from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.errors import ConflictError, NotFound
from cms.application.interfaces.repositories.users import UserProfileRepository, UserRepository
from cms.domain.models.user import User
from cms.domain.models.user_profile import PROFILE_FIELDS, UserProfile
from cms.infrastructure.db.orm.user import UserORM
from cms.infrastructure.db.orm.user_profile import UserProfileORM


class UsersSQLAlchemyRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: UserORM) -> User:
        return User(
            id=orm.id,
            username=orm.username,
            hashed_password=orm.hashed_password,
            class_key=orm.class_key,
            active=orm.active,
            blocked=orm.blocked,
            sudo=orm.sudo,
            primary_group=orm.primary_group,
            remote_data=orm.remote_data,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def get(self, user_id: int) -> User | None:
        orm = await self.session.get(UserORM, user_id)
        return self._to_domain(orm) if orm else None

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(UserORM).where(UserORM.username == username)
        result = await self.session.execute(stmt)
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def update(self, user: User) -> User:
        orm = await self.session.get(UserORM, user.id)
        if orm is None:
            raise NotFound("User not found")
        orm.username = user.username
        orm.hashed_password = user.hashed_password
        orm.class_key = user.class_key
        orm.active = user.active
        orm.blocked = user.blocked
        orm.sudo = user.sudo
        orm.primary_group = user.primary_group
        orm.remote_data = user.remote_data
        orm.updated_at = user.updated_at
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Username already taken") from exc
        return self._to_domain(orm)


class UserProfilesSQLAlchemyRepository(UserProfileRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: UserProfileORM) -> UserProfile:
        values = {name: getattr(orm, name) for name in PROFILE_FIELDS}
        return UserProfile(id=orm.id, internal_key=orm.internal_key, **values)

    async def _get_orm(self, user_id: int) -> UserProfileORM | None:
        stmt = select(UserProfileORM).where(UserProfileORM.internal_key == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_user(self, user_id: int) -> UserProfile | None:
        orm = await self._get_orm(user_id)
        return self._to_domain(orm) if orm else None

    async def add(self, profile: UserProfile) -> UserProfile:
        values = {name: getattr(profile, name) for name in PROFILE_FIELDS}
        orm = UserProfileORM(internal_key=profile.internal_key, **values)
        self.session.add(orm)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("User already has a profile") from exc
        return self._to_domain(orm)

    async def update(self, profile: UserProfile) -> UserProfile:
        orm = await self._get_orm(profile.internal_key)
        if orm is None:
            raise NotFound("User profile not found")
        for name in PROFILE_FIELDS:
            setattr(orm, name, getattr(profile, name))
        await self.session.flush()
        return self._to_domain(orm)

    async def email_taken(self, email: str, *, exclude_user_id: int) -> bool:
        stmt = select(func.count()).where(
            func.lower(UserProfileORM.email) == email.lower(),
            UserProfileORM.internal_key != exclude_user_id,
        )
        return (await self.session.scalar(stmt) or 0) > 0
