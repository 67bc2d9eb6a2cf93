from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from cms.application.interfaces.unit_of_work import UnitOfWork

REPOSITORY_ATTRS = (
    "users",
    "profiles",
    "memberships",
    "user_groups",
    "content_types",
    "resources",
    "property_sets",
    "one_time_tokens",
)


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False, future=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


class SQLAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory
        self.session: AsyncSession | None = None
        self._clear_repositories()

    def _clear_repositories(self) -> None:
        for attr in REPOSITORY_ATTRS:
            setattr(self, attr, None)

    async def __aenter__(self) -> UnitOfWork:
        self.session = self._session_factory()
        from cms.infrastructure.repos.content_types_sqlalchemy import (
            ContentTypesSQLAlchemyRepository,
        )
        from cms.infrastructure.repos.memberships_sqlalchemy import MembershipsSQLAlchemyRepository
        from cms.infrastructure.repos.one_time_tokens_sqlalchemy import (
            OneTimeTokensSQLAlchemyRepository,
        )
        from cms.infrastructure.repos.property_sets_sqlalchemy import (
            ElementPropertySetsSQLAlchemyRepository,
        )
        from cms.infrastructure.repos.resources_sqlalchemy import ResourcesSQLAlchemyRepository
        from cms.infrastructure.repos.user_groups_sqlalchemy import UserGroupsSQLAlchemyRepository
        from cms.infrastructure.repos.users_sqlalchemy import (
            UserProfilesSQLAlchemyRepository,
            UsersSQLAlchemyRepository,
        )

        self.users = UsersSQLAlchemyRepository(self.session)
        self.profiles = UserProfilesSQLAlchemyRepository(self.session)
        self.memberships = MembershipsSQLAlchemyRepository(self.session)
        self.user_groups = UserGroupsSQLAlchemyRepository(self.session)
        self.content_types = ContentTypesSQLAlchemyRepository(self.session)
        self.resources = ResourcesSQLAlchemyRepository(self.session)
        self.property_sets = ElementPropertySetsSQLAlchemyRepository(self.session)
        self.one_time_tokens = OneTimeTokensSQLAlchemyRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if not self.session:
            return
        try:
            if exc:
                await self.session.rollback()
        finally:
            await self.session.close()
            self.session = None
            self._clear_repositories()

    async def commit(self) -> None:
        if not self.session:
            return
        await self.session.commit()

    async def rollback(self) -> None:
        if not self.session:
            return
        await self.session.rollback()
