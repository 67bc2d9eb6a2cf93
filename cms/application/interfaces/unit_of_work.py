from __future__ import annotations

from typing import Protocol

from cms.application.interfaces.repositories.content_types import ContentTypeRepository
from cms.application.interfaces.repositories.memberships import MembershipRepository
from cms.application.interfaces.repositories.one_time_tokens import OneTimeTokenRepository
from cms.application.interfaces.repositories.property_sets import ElementPropertySetRepository
from cms.application.interfaces.repositories.resources import ResourceRepository
from cms.application.interfaces.repositories.user_groups import UserGroupRepository
from cms.application.interfaces.repositories.users import (
    UserProfileRepository,
    UserRepository,
)


class UnitOfWork(Protocol):
    users: UserRepository
    profiles: UserProfileRepository
    memberships: MembershipRepository
    user_groups: UserGroupRepository
    content_types: ContentTypeRepository
    resources: ResourceRepository
    property_sets: ElementPropertySetRepository
    one_time_tokens: OneTimeTokenRepository

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
