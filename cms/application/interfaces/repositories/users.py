from __future__ import annotations

from typing import Protocol

from cms.domain.models.user import User
from cms.domain.models.user_profile import UserProfile


class UserRepository(Protocol):
    async def get(self, user_id: int) -> User | None: ...

    async def get_by_username(self, username: str) -> User | None: ...

    async def update(self, user: User) -> User: ...


class UserProfileRepository(Protocol):
    async def get_for_user(self, user_id: int) -> UserProfile | None: ...

    async def add(self, profile: UserProfile) -> UserProfile: ...

    async def update(self, profile: UserProfile) -> UserProfile: ...

    async def email_taken(self, email: str, *, exclude_user_id: int) -> bool: ...
