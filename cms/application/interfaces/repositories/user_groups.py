from __future__ import annotations

from typing import Iterable, Protocol

from cms.domain.models.user_group import UserGroup


class UserGroupRepository(Protocol):
    async def get(self, group_id: int) -> UserGroup | None: ...

    async def existing_ids(self, group_ids: Iterable[int]) -> set[int]: ...
