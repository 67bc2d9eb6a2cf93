from __future__ import annotations

from typing import Protocol

from cms.domain.models.membership import Membership


class MembershipRepository(Protocol):
    async def list_for_user(self, user_id: int) -> list[Membership]: ...

    async def add(self, membership: Membership) -> Membership: ...

    async def update(self, membership: Membership) -> None: ...

    async def remove(self, membership: Membership) -> None: ...
