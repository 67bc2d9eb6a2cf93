from __future__ import annotations

from typing import Protocol

from cms.domain.models.one_time_token import OneTimeToken


class OneTimeTokenRepository(Protocol):
    async def add(self, token: OneTimeToken) -> OneTimeToken: ...

    async def invalidate_all_for_purpose(self, user_id: int, purpose: str) -> None: ...
