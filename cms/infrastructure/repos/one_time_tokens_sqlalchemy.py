from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.errors import ConflictError
from cms.application.interfaces.repositories.one_time_tokens import OneTimeTokenRepository
from cms.domain.models.one_time_token import OneTimeToken
from cms.infrastructure.db.orm.one_time_token import OneTimeTokenORM


class OneTimeTokensSQLAlchemyRepository(OneTimeTokenRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, token: OneTimeToken) -> OneTimeToken:
        self.session.add(
            OneTimeTokenORM(
                id=token.id,
                token=token.token,
                user_id=token.user_id,
                purpose=token.purpose,
                is_used=token.is_used,
                used_at=token.used_at,
                created_at=token.created_at,
                expires_at=token.expires_at,
                extra_data=token.extra_data,
            )
        )
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("Token already exists") from exc
        return token

    async def invalidate_all_for_purpose(self, user_id: int, purpose: str) -> None:
        stmt = (
            update(OneTimeTokenORM)
            .where(
                OneTimeTokenORM.user_id == user_id,
                OneTimeTokenORM.purpose == purpose,
                OneTimeTokenORM.is_used == False,  # noqa: E712
            )
            .values(is_used=True, used_at=datetime.now(timezone.utc))
        )
        await self.session.execute(stmt)
