from __future__ import annotations

from cms.application.errors import ValidationError
from cms.application.interfaces.unit_of_work import UnitOfWork
from cms.domain.models.resource import Resource

MAX_LIMIT = 100


async def execute(uow: UnitOfWork, user_id: int, *, limit: int = 10) -> list[Resource]:
    if limit < 1 or limit > MAX_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}")
    return await uow.resources.list_recently_edited(user_id, limit=limit)
