from __future__ import annotations

from typing import Protocol

from cms.domain.models.content_type import ContentType


class ContentTypeRepository(Protocol):
    async def get(self, content_type_id: int) -> ContentType | None: ...

    async def update(self, content_type: ContentType) -> ContentType: ...
