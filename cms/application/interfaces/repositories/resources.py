from __future__ import annotations

from typing import Protocol

from cms.domain.models.resource import Resource


class ResourceRepository(Protocol):
    async def count_by_content_type(self, content_type_id: int) -> int: ...

    async def list_recently_edited(self, user_id: int, *, limit: int = 10) -> list[Resource]: ...

    async def refresh_uris(self) -> int: ...
