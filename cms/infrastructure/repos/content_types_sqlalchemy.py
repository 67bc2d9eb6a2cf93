from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.errors import ConflictError, NotFound
from cms.application.interfaces.repositories.content_types import ContentTypeRepository
from cms.domain.models.content_type import ContentType
from cms.infrastructure.db.orm.content_type import ContentTypeORM


def to_domain(orm: ContentTypeORM) -> ContentType:
    return ContentType(
        id=orm.id,
        name=orm.name,
        description=orm.description,
        mime_type=orm.mime_type,
        file_extensions=orm.file_extensions,
        headers=list(orm.headers or []),
        binary=orm.binary,
    )


class ContentTypesSQLAlchemyRepository(ContentTypeRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, content_type_id: int) -> ContentType | None:
        orm = await self.session.get(ContentTypeORM, content_type_id)
        return to_domain(orm) if orm else None

    async def update(self, content_type: ContentType) -> ContentType:
        orm = await self.session.get(ContentTypeORM, content_type.id)
        if orm is None:
            raise NotFound("Content type not found")
        orm.name = content_type.name
        orm.description = content_type.description
        orm.mime_type = content_type.mime_type
        orm.file_extensions = content_type.file_extensions
        orm.headers = list(content_type.headers)
        orm.binary = content_type.binary
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConflictError("A content type with that name already exists") from exc
        return to_domain(orm)
