from __future__ import annotations

from collections import defaultdict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.interfaces.repositories.resources import ResourceRepository
from cms.domain.models.resource import Resource, build_uri
from cms.infrastructure.db.orm.content_type import ContentTypeORM
from cms.infrastructure.db.orm.resource import ResourceORM
from cms.infrastructure.repos.content_types_sqlalchemy import to_domain as content_type_to_domain


class ResourcesSQLAlchemyRepository(ResourceRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: ResourceORM) -> Resource:
        return Resource(
            id=orm.id,
            pagetitle=orm.pagetitle,
            alias=orm.alias,
            parent=orm.parent,
            is_folder=orm.is_folder,
            content_type=orm.content_type,
            uri=orm.uri,
            published=orm.published,
            deleted=orm.deleted,
            editedby=orm.editedby,
            editedon=orm.editedon,
        )

    async def count_by_content_type(self, content_type_id: int) -> int:
        stmt = select(func.count()).where(ResourceORM.content_type == content_type_id)
        return await self.session.scalar(stmt) or 0

    async def list_recently_edited(self, user_id: int, *, limit: int = 10) -> list[Resource]:
        stmt = (
            select(ResourceORM)
            .where(ResourceORM.editedby == user_id, ResourceORM.deleted.is_(False))
            .order_by(ResourceORM.editedon.desc(), ResourceORM.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [self._to_domain(orm) for orm in result.scalars().all()]

    async def refresh_uris(self) -> int:
        """Rebuild every resource URI from its alias path; returns how many changed."""
        types = (await self.session.execute(select(ContentTypeORM))).scalars().all()
        extensions = {t.id: content_type_to_domain(t).primary_extension for t in types}

        rows = (await self.session.execute(select(ResourceORM))).scalars().all()
        children: dict[int, list[ResourceORM]] = defaultdict(list)
        for row in rows:
            children[row.parent].append(row)

        changed = 0
        stack: list[tuple[int, str]] = [(0, "")]
        while stack:
            parent_id, parent_path = stack.pop()
            for row in children.get(parent_id, ()):
                uri = build_uri(
                    row.alias or str(row.id),
                    parent_path=parent_path,
                    is_folder=row.is_folder,
                    extension=extensions.get(row.content_type, ""),
                )
                if row.uri != uri:
                    row.uri = uri
                    changed += 1
                child_path = uri if row.is_folder else uri.removesuffix(
                    extensions.get(row.content_type, "")
                )
                stack.append((row.id, child_path))
        await self.session.flush()
        return changed
