from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.errors import ValidationError
from cms.application.interfaces.repositories.property_sets import ElementPropertySetRepository
from cms.domain.models.element import Element, ElementPropertySet, PropertySet
from cms.infrastructure.db.orm.element import (
    ELEMENT_ORM_BY_CLASS,
    ElementPropertySetORM,
    PropertySetORM,
)


class ElementPropertySetsSQLAlchemyRepository(ElementPropertySetRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_for_element(
        self, element_class: str, element_id: int
    ) -> list[ElementPropertySet]:
        stmt = (
            select(ElementPropertySetORM)
            .where(
                ElementPropertySetORM.element == element_id,
                ElementPropertySetORM.element_class == element_class,
            )
            .order_by(ElementPropertySetORM.property_set)
        )
        result = await self.session.execute(stmt)
        return [
            ElementPropertySet(
                element=row.element, element_class=row.element_class, property_set=row.property_set
            )
            for row in result.scalars().all()
        ]

    async def get_element(self, link: ElementPropertySet) -> Element | None:
        # The target table depends on the link's element_class.
        orm_class = ELEMENT_ORM_BY_CLASS.get(link.element_class)
        if orm_class is None:
            raise ValidationError(
                "Unknown element class", details={"element_class": link.element_class}
            )
        orm = await self.session.get(orm_class, link.element)
        if orm is None:
            return None
        return Element(
            id=orm.id,
            element_class=link.element_class,
            name=orm.name,
            description=orm.description,
            category=orm.category,
        )

    async def get_property_set(self, link: ElementPropertySet) -> PropertySet | None:
        orm = await self.session.get(PropertySetORM, link.property_set)
        if orm is None:
            return None
        return PropertySet(
            id=orm.id,
            name=orm.name,
            description=orm.description,
            properties=dict(orm.properties or {}),
        )
