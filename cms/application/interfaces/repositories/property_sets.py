from __future__ import annotations

from typing import Protocol

from cms.domain.models.element import Element, ElementPropertySet, PropertySet


class ElementPropertySetRepository(Protocol):
    async def list_for_element(
        self, element_class: str, element_id: int
    ) -> list[ElementPropertySet]: ...

    async def get_element(self, link: ElementPropertySet) -> Element | None: ...

    async def get_property_set(self, link: ElementPropertySet) -> PropertySet | None: ...
