from __future__ import annotations

from dataclasses import dataclass

from cms.application.errors import NotFound, PermissionDenied, ValidationError
from cms.application.interfaces.unit_of_work import UnitOfWork
from cms.domain.models.element import Element, PropertySet
from cms.domain.value_objects.element_class import ElementClass
from cms.domain.value_objects.permission import Permission


@dataclass(slots=True)
class ElementPropertySets:
    element: Element
    property_sets: list[PropertySet]


def parse_element_class(value: str) -> ElementClass:
    try:
        return ElementClass(value)
    except ValueError as exc:
        raise ValidationError(
            "Unknown element class", details={"element_class": value}
        ) from exc


async def execute(
    uow: UnitOfWork,
    permissions: frozenset[Permission],
    element_class: str,
    element_id: int,
) -> ElementPropertySets:
    if Permission.VIEW_PROPERTY_SETS not in permissions:
        raise PermissionDenied("Not allowed to view property sets")
    klass = parse_element_class(element_class)
    links = await uow.property_sets.list_for_element(klass.value, element_id)

    element: Element | None = None
    property_sets: list[PropertySet] = []
    for link in links:
        if element is None:
            element = await uow.property_sets.get_element(link)
        property_set = await uow.property_sets.get_property_set(link)
        if property_set is not None:
            property_sets.append(property_set)
    if element is None:
        raise NotFound("Element has no property sets")
    return ElementPropertySets(element=element, property_sets=property_sets)
