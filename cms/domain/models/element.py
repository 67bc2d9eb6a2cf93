from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True, frozen=True)
class Element:
    """A named manager element (chunk, snippet, template, plugin or TV)."""

    id: int
    element_class: str
    name: str
    description: str = ""
    category: int = 0


@dataclass(slots=True, frozen=True)
class PropertySet:
    id: int
    name: str
    description: str = ""
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class ElementPropertySet:
    """Link between an element of any class and a property set."""

    element: int
    element_class: str
    property_set: int
