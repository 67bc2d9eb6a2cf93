from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ElementSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    element_class: str
    name: str
    description: str
    category: int


class PropertySetSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    properties: dict[str, Any]


class ElementPropertySetsResponse(BaseModel):
    element: ElementSchema
    property_sets: list[PropertySetSchema]
