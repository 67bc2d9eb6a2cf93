from __future__ import annotations

from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cms.domain.value_objects.element_class import ElementClass
from cms.infrastructure.db.base import Base


class ElementMixin:
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class ChunkORM(ElementMixin, Base):
    __tablename__ = "chunks"


class SnippetORM(ElementMixin, Base):
    __tablename__ = "snippets"


class TemplateORM(ElementMixin, Base):
    __tablename__ = "templates"


class PluginORM(ElementMixin, Base):
    __tablename__ = "plugins"


class TemplateVarORM(ElementMixin, Base):
    __tablename__ = "tvs"


# Resolves the polymorphic ``element_class`` column of a property set link.
ELEMENT_ORM_BY_CLASS: dict[str, type[ElementMixin]] = {
    ElementClass.CHUNK.value: ChunkORM,
    ElementClass.SNIPPET.value: SnippetORM,
    ElementClass.TEMPLATE.value: TemplateORM,
    ElementClass.PLUGIN.value: PluginORM,
    ElementClass.TV.value: TemplateVarORM,
}


class PropertySetORM(Base):
    __tablename__ = "property_sets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    properties: Mapped[dict | None] = mapped_column(JSON, nullable=True)


class ElementPropertySetORM(Base):
    __tablename__ = "element_property_sets"

    element: Mapped[int] = mapped_column(Integer, primary_key=True)
    element_class: Mapped[str] = mapped_column(String(100), primary_key=True)
    property_set: Mapped[int] = mapped_column(
        ForeignKey("property_sets.id", ondelete="CASCADE"), primary_key=True
    )
