from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cms.infrastructure.db.base import Base


class ResourceORM(Base):
    __tablename__ = "resources"
    __table_args__ = (Index("ix_resources_editedby_editedon", "editedby", "editedon"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pagetitle: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    alias: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    parent: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    is_folder: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    content_type: Mapped[int] = mapped_column(
        ForeignKey("content_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    uri: Mapped[str] = mapped_column(Text, nullable=False, default="")
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    editedby: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    editedon: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
