from __future__ import annotations

from sqlalchemy import JSON, Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cms.infrastructure.db.base import Base


class ContentTypeORM(Base):
    __tablename__ = "content_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False, default="text/html")
    file_extensions: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    headers: Mapped[list | None] = mapped_column(JSON, nullable=True)
    binary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
