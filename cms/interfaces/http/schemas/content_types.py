from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class UpdateContentTypeRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    mime_type: str | None = None
    file_extensions: str | None = None
    headers: list[str] | str | None = None
    binary: bool | int | str | None = None


class ContentTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    mime_type: str
    file_extensions: str
    headers: list[str]
    binary: bool
    refreshed_uris: int = 0
