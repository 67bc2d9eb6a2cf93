from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from cms.application.errors import NotFound, PermissionDenied, ValidationError
from cms.application.interfaces.unit_of_work import UnitOfWork
from cms.domain.models.content_type import ContentType
from cms.domain.value_objects.permission import Permission
from cms.utils.forms import as_checkbox, as_json

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UpdateContentTypeInput:
    name: str | None = None
    description: str | None = None
    mime_type: str | None = None
    file_extensions: str | None = None
    headers: list[str] | str | None = None
    binary: Any = None


@dataclass(slots=True)
class UpdateContentTypeResult:
    content_type: ContentType
    refreshed_uris: int = 0


def _parse_headers(value: list[str] | str | None) -> list[str]:
    try:
        headers = as_json(value, default=[])
    except ValueError as exc:
        raise ValidationError(
            "Content type could not be saved", details={"headers": "not valid JSON"}
        ) from exc
    if not isinstance(headers, list):
        raise ValidationError(
            "Content type could not be saved", details={"headers": "expected a list"}
        )
    return [str(h) for h in headers]


async def execute(
    uow: UnitOfWork,
    permissions: frozenset[Permission],
    content_type_id: int,
    payload: UpdateContentTypeInput,
) -> UpdateContentTypeResult:
    if Permission.CONTENT_TYPES not in permissions:
        raise PermissionDenied("Not allowed to manage content types")
    content_type = await uow.content_types.get(content_type_id)
    if content_type is None:
        raise NotFound("Content type not found")

    extensions_changed = (
        payload.file_extensions is not None
        and payload.file_extensions != content_type.file_extensions
    )
    for name in ("name", "description", "mime_type", "file_extensions"):
        value = getattr(payload, name)
        if value is not None:
            setattr(content_type, name, value)
    binary = as_checkbox(payload.binary)
    if binary is not None:
        content_type.binary = binary
    if payload.headers is not None:
        content_type.headers = _parse_headers(payload.headers)

    if not (content_type.name or "").strip():
        raise ValidationError(
            "Content type could not be saved", details={"name": "Please specify a name."}
        )

    refresh = extensions_changed and await uow.resources.count_by_content_type(content_type.id) > 0

    updated = await uow.content_types.update(content_type)
    refreshed = 0
    if refresh:
        refreshed = await uow.resources.refresh_uris()
        logger.info(
            "File extensions of content type %s changed; refreshed %d resource URIs",
            content_type.id,
            refreshed,
        )
    await uow.commit()
    return UpdateContentTypeResult(content_type=updated, refreshed_uris=refreshed)
