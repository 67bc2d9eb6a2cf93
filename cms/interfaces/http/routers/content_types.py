from __future__ import annotations

from fastapi import APIRouter, Depends

from cms.application.use_cases.content_types import update_content_type
from cms.infrastructure.auth.context import AuthContext
from cms.interfaces.http.deps import get_auth_context, get_uow
from cms.interfaces.http.schemas.content_types import (
    ContentTypeResponse,
    UpdateContentTypeRequest,
)

router = APIRouter(prefix="/content-types", tags=["content-types"])


@router.put("/{content_type_id}", response_model=ContentTypeResponse)
async def update_content_type_endpoint(
    content_type_id: int,
    payload: UpdateContentTypeRequest,
    context: AuthContext = Depends(get_auth_context),
    uow=Depends(get_uow),
) -> ContentTypeResponse:
    result = await update_content_type.execute(
        uow,
        context.permissions,
        content_type_id,
        update_content_type.UpdateContentTypeInput(**payload.model_dump()),
    )
    response = ContentTypeResponse.model_validate(result.content_type)
    response.refreshed_uris = result.refreshed_uris
    return response
