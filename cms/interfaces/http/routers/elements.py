from __future__ import annotations

from fastapi import APIRouter, Depends

from cms.application.use_cases.elements import list_property_sets
from cms.infrastructure.auth.context import AuthContext
from cms.interfaces.http.deps import get_auth_context, get_uow
from cms.interfaces.http.schemas.elements import (
    ElementPropertySetsResponse,
    ElementSchema,
    PropertySetSchema,
)

router = APIRouter(prefix="/elements", tags=["elements"])


@router.get(
    "/{element_class}/{element_id}/property-sets", response_model=ElementPropertySetsResponse
)
async def list_element_property_sets(
    element_class: str,
    element_id: int,
    context: AuthContext = Depends(get_auth_context),
    uow=Depends(get_uow),
) -> ElementPropertySetsResponse:
    result = await list_property_sets.execute(uow, context.permissions, element_class, element_id)
    return ElementPropertySetsResponse(
        element=ElementSchema.model_validate(result.element),
        property_sets=[PropertySetSchema.model_validate(p) for p in result.property_sets],
    )
