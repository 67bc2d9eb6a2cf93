from __future__ import annotations

from fastapi import APIRouter, Depends

from cms.application.use_cases.users import registry
from cms.application.use_cases.users.update_user import UpdateUserInput, UserServices
from cms.domain.models.user_profile import PROFILE_FIELDS
from cms.infrastructure.auth.context import AuthContext
from cms.interfaces.http.deps import get_auth_context, get_uow, get_user_services
from cms.interfaces.http.schemas.users import (
    MembershipSchema,
    UpdateUserRequest,
    UpdateUserResponse,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.put("/{user_id}", response_model=UpdateUserResponse)
async def update_user_endpoint(
    user_id: int,
    payload: UpdateUserRequest,
    context: AuthContext = Depends(get_auth_context),
    uow=Depends(get_uow),
    services: UserServices = Depends(get_user_services),
) -> UpdateUserResponse:
    groups = payload.groups
    if isinstance(groups, list):
        groups = [g.model_dump() for g in groups]
    processor = registry.resolve(payload.class_key)
    result = await processor(
        uow=uow,
        requester_id=context.user_id,
        permissions=context.permissions,
        user_id=user_id,
        payload=UpdateUserInput(
            class_key=payload.class_key,
            username=payload.username,
            active=payload.active,
            blocked=payload.blocked,
            sudo=payload.sudo,
            profile={name: getattr(payload, name) for name in PROFILE_FIELDS},
            remote_data=payload.remote_data,
            groups=groups,
            passwordgenmethod=payload.passwordgenmethod,
            specifiedpassword=payload.specifiedpassword,
            confirmpassword=payload.confirmpassword,
        ),
        services=services,
    )
    return UpdateUserResponse(
        message=result.message,
        object=result.user,
        added_memberships=[MembershipSchema.model_validate(m) for m in result.added_memberships],
        primary_group=result.primary_group,
    )
