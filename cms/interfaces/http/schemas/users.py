from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GroupAssignmentSchema(BaseModel):
    usergroup: int
    role: int = 0
    rank: int | None = None


class UpdateUserRequest(BaseModel):
    class_key: str = "user"
    username: str | None = None
    active: bool | int | str | None = None
    blocked: bool | int | str | None = None
    sudo: bool | int | str | None = None
    fullname: str | None = None
    email: str | None = None
    phone: str | None = None
    mobilephone: str | None = None
    gender: int | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    website: str | None = None
    comment: str | None = None
    extended: dict[str, Any] | None = None
    remote_data: dict[str, Any] | str | None = Field(default=None, alias="remoteData")
    groups: list[GroupAssignmentSchema] | str | None = None
    passwordgenmethod: str | None = None
    specifiedpassword: str | None = None
    confirmpassword: str | None = None

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MembershipSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_id: int
    group_id: int
    role: int
    rank: int


class UpdateUserResponse(BaseModel):
    success: bool = True
    message: str = ""
    object: dict[str, Any]
    added_memberships: list[MembershipSchema]
    primary_group: int
