from __future__ import annotations

from dataclasses import dataclass

from cms.domain.models.membership import Membership
from cms.domain.models.user import User
from cms.domain.models.user_group import UserGroup


@dataclass(frozen=True)
class Rejection:
    message: str


@dataclass(frozen=True)
class UserBeforeAddToGroup:
    user: User
    group: UserGroup | None
    membership: Membership


@dataclass(frozen=True)
class UserAddedToGroup:
    user: User
    group: UserGroup | None
    membership: Membership


@dataclass(frozen=True)
class UserBeforeFormSave:
    user: User
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class UserFormSaved:
    user: User
    changed_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class UserBeforeActivate:
    user: User


@dataclass(frozen=True)
class UserBeforeDeactivate:
    user: User


@dataclass(frozen=True)
class UserActivated:
    user: User


@dataclass(frozen=True)
class UserDeactivated:
    user: User


VETOABLE_EVENTS = (
    UserBeforeAddToGroup,
    UserBeforeFormSave,
    UserBeforeActivate,
    UserBeforeDeactivate,
)
