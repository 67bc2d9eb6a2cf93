from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from cms.application.errors import (
    EmailDeliveryError,
    NotFound,
    PermissionDenied,
    ValidationError,
    VetoedSave,
)
from cms.application.events.dispatcher import EventDispatcher
from cms.application.events.models import (
    UserActivated,
    UserBeforeActivate,
    UserBeforeDeactivate,
    UserBeforeFormSave,
    UserDeactivated,
    UserFormSaved,
)
from cms.application.groups.reconciler import GroupMembershipReconciler, parse_group_assignments
from cms.application.interfaces.unit_of_work import UnitOfWork
from cms.config.settings import Settings
from cms.domain.models.membership import GroupAssignment, Membership
from cms.domain.models.one_time_token import OneTimeToken
from cms.domain.models.user import User
from cms.domain.models.user_profile import UserProfile
from cms.domain.value_objects.password_method import PasswordGenMethod
from cms.domain.value_objects.permission import Permission
from cms.infrastructure.auth.password import PasswordHasher
from cms.infrastructure.email.models import EmailMessage, EmailService
from cms.infrastructure.email.renderer.engine import EmailTemplateRenderer
from cms.utils.forms import as_checkbox, as_json, is_valid_email

logger = logging.getLogger(__name__)

PASSWORD_CHANGE_PURPOSE = "password_change"
SECRET_FIELDS = ("hashed_password",)


@dataclass(slots=True)
class UpdateUserInput:
    username: str | None = None
    active: Any = None
    blocked: Any = None
    sudo: Any = None
    profile: dict[str, Any] = field(default_factory=dict)
    remote_data: dict[str, Any] | str | None = None
    groups: Any = None
    passwordgenmethod: str | None = None
    specifiedpassword: str | None = None
    confirmpassword: str | None = None
    class_key: str = "user"


@dataclass(slots=True)
class UpdateUserResult:
    user: dict[str, Any]
    message: str
    added_memberships: list[Membership]
    primary_group: int


@dataclass(slots=True)
class UserServices:
    """Collaborators the user update workflow needs besides the unit of work."""

    events: EventDispatcher
    password_hasher: PasswordHasher
    email_service: EmailService
    email_renderer: EmailTemplateRenderer
    settings: Settings


@dataclass(slots=True)
class _Changes:
    fields: list[str] = field(default_factory=list)
    active_changed: bool = False
    new_password: str | None = None


def _apply_user_fields(
    user: User, payload: UpdateUserInput, permissions: frozenset[Permission], changes: _Changes
) -> None:
    if payload.username is not None and payload.username.strip() != user.username:
        user.username = payload.username.strip()
        changes.fields.append("username")
    for name in ("active", "blocked"):
        value = as_checkbox(getattr(payload, name))
        if value is not None and value != getattr(user, name):
            setattr(user, name, value)
            changes.fields.append(name)
            if name == "active":
                changes.active_changed = True
    sudo = as_checkbox(payload.sudo)
    if sudo is not None and Permission.SET_SUDO in permissions and sudo != user.sudo:
        user.sudo = sudo
        changes.fields.append("sudo")
    if payload.remote_data is not None:
        try:
            remote = as_json(payload.remote_data)
        except ValueError as exc:
            raise ValidationError(
                "User could not be saved", details={"remote_data": "not valid JSON"}
            ) from exc
        user.remote_data = remote
        changes.fields.append("remote_data")


def _resolve_password(
    payload: UpdateUserInput, services: UserServices, errors: dict[str, str], changes: _Changes
) -> None:
    method = payload.passwordgenmethod
    settings = services.settings
    if not method or method == PasswordGenMethod.USER_EMAIL_SPECIFY.value:
        return
    if method == PasswordGenMethod.GENERATE.value:
        changes.new_password = services.password_hasher.generate(settings.generate_password_length)
    elif method == PasswordGenMethod.SPECIFY.value:
        specified = payload.specifiedpassword or ""
        if not specified:
            errors["specifiedpassword"] = "Please specify a password."
        elif specified != (payload.confirmpassword or ""):
            errors["confirmpassword"] = "The passwords you entered do not match."
        elif len(specified) < settings.password_min_length:
            errors["specifiedpassword"] = (
                f"Passwords must be at least {settings.password_min_length} characters long."
            )
        else:
            changes.new_password = specified
    else:
        errors["passwordgenmethod"] = "Unknown password generation method."


async def _validate(
    uow: UnitOfWork,
    user: User,
    profile: UserProfile,
    assignments: list[GroupAssignment] | None,
    payload: UpdateUserInput,
    services: UserServices,
    changes: _Changes,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not user.username:
        errors["username"] = "Please specify a username."
    else:
        other = await uow.users.get_by_username(user.username)
        if other is not None and other.id != user.id:
            errors["username"] = "A user with that username already exists."

    if not profile.email:
        errors["email"] = "Please specify an email address."
    elif not is_valid_email(profile.email):
        errors["email"] = "Please enter a valid email address."
    elif not services.settings.allow_multiple_emails and await uow.profiles.email_taken(
        profile.email, exclude_user_id=user.id
    ):
        errors["email"] = "That email address is already in use."

    _resolve_password(payload, services, errors, changes)

    if assignments:
        wanted = {a.group_id for a in assignments}
        missing = wanted - await uow.user_groups.existing_ids(wanted)
        if missing:
            errors["groups"] = "Unknown user group(s): " + ", ".join(str(i) for i in sorted(missing))

    if changes.active_changed:
        event = UserBeforeActivate(user) if user.active else UserBeforeDeactivate(user)
        rejection = services.events.before(event)
        if rejection is not None:
            errors["active"] = rejection.message
    return errors


async def _send_password_change_email(
    uow: UnitOfWork, user: User, profile: UserProfile, services: UserServices
) -> None:
    settings = services.settings
    token = secrets.token_urlsafe(32)
    await uow.one_time_tokens.invalidate_all_for_purpose(user.id, PASSWORD_CHANGE_PURPOSE)
    await uow.one_time_tokens.add(
        OneTimeToken.create(
            token=token,
            user_id=user.id,
            purpose=PASSWORD_CHANGE_PURPOSE,
            expires_in_minutes=settings.password_change_token_ttl_minutes,
            extra_data={"username": user.username},
        )
    )
    rendered = services.email_renderer.render(
        template_key=PASSWORD_CHANGE_PURPOSE,
        settings=settings,
        context={
            "username": user.username,
            "fullname": profile.fullname,
            "link": f"{settings.manager_url}?a=security/changepassword&hash={token}",
            "ttl_hours": settings.password_change_token_ttl_minutes // 60,
        },
    )
    try:
        await services.email_service.send(
            EmailMessage(
                subject=rendered.subject,
                to=[profile.email],
                text=rendered.text,
                html=rendered.html,
                from_email=settings.email_from_address,
                from_name=settings.email_from_name,
            )
        )
    except Exception as exc:
        raise EmailDeliveryError(f"Error sending email to {profile.email}") from exc


def _to_response(user: User, profile: UserProfile) -> dict[str, Any]:
    data = {**profile.to_dict(), **user.to_dict()}
    for name in SECRET_FIELDS:
        data.pop(name, None)
    return data


async def execute(
    *,
    uow: UnitOfWork,
    requester_id: int,
    permissions: frozenset[Permission],
    user_id: int,
    payload: UpdateUserInput,
    services: UserServices,
) -> UpdateUserResult:
    if Permission.SAVE_USER not in permissions:
        raise PermissionDenied("Not allowed to save users")
    user = await uow.users.get(user_id)
    if user is None:
        raise NotFound("User not found")

    assignments = parse_group_assignments(payload.groups)
    changes = _Changes()
    _apply_user_fields(user, payload, permissions, changes)

    profile = await uow.profiles.get_for_user(user.id)
    profile_is_new = profile is None
    if profile is None:
        profile = UserProfile(internal_key=user.id)
    changes.fields.extend(profile.apply(payload.profile))

    errors = await _validate(uow, user, profile, assignments, payload, services, changes)
    if errors:
        raise ValidationError("User could not be saved", details=errors)

    rejection = services.events.before(UserBeforeFormSave(user, tuple(changes.fields)))
    if rejection is not None:
        raise VetoedSave(rejection.message)

    if changes.new_password:
        user.hashed_password = services.password_hasher.hash(changes.new_password)
        changes.fields.append("password")
    user.updated_at = datetime.now(timezone.utc)
    await uow.users.update(user)
    if profile_is_new:
        profile = await uow.profiles.add(profile)
    else:
        await uow.profiles.update(profile)

    reconciler = GroupMembershipReconciler(uow=uow, events=services.events)
    reconciled = await reconciler.reconcile(user, assignments)

    if payload.passwordgenmethod == PasswordGenMethod.USER_EMAIL_SPECIFY.value:
        await _send_password_change_email(uow, user, profile, services)

    await uow.commit()
    logger.info("User %s updated by %s: %s", user.id, requester_id, ", ".join(changes.fields))

    if changes.active_changed:
        services.events.after(UserActivated(user) if user.active else UserDeactivated(user))
    services.events.after(UserFormSaved(user, tuple(changes.fields)))

    message = ""
    if payload.passwordgenmethod and changes.new_password:
        message = f"The password for this user has been changed to: {changes.new_password}"
    return UpdateUserResult(
        user=_to_response(user, profile),
        message=message,
        added_memberships=reconciled.added,
        primary_group=reconciled.primary_group,
    )
