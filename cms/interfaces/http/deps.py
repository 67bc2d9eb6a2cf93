from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Request

from cms.application.errors import AuthError
from cms.application.use_cases.users.update_user import UserServices
from cms.config.settings import Settings, get_settings
from cms.infrastructure.auth.context import AuthContext
from cms.infrastructure.dashboard.widgets import WidgetRenderer
from cms.infrastructure.db.session import SQLAlchemyUnitOfWork


def _app_state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} not configured")
    return value


async def get_auth_context(request: Request) -> AuthContext:
    context = getattr(request.state, "auth_context", None)
    if context is None:
        raise AuthError("Authentication required")
    return context


async def get_uow(request: Request) -> AsyncIterator[SQLAlchemyUnitOfWork]:
    uow = SQLAlchemyUnitOfWork(_app_state(request, "session_factory"))
    async with uow:
        yield uow


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_widget_renderer(request: Request) -> WidgetRenderer:
    return _app_state(request, "widget_renderer")


def get_user_services(request: Request) -> UserServices:
    return UserServices(
        events=_app_state(request, "event_dispatcher"),
        password_hasher=_app_state(request, "password_hasher"),
        email_service=_app_state(request, "email_service"),
        email_renderer=_app_state(request, "email_renderer"),
        settings=get_app_settings(request),
    )
