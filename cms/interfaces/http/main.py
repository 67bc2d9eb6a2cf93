from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cms.application.events.dispatcher import EventDispatcher
from cms.config.settings import Settings, get_settings
from cms.infrastructure.auth.jwt_service import JWTService
from cms.infrastructure.auth.password import PasswordHasher
from cms.infrastructure.dashboard.widgets import WidgetRenderer
from cms.infrastructure.db.session import create_engine, create_session_factory
from cms.infrastructure.email.models import EmailService
from cms.infrastructure.email.providers.factory import build_email_service
from cms.infrastructure.email.renderer.engine import EmailTemplateRenderer
from cms.interfaces.http.deps import get_app_settings
from cms.interfaces.http.routers import content_types, dashboard, elements, users
from cms.interfaces.middleware.auth_middleware import AuthMiddleware
from cms.interfaces.middleware.error_handler import register_error_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        engine = getattr(app.state, "engine", None)
        if engine is not None:
            await engine.dispose()


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    # Avoid adding duplicate handlers on reload
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(level)


def create_app(
    *,
    settings: Settings | None = None,
    password_hasher: PasswordHasher | None = None,
    jwt_service: JWTService | None = None,
    event_dispatcher: EventDispatcher | None = None,
    email_service: EmailService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings.log_level)
    app = FastAPI(
        title="CMS Manager Backend",
        version="0.1.0",
        description="Manager API for users, groups, content types and dashboards",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = create_engine(settings.database_url)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.password_hasher = password_hasher or PasswordHasher()
    app.state.jwt_service = jwt_service or JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
        access_token_expires_minutes=settings.jwt_access_token_expires_minutes,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )
    # Plugins register their handlers on this dispatcher at startup.
    app.state.event_dispatcher = event_dispatcher or EventDispatcher()
    app.state.email_service = email_service or build_email_service(settings)
    app.state.email_renderer = EmailTemplateRenderer.create_default()
    app.state.widget_renderer = WidgetRenderer.create_default(manager_url=settings.manager_url)
    register_error_handlers(app)

    api = APIRouter(prefix="/api/v1")
    api.include_router(users.router)
    api.include_router(content_types.router)
    api.include_router(elements.router)
    api.include_router(dashboard.router)

    @api.get("/health", tags=["health"])
    async def health(_: Settings = Depends(get_app_settings)) -> dict[str, str]:  # noqa: ANN001
        return {"status": "ok"}

    app.include_router(api)

    # Auth first, then CORS last so CORS runs outermost and can handle preflight OPTIONS
    app.add_middleware(AuthMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app
