from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///default.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from cms.application.events.dispatcher import EventDispatcher
from cms.config.settings import Settings
from cms.domain.value_objects.permission import Permission
from cms.infrastructure.auth.password import PasswordHasher
from cms.infrastructure.db.base import Base
from cms.infrastructure.db.orm.content_type import ContentTypeORM
from cms.infrastructure.db.orm.element import (
    ChunkORM,
    ElementPropertySetORM,
    PropertySetORM,
    SnippetORM,
)
from cms.infrastructure.db.orm.resource import ResourceORM
from cms.infrastructure.db.orm.user import UserORM
from cms.infrastructure.db.orm.user_group import UserGroupMemberORM, UserGroupORM
from cms.infrastructure.db.orm.user_profile import UserProfileORM
from cms.infrastructure.email.providers.logging_provider import LoggingEmailService
from cms.interfaces.http.main import create_app

ADMIN_ID = 1
EDITOR_ID = 2


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    db_path = tmp_path / "test.db"
    return Settings.model_validate(
        {
            "database_url": f"sqlite+aiosqlite:///{db_path}",
            "jwt_secret_key": "test-secret",
            "log_level": "INFO",
            "environment": "test",
            "manager_url": "http://testserver/manager/",
        }
    )


@pytest.fixture()
def email_service() -> LoggingEmailService:
    return LoggingEmailService()


@pytest.fixture()
def event_dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture()
def app(test_settings: Settings, email_service, event_dispatcher):
    return create_app(
        settings=test_settings,
        password_hasher=PasswordHasher(schemes=("pbkdf2_sha256",)),
        event_dispatcher=event_dispatcher,
        email_service=email_service,
    )


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    engine = app.state.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as c:
        yield c


@pytest.fixture()
def auth_headers(app):
    def _make(user_id: int, permissions=tuple(Permission)) -> dict[str, str]:
        token = app.state.jwt_service.create_access_token(
            subject=user_id, permissions=[p.value for p in permissions]
        )
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
async def seeded(app, client) -> dict[str, int]:
    now = datetime.now(timezone.utc)
    async with app.state.session_factory() as session:
        session.add_all(
            [
                UserORM(id=ADMIN_ID, username="admin", primary_group=1),
                UserORM(id=EDITOR_ID, username="editor", primary_group=1),
                UserGroupORM(id=1, name="Administrator"),
                UserGroupORM(id=2, name="Editors"),
                UserGroupORM(id=3, name="Reviewers"),
                ContentTypeORM(id=1, name="HTML", mime_type="text/html", file_extensions=".html"),
                ContentTypeORM(id=2, name="JSON", mime_type="application/json", file_extensions=".json"),
                ChunkORM(id=1, name="header"),
                SnippetORM(id=1, name="menu"),
                PropertySetORM(id=1, name="defaults", properties={"limit": 10}),
                PropertySetORM(id=2, name="compact", properties={"limit": 3}),
            ]
        )
        await session.flush()
        session.add_all(
            [
                UserProfileORM(internal_key=ADMIN_ID, fullname="Admin", email="admin@example.com"),
                UserProfileORM(internal_key=EDITOR_ID, fullname="Eddie", email="editor@example.com"),
                UserGroupMemberORM(member_id=EDITOR_ID, group_id=1, role=2, rank=1),
                UserGroupMemberORM(member_id=EDITOR_ID, group_id=2, role=2, rank=2),
                ResourceORM(id=1, pagetitle="Home", alias="index", content_type=1, uri="index.html",
                            editedby=ADMIN_ID, editedon=now - timedelta(hours=2)),
                ResourceORM(id=2, pagetitle="Blog", alias="blog", is_folder=True, content_type=1,
                            uri="blog/", editedby=ADMIN_ID, editedon=now - timedelta(hours=1)),
                ResourceORM(id=3, pagetitle="Feed", alias="feed", parent=2, content_type=2,
                            uri="blog/feed.json", editedby=EDITOR_ID, editedon=now),
                ElementPropertySetORM(element=1, element_class="chunk", property_set=1),
                ElementPropertySetORM(element=1, element_class="chunk", property_set=2),
                ElementPropertySetORM(element=1, element_class="snippet", property_set=2),
            ]
        )
        await session.commit()
    return {"admin": ADMIN_ID, "editor": EDITOR_ID}
