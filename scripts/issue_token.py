#!/usr/bin/env python3
"""
Issue a manager access token for an existing user.

Usage:
  python scripts/issue_token.py --username admin [--permission save_user ...]

Without --permission the token carries every known permission.
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cms.config.settings import get_settings
from cms.domain.value_objects.permission import Permission
from cms.infrastructure.auth.jwt_service import JWTService
from cms.infrastructure.db.session import (
    SQLAlchemyUnitOfWork,
    create_engine,
    create_session_factory,
)


async def issue_token(username: str, permissions: list[str]) -> None:
    settings = get_settings()
    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    jwt_service = JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
        access_token_expires_minutes=settings.jwt_access_token_expires_minutes,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )
    try:
        async with SQLAlchemyUnitOfWork(session_factory) as uow:
            user = await uow.users.get_by_username(username)
        if user is None:
            print(f"❌ User '{username}' not found")
            sys.exit(1)
        token = jwt_service.create_access_token(subject=user.id, permissions=permissions)
        print(f"\n✅ Token for {user.username} (id={user.id}):\n\n{token}")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Issue a manager access token")
    parser.add_argument("--username", required=True, help="Username of an existing user")
    parser.add_argument(
        "--permission",
        action="append",
        choices=[p.value for p in Permission],
        help="Permission to grant (repeatable)",
    )
    args = parser.parse_args()

    asyncio.run(issue_token(args.username, args.permission or [p.value for p in Permission]))
