from __future__ import annotations

from typing import Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from cms.application.errors import AppError, AuthError
from cms.config.settings import Settings
from cms.domain.value_objects.permission import Permission
from cms.infrastructure.auth.context import AuthContext

PUBLIC_PATHS: Iterable[str] = (
    "/api/v1/health",
    "/docs",
    "/openapi.json",
    "/redoc",
)


class AuthMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, settings: Settings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return await call_next(request)
        if any(request.url.path.startswith(path) for path in PUBLIC_PATHS):
            return await call_next(request)

        try:
            authorization = request.headers.get("Authorization")
            if not authorization:
                raise AuthError("Missing Authorization header")
            scheme, _, token = authorization.partition(" ")
            if scheme.lower() != "bearer" or not token:
                raise AuthError("Invalid Authorization header")
            jwt_service = getattr(request.app.state, "jwt_service", None)
            if jwt_service is None:
                raise RuntimeError("JWT service not configured")
            claims = jwt_service.decode(token)
            try:
                user_id = int(claims.get("sub"))
            except (TypeError, ValueError) as exc:
                raise AuthError("Token subject is not a valid user id") from exc
            request.state.auth_context = AuthContext(
                user_id=user_id,
                permissions=Permission.parse_many(claims.get("permissions")),
                claims=claims,
            )
        except AppError as exc:
            return JSONResponse(
                status_code=exc.status_code, content={"code": exc.code, "message": exc.message}
            )
        return await call_next(request)
