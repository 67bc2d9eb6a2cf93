from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    code = "app_error"
    status_code = 400

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class AuthError(AppError):
    code = "auth_error"
    status_code = 401


class PermissionDenied(AppError):
    code = "forbidden"
    status_code = 403


class NotFound(AppError):
    code = "not_found"
    status_code = 404


class ValidationError(AppError):
    code = "validation_error"
    status_code = 422


class ConflictError(AppError):
    code = "conflict"
    status_code = 409


class VetoedAddition(ConflictError):
    """A plugin rejected adding a user to a group; the message is the plugin's own."""

    code = "vetoed_addition"


class VetoedSave(ConflictError):
    code = "vetoed_save"


class InfrastructureError(AppError):
    code = "infrastructure_error"
    status_code = 500


class PersistenceFailure(InfrastructureError):
    code = "persistence_failure"


class EmailDeliveryError(InfrastructureError):
    code = "email_error"
    status_code = 502
