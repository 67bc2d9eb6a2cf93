from __future__ import annotations

import json
from typing import Any

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

_TRUE_VALUES = {"1", "true", "on", "yes"}
_EMAIL_ADAPTER: TypeAdapter[str] = TypeAdapter(EmailStr)


def as_checkbox(value: Any) -> bool | None:
    """Coerce a submitted checkbox value; ``None`` means the field was not sent."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _TRUE_VALUES


def as_json(value: Any, *, default: Any = None) -> Any:
    """Accept either an already-decoded value or a JSON string."""
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return default
        return json.loads(value)
    return value


def is_valid_email(value: str) -> bool:
    try:
        _EMAIL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        return False
    return True
