from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cms.domain.value_objects.permission import Permission


@dataclass(slots=True)
class AuthContext:
    user_id: int
    permissions: frozenset[Permission] = frozenset()
    claims: dict[str, Any] = field(default_factory=dict)
