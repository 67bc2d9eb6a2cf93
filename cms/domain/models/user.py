from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(slots=True)
class User:
    id: int
    username: str
    hashed_password: str = ""
    class_key: str = "user"
    active: bool = True
    blocked: bool = False
    sudo: bool = False
    primary_group: int = 0
    remote_data: dict[str, Any] | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "class_key": self.class_key,
            "active": self.active,
            "blocked": self.blocked,
            "sudo": self.sudo,
            "primary_group": self.primary_group,
            "remote_data": self.remote_data,
            "hashed_password": self.hashed_password,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
