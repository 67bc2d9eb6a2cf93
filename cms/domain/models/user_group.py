from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class UserGroup:
    id: int
    name: str
    description: str = ""
    parent: int = 0
