from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

PROFILE_FIELDS: tuple[str, ...] = (
    "fullname",
    "email",
    "phone",
    "mobilephone",
    "gender",
    "address",
    "city",
    "state",
    "zip",
    "country",
    "website",
    "comment",
    "extended",
)


@dataclass(slots=True)
class UserProfile:
    internal_key: int
    fullname: str = ""
    email: str = ""
    phone: str = ""
    mobilephone: str = ""
    gender: int = 0
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    website: str = ""
    comment: str = ""
    extended: dict[str, Any] | None = None
    id: int | None = None

    def apply(self, values: dict[str, Any]) -> list[str]:
        """Copy known profile fields from ``values``; returns the names that changed."""
        changed = []
        for name in PROFILE_FIELDS:
            if name not in values or values[name] is None:
                continue
            if getattr(self, name) != values[name]:
                setattr(self, name, values[name])
                changed.append(name)
        return changed

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
