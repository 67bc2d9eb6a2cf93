from __future__ import annotations

from enum import Enum


class Permission(str, Enum):
    SAVE_USER = "save_user"
    SET_SUDO = "set_sudo"
    CONTENT_TYPES = "content_types"
    VIEW_PROPERTY_SETS = "property_sets"

    @classmethod
    def parse_many(cls, values) -> frozenset[Permission]:
        known = {p.value: p for p in cls}
        return frozenset(known[v] for v in values or () if v in known)
