from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Membership:
    member_id: int
    group_id: int
    role: int
    rank: int = 0
    id: int | None = None


@dataclass(slots=True, frozen=True)
class GroupAssignment:
    """A desired membership as submitted by a caller.

    ``rank`` is ``None`` when the caller left it out.
    """

    group_id: int
    role: int
    rank: int | None = None
