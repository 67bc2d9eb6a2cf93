from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from cms.application.errors import ValidationError, VetoedAddition
from cms.application.events.dispatcher import EventDispatcher
from cms.application.events.models import UserAddedToGroup, UserBeforeAddToGroup
from cms.application.interfaces.unit_of_work import UnitOfWork
from cms.domain.models.membership import GroupAssignment, Membership
from cms.domain.models.user import User

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconcileResult:
    primary_group: int
    added: list[Membership] = field(default_factory=list)
    updated: list[Membership] = field(default_factory=list)
    removed: list[Membership] = field(default_factory=list)


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {name}", details={"groups": f"{name} must be an integer"})
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Invalid {name}", details={"groups": f"{name} must be an integer"}
        ) from exc


def parse_group_assignments(raw: Any) -> list[GroupAssignment] | None:
    """Turn a submitted ``groups`` value into assignments.

    Accepts a JSON string or a list of mappings with ``usergroup``, ``role`` and
    an optional ``rank``. ``None`` means "leave memberships alone".
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw) if raw.strip() else []
        except ValueError as exc:
            raise ValidationError(
                "Invalid groups payload", details={"groups": "not valid JSON"}
            ) from exc
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("Invalid groups payload", details={"groups": "expected a list"})

    assignments: list[GroupAssignment] = []
    for entry in raw:
        if isinstance(entry, GroupAssignment):
            assignments.append(entry)
            continue
        if not isinstance(entry, dict) or entry.get("usergroup") in (None, ""):
            raise ValidationError(
                "Invalid groups payload", details={"groups": "each entry needs a usergroup"}
            )
        rank = entry.get("rank")
        assignments.append(
            GroupAssignment(
                group_id=_to_int(entry["usergroup"], "usergroup"),
                role=_to_int(entry.get("role") or 0, "role"),
                rank=None if rank in (None, "") else _to_int(rank, "rank"),
            )
        )
    return assignments


class GroupMembershipReconciler:
    """Bring a user's group memberships in line with a submitted list.

    Works inside the caller's unit of work and never commits: the caller
    commits on success, and any raised error leaves the transaction to be
    rolled back.
    """

    def __init__(self, *, uow: UnitOfWork, events: EventDispatcher) -> None:
        self.uow = uow
        self.events = events

    async def reconcile(
        self, user: User, desired: Sequence[GroupAssignment] | None
    ) -> ReconcileResult:
        if desired is None:
            return ReconcileResult(primary_group=user.primary_group)

        # Duplicate group ids: the last entry wins.
        by_group: dict[int, GroupAssignment] = {}
        for assignment in desired:
            by_group[assignment.group_id] = assignment

        primary = user.primary_group if user.primary_group in by_group else 0

        result = ReconcileResult(primary_group=0)
        retained: set[int] = set()
        for membership in await self.uow.memberships.list_for_user(user.id):
            assignment = by_group.get(membership.group_id)
            if assignment is None:
                result.removed.append(membership)
                continue
            membership.role = assignment.role
            membership.rank = assignment.rank if assignment.rank is not None else 0
            result.updated.append(membership)
            retained.add(membership.group_id)

        for assignment in by_group.values():
            if not assignment.rank:
                primary = assignment.group_id

        pending: list[Membership] = []
        for idx, assignment in enumerate(
            a for a in by_group.values() if a.group_id not in retained
        ):
            pending.append(
                Membership(
                    member_id=user.id,
                    group_id=assignment.group_id,
                    role=assignment.role,
                    rank=assignment.rank if assignment.rank is not None else idx,
                )
            )
            # New groups with no explicit rank take precedence over retained ones.
            if not assignment.rank:
                primary = assignment.group_id

        groups = {}
        for membership in pending:
            group = await self.uow.user_groups.get(membership.group_id)
            groups[membership.group_id] = group
            rejection = self.events.before(UserBeforeAddToGroup(user, group, membership))
            if rejection is not None:
                raise VetoedAddition(rejection.message, details={"group_id": membership.group_id})

        for membership in result.removed:
            await self.uow.memberships.remove(membership)
        for membership in result.updated:
            await self.uow.memberships.update(membership)
        for membership in pending:
            result.added.append(await self.uow.memberships.add(membership))
        for membership in result.added:
            self.events.after(UserAddedToGroup(user, groups.get(membership.group_id), membership))

        user.primary_group = primary
        await self.uow.users.update(user)
        result.primary_group = primary
        logger.info(
            "Reconciled groups for user %s: added=%d updated=%d removed=%d primary=%s",
            user.id,
            len(result.added),
            len(result.updated),
            len(result.removed),
            primary,
        )
        return result
