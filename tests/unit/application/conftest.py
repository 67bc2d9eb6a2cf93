from __future__ import annotations

from dataclasses import replace
from types import SimpleNamespace

import pytest

from cms.application.errors import PersistenceFailure
from cms.domain.models.membership import Membership
from cms.domain.models.user import User
from cms.domain.models.user_group import UserGroup
from cms.domain.models.user_profile import UserProfile


class InMemoryUsers:
    def __init__(self, users=()) -> None:
        self.rows: dict[int, User] = {u.id: u for u in users}
        self.updates = 0

    async def get(self, user_id):
        user = self.rows.get(user_id)
        return replace(user) if user else None

    async def get_by_username(self, username):
        for user in self.rows.values():
            if user.username == username:
                return replace(user)
        return None

    async def update(self, user):
        self.updates += 1
        self.rows[user.id] = replace(user)
        return replace(user)


class InMemoryProfiles:
    def __init__(self, profiles=()) -> None:
        self.rows: dict[int, UserProfile] = {p.internal_key: p for p in profiles}
        self.added: list[UserProfile] = []

    async def get_for_user(self, user_id):
        profile = self.rows.get(user_id)
        return replace(profile) if profile else None

    async def add(self, profile):
        stored = replace(profile, id=len(self.rows) + 1)
        self.rows[profile.internal_key] = stored
        self.added.append(stored)
        return replace(stored)

    async def update(self, profile):
        self.rows[profile.internal_key] = replace(profile)
        return replace(profile)

    async def email_taken(self, email, *, exclude_user_id):
        return any(
            p.email.lower() == email.lower() and p.internal_key != exclude_user_id
            for p in self.rows.values()
        )


class InMemoryMemberships:
    """Keyed by (member_id, group_id); hands out copies so callers cannot
    mutate stored rows without going through ``update``."""

    def __init__(self, memberships=()) -> None:
        self.rows: dict[tuple[int, int], Membership] = {}
        self.fail_on: set[int] = set()
        self.writes: list[tuple[str, int]] = []
        self._next_id = 1
        for membership in memberships:
            self.rows[(membership.member_id, membership.group_id)] = replace(
                membership, id=self._take_id()
            )

    def _take_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def for_user(self, user_id) -> dict[int, Membership]:
        return {m.group_id: m for m in self.rows.values() if m.member_id == user_id}

    async def list_for_user(self, user_id):
        rows = [replace(m) for m in self.rows.values() if m.member_id == user_id]
        return sorted(rows, key=lambda m: (m.rank, m.id))

    async def add(self, membership):
        if membership.group_id in self.fail_on:
            raise PersistenceFailure(
                "Error saving user group membership", details={"group_id": membership.group_id}
            )
        key = (membership.member_id, membership.group_id)
        if key in self.rows:
            raise PersistenceFailure("Duplicate membership", details={"group_id": membership.group_id})
        stored = replace(membership, id=self._take_id())
        self.rows[key] = stored
        self.writes.append(("add", membership.group_id))
        return replace(stored)

    async def update(self, membership):
        self.rows[(membership.member_id, membership.group_id)] = replace(membership)
        self.writes.append(("update", membership.group_id))

    async def remove(self, membership):
        self.rows.pop((membership.member_id, membership.group_id), None)
        self.writes.append(("remove", membership.group_id))


class InMemoryUserGroups:
    def __init__(self, groups=()) -> None:
        self.rows: dict[int, UserGroup] = {g.id: g for g in groups}

    async def get(self, group_id):
        return self.rows.get(group_id)

    async def existing_ids(self, group_ids):
        return {gid for gid in group_ids if gid in self.rows}


class InMemoryTokens:
    def __init__(self) -> None:
        self.rows = []

    async def add(self, token):
        self.rows.append(token)
        return token

    async def invalidate_all_for_purpose(self, user_id, purpose):
        for token in self.rows:
            if token.user_id == user_id and token.purpose == purpose:
                token.is_used = True


GROUPS = (
    UserGroup(id=1, name="Administrator"),
    UserGroup(id=2, name="Editors"),
    UserGroup(id=3, name="Reviewers"),
    UserGroup(id=4, name="Translators"),
)


def build_uow(*, users=(), profiles=(), memberships=(), groups=GROUPS, **extra):
    commits: list[bool] = []

    async def commit():
        commits.append(True)

    async def rollback():
        return None

    return SimpleNamespace(
        users=InMemoryUsers(users),
        profiles=InMemoryProfiles(profiles),
        memberships=InMemoryMemberships(memberships),
        user_groups=InMemoryUserGroups(groups),
        one_time_tokens=InMemoryTokens(),
        commit=commit,
        rollback=rollback,
        commits=commits,
        **extra,
    )


@pytest.fixture()
def make_uow():
    return build_uow
