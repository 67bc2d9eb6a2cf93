from __future__ import annotations

import pytest

from cms.application.errors import PersistenceFailure, ValidationError, VetoedAddition
from cms.application.events.dispatcher import EventDispatcher
from cms.application.events.models import Rejection, UserAddedToGroup, UserBeforeAddToGroup
from cms.application.groups.reconciler import GroupMembershipReconciler, parse_group_assignments
from cms.domain.models.membership import GroupAssignment, Membership
from cms.domain.models.user import User

A, B, C, D = 1, 2, 3, 4
USER_ID = 7


def member(group_id, *, role=1, rank=0):
    return Membership(member_id=USER_ID, group_id=group_id, role=role, rank=rank)


def want(group_id, *, role=1, rank=None):
    return GroupAssignment(group_id=group_id, role=role, rank=rank)


async def reconcile(uow, user, desired, events=None):
    reconciler = GroupMembershipReconciler(uow=uow, events=events or EventDispatcher())
    return await reconciler.reconcile(user, desired)


@pytest.mark.asyncio
async def test_replaces_membership_set_and_picks_new_rank_zero_group_as_primary(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=A)
    uow = make_uow(users=[user], memberships=[member(A, rank=1), member(B, rank=2)])

    result = await reconcile(uow, user, [want(A, rank=1), want(C, rank=0)])

    stored = uow.memberships.for_user(USER_ID)
    assert set(stored) == {A, C}
    assert stored[A].rank == 1
    assert stored[C].rank == 0
    assert [m.group_id for m in result.added] == [C]
    assert [m.group_id for m in result.removed] == [B]
    assert result.primary_group == C
    assert uow.users.rows[USER_ID].primary_group == C


@pytest.mark.asyncio
async def test_reconcile_is_idempotent(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=A)
    uow = make_uow(users=[user], memberships=[member(A, rank=1), member(B, rank=2)])
    desired = [want(A, rank=1), want(C, role=2, rank=0)]

    first = await reconcile(uow, user, desired)
    snapshot = {gid: (m.role, m.rank) for gid, m in uow.memberships.for_user(USER_ID).items()}
    second = await reconcile(uow, user, desired)

    assert {gid: (m.role, m.rank) for gid, m in uow.memberships.for_user(USER_ID).items()} == snapshot
    assert second.added == []
    assert second.removed == []
    assert second.primary_group == first.primary_group == C


@pytest.mark.asyncio
async def test_empty_list_removes_everything_and_clears_primary(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=A)
    uow = make_uow(users=[user], memberships=[member(A), member(B, rank=1)])

    result = await reconcile(uow, user, [])

    assert uow.memberships.for_user(USER_ID) == {}
    assert result.primary_group == 0
    assert user.primary_group == 0
    assert uow.users.rows[USER_ID].primary_group == 0


@pytest.mark.asyncio
async def test_none_leaves_memberships_untouched(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=A)
    uow = make_uow(users=[user], memberships=[member(A)])

    result = await reconcile(uow, user, None)

    assert result.primary_group == A
    assert uow.memberships.writes == []
    assert uow.users.updates == 0


@pytest.mark.asyncio
async def test_last_new_group_without_rank_wins_primary(make_uow):
    user = User(id=USER_ID, username="jane")
    uow = make_uow(users=[user])

    result = await reconcile(uow, user, [want(B, rank=0), want(C, rank=0)])

    assert result.primary_group == C


@pytest.mark.asyncio
async def test_primary_is_zero_when_nothing_qualifies(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=A)
    uow = make_uow(users=[user], memberships=[member(A)])

    result = await reconcile(uow, user, [want(B, rank=3)])

    assert result.primary_group == 0
    assert set(uow.memberships.for_user(USER_ID)) == {B}


@pytest.mark.asyncio
async def test_existing_primary_kept_when_still_desired(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=B)
    uow = make_uow(users=[user], memberships=[member(A, rank=1), member(B, rank=2)])

    result = await reconcile(uow, user, [want(A, rank=1), want(B, rank=2)])

    assert result.primary_group == B


@pytest.mark.asyncio
async def test_retained_group_without_rank_becomes_primary_with_rank_zero(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=B)
    uow = make_uow(users=[user], memberships=[member(A, rank=4), member(B, rank=1)])

    result = await reconcile(uow, user, [want(A), want(C, rank=2)])

    assert uow.memberships.for_user(USER_ID)[A].rank == 0
    assert result.primary_group == A


@pytest.mark.asyncio
async def test_new_group_without_rank_overrides_retained_one(make_uow):
    user = User(id=USER_ID, username="jane")
    uow = make_uow(users=[user], memberships=[member(A, rank=3)])

    result = await reconcile(uow, user, [want(C, rank=0), want(A, rank=0)])

    assert result.primary_group == C


@pytest.mark.asyncio
async def test_rank_counter_counts_new_memberships_only(make_uow):
    user = User(id=USER_ID, username="jane")
    uow = make_uow(users=[user], memberships=[member(D, rank=9)])

    result = await reconcile(uow, user, [want(D, rank=9), want(A, rank=5), want(B), want(C)])

    ranks = {m.group_id: m.rank for m in result.added}
    assert ranks == {A: 5, B: 1, C: 2}
    assert result.primary_group == C


@pytest.mark.asyncio
async def test_duplicate_group_ids_last_entry_wins(make_uow):
    user = User(id=USER_ID, username="jane")
    uow = make_uow(users=[user])

    result = await reconcile(uow, user, [want(A, role=1, rank=1), want(A, role=2, rank=2)])

    assert len(result.added) == 1
    stored = uow.memberships.for_user(USER_ID)[A]
    assert (stored.role, stored.rank) == (2, 2)


@pytest.mark.asyncio
async def test_veto_aborts_before_any_write(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=A)
    uow = make_uow(users=[user], memberships=[member(A), member(B, rank=1)])
    events = EventDispatcher()

    def no_reviewers(event: UserBeforeAddToGroup):
        if event.group.name == "Reviewers":
            return Rejection("Reviewers is closed for new members")
        return None

    events.register(UserBeforeAddToGroup, no_reviewers)

    with pytest.raises(VetoedAddition) as exc:
        await reconcile(uow, user, [want(D, rank=0), want(C, rank=1)], events)

    assert exc.value.message == "Reviewers is closed for new members"
    assert exc.value.details == {"group_id": C}
    assert uow.memberships.writes == []
    assert set(uow.memberships.for_user(USER_ID)) == {A, B}
    assert uow.users.updates == 0


@pytest.mark.asyncio
async def test_persistence_failure_propagates(make_uow):
    user = User(id=USER_ID, username="jane")
    uow = make_uow(users=[user])
    uow.memberships.fail_on.add(B)

    with pytest.raises(PersistenceFailure):
        await reconcile(uow, user, [want(A, rank=1), want(B, rank=2)])

    assert uow.users.updates == 0


@pytest.mark.asyncio
async def test_after_add_events_fire_per_new_membership(make_uow):
    user = User(id=USER_ID, username="jane")
    uow = make_uow(users=[user], memberships=[member(A)])
    events = EventDispatcher()
    seen = []
    events.register(UserAddedToGroup, lambda e: seen.append((e.group.name, e.membership.id)))

    def broken(_event):
        raise RuntimeError("plugin crashed")

    events.register(UserAddedToGroup, broken)

    result = await reconcile(uow, user, [want(A), want(B, rank=1), want(C, rank=2)], events)

    assert [name for name, _ in seen] == ["Editors", "Reviewers"]
    assert all(membership_id is not None for _, membership_id in seen)
    assert len(result.added) == 2


@pytest.mark.asyncio
async def test_removal_has_no_veto_hook(make_uow):
    user = User(id=USER_ID, username="jane", primary_group=A)
    uow = make_uow(users=[user], memberships=[member(A), member(B, rank=1)])
    events = EventDispatcher()
    events.register(UserBeforeAddToGroup, lambda e: "never allowed")

    result = await reconcile(uow, user, [want(A, rank=0)], events)

    assert [m.group_id for m in result.removed] == [B]
    assert result.primary_group == A


def test_parse_group_assignments_accepts_json_and_lists():
    from_json = parse_group_assignments('[{"usergroup": "2", "role": "1", "rank": ""}]')
    from_list = parse_group_assignments([{"usergroup": 2, "role": 1}])

    assert from_json == from_list == [GroupAssignment(group_id=2, role=1, rank=None)]
    assert parse_group_assignments(None) is None
    assert parse_group_assignments("") == []


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        {"usergroup": 1},
        [{"role": 1}],
        [{"usergroup": "abc"}],
        [{"usergroup": True}],
    ],
)
def test_parse_group_assignments_rejects_malformed_input(raw):
    with pytest.raises(ValidationError) as exc:
        parse_group_assignments(raw)
    assert "groups" in exc.value.details
