from __future__ import annotations

from sqlalchemy import select

from cms.application.errors import PersistenceFailure
from cms.application.events.models import Rejection, UserBeforeAddToGroup
from cms.domain.value_objects.permission import Permission
from cms.infrastructure.db.orm.one_time_token import OneTimeTokenORM
from cms.infrastructure.db.orm.user import UserORM
from cms.infrastructure.db.orm.user_group import UserGroupMemberORM
from cms.infrastructure.db.orm.user_profile import UserProfileORM
from cms.infrastructure.repos.memberships_sqlalchemy import MembershipsSQLAlchemyRepository


async def _memberships(app, user_id: int) -> dict[int, tuple[int, int]]:
    async with app.state.session_factory() as session:
        rows = (
            await session.execute(
                select(UserGroupMemberORM).where(UserGroupMemberORM.member_id == user_id)
            )
        ).scalars().all()
        return {row.group_id: (row.role, row.rank) for row in rows}


async def test_update_user_reconciles_groups(app, client, seeded, auth_headers):
    headers = auth_headers(seeded["admin"])
    payload = {
        "fullname": "Eddie Editor",
        "groups": [{"usergroup": 1, "role": 2, "rank": 1}, {"usergroup": 3, "role": 1}],
    }

    response = await client.put(f"/api/v1/users/{seeded['editor']}", json=payload, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["primary_group"] == 3
    assert [m["group_id"] for m in body["added_memberships"]] == [3]
    assert body["object"]["fullname"] == "Eddie Editor"
    assert "hashed_password" not in body["object"]

    assert await _memberships(app, seeded["editor"]) == {1: (2, 1), 3: (1, 0)}
    async with app.state.session_factory() as session:
        editor = await session.get(UserORM, seeded["editor"])
        assert editor.primary_group == 3


async def test_group_veto_rolls_back_everything(app, client, seeded, auth_headers, event_dispatcher):
    event_dispatcher.register(
        UserBeforeAddToGroup,
        lambda event: Rejection(f"{event.group.name} requires approval"),
    )
    payload = {"fullname": "Changed", "groups": [{"usergroup": 3, "role": 1, "rank": 0}]}

    response = await client.put(
        f"/api/v1/users/{seeded['editor']}", json=payload, headers=auth_headers(seeded["admin"])
    )

    assert response.status_code == 409
    assert response.json()["code"] == "vetoed_addition"
    assert response.json()["message"] == "Reviewers requires approval"
    assert await _memberships(app, seeded["editor"]) == {1: (2, 1), 2: (2, 2)}
    async with app.state.session_factory() as session:
        profile = (
            await session.execute(
                select(UserProfileORM).where(UserProfileORM.internal_key == seeded["editor"])
            )
        ).scalar_one()
        assert profile.fullname == "Eddie"


async def test_membership_write_failure_rolls_back_everything(
    app, client, seeded, auth_headers, monkeypatch
):
    async def failing_add(self, membership):
        raise PersistenceFailure(
            "Error saving user group membership", details={"group_id": membership.group_id}
        )

    monkeypatch.setattr(MembershipsSQLAlchemyRepository, "add", failing_add)
    payload = {
        "fullname": "Changed",
        "groups": [{"usergroup": 1, "role": 1, "rank": 0}, {"usergroup": 3, "role": 1, "rank": 1}],
    }

    response = await client.put(
        f"/api/v1/users/{seeded['editor']}", json=payload, headers=auth_headers(seeded["admin"])
    )

    assert response.status_code == 500
    assert response.json()["code"] == "persistence_failure"
    assert response.json()["details"] == {"group_id": 3}
    assert await _memberships(app, seeded["editor"]) == {1: (2, 1), 2: (2, 2)}
    async with app.state.session_factory() as session:
        editor = await session.get(UserORM, seeded["editor"])
        profile = (
            await session.execute(
                select(UserProfileORM).where(UserProfileORM.internal_key == seeded["editor"])
            )
        ).scalar_one()
    assert editor.primary_group == 1
    assert profile.fullname == "Eddie"

async def test_update_user_validation_and_permissions(client, seeded, auth_headers):
    url = f"/api/v1/users/{seeded['editor']}"

    unauthenticated = await client.put(url, json={"username": "x"})
    assert unauthenticated.status_code == 401

    forbidden = await client.put(
        url, json={"username": "x"}, headers=auth_headers(seeded["admin"], permissions=())
    )
    assert forbidden.status_code == 403

    invalid = await client.put(
        url,
        json={"username": "admin", "email": "broken", "groups": "[{\"usergroup\": 99}]"},
        headers=auth_headers(seeded["admin"], permissions=(Permission.SAVE_USER,)),
    )
    assert invalid.status_code == 422
    assert set(invalid.json()["details"]) == {"username", "email", "groups"}


async def test_password_email_link(app, client, seeded, auth_headers, email_service):
    response = await client.put(
        f"/api/v1/users/{seeded['editor']}",
        json={"passwordgenmethod": "user_email_specify", "active": "1"},
        headers=auth_headers(seeded["admin"]),
    )

    assert response.status_code == 200
    [message] = email_service.sent
    assert message.to == ["editor@example.com"]
    async with app.state.session_factory() as session:
        token = (
            await session.execute(
                select(OneTimeTokenORM).where(OneTimeTokenORM.user_id == seeded["editor"])
            )
        ).scalar_one()
    assert token.purpose == "password_change"
    assert f"hash={token.token}" in message.text
    assert "24 hours" in message.text


async def test_generated_password_is_returned_once(app, client, seeded, auth_headers):
    response = await client.put(
        f"/api/v1/users/{seeded['editor']}",
        json={"passwordgenmethod": "g"},
        headers=auth_headers(seeded["admin"]),
    )

    assert response.status_code == 200
    message = response.json()["message"]
    assert message.startswith("The password for this user has been changed to: ")
    password = message.rsplit(" ", 1)[-1]
    async with app.state.session_factory() as session:
        editor = await session.get(UserORM, seeded["editor"])
    assert app.state.password_hasher.verify(password, editor.hashed_password)
