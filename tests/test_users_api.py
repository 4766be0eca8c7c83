from datetime import date

import pytest

from speak_admin.models.auth_session import AuthSession, SESSION_REVOKED
from speak_admin.models.streak import StreakRecord
from speak_admin.models.user import ROLE_ADMIN

from conftest import make_user


@pytest.fixture
def learners(db_session):
    """30个学员：每3个一个pro，每5个一个停用，名字里带 lucy 的有10个"""
    users = []
    for i in range(30):
        name = f"lucy {i}" if i % 3 == 0 else f"student {i}"
        users.append(make_user(
            db_session,
            f"learner{i}@example.com",
            display_name=name,
            subscription_tier="pro" if i % 3 == 0 else "free",
            is_active=i % 5 != 0,
        ))
    return users


def test_list_learners_paginates(client, auth_headers, learners):
    response = client.get("/api/v1/users", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 30
    assert data["page_size"] == 12
    assert data["total_pages"] == 3
    assert len(data["items"]) == 12

    last = client.get("/api/v1/users", params={"page": 3}, headers=auth_headers).json()
    assert len(last["items"]) == 6


def test_list_excludes_admins(client, auth_headers, learners):
    data = client.get("/api/v1/users", headers=auth_headers).json()
    emails = {item["user"]["email"] for item in data["items"]}
    assert "admin@example.com" not in emails


def test_search_and_tier_filter(client, auth_headers, learners):
    response = client.get("/api/v1/users", params={"search": "LUCY", "tier": "pro"},
                          headers=auth_headers)
    data = response.json()
    assert data["total"] == 10
    assert data["total_pages"] == 1
    assert all(item["user"]["subscription_tier"] == "pro" for item in data["items"])


def test_search_by_email(client, auth_headers, learners):
    data = client.get("/api/v1/users", params={"search": "learner7@"}, headers=auth_headers).json()
    assert [item["user"]["email"] for item in data["items"]] == ["learner7@example.com"]


def test_status_filter(client, auth_headers, learners):
    inactive = client.get("/api/v1/users", params={"status": "inactive"}, headers=auth_headers).json()
    assert inactive["total"] == 6
    active = client.get("/api/v1/users", params={"status": "active"}, headers=auth_headers).json()
    assert active["total"] == 24


def test_unknown_status_rejected(client, auth_headers, learners):
    response = client.get("/api/v1/users", params={"status": "banned"}, headers=auth_headers)
    assert response.status_code == 400


def test_out_of_range_page_resets(client, auth_headers, learners):
    data = client.get("/api/v1/users", params={"page": 10}, headers=auth_headers).json()
    assert data["page"] == 1


def test_empty_result(client, auth_headers, learners):
    data = client.get("/api/v1/users", params={"search": "nobody"}, headers=auth_headers).json()
    assert data["items"] == []
    assert data["total_pages"] == 0


def test_user_profile_with_streak(client, auth_headers, db_session, learners):
    user = learners[1]
    db_session.add(StreakRecord(user_id=user.id, current_streak=15, longest_streak=20,
                                last_checkin_date=date(2024, 5, 1)))
    db_session.commit()

    data = client.get(f"/api/v1/users/{user.id}", headers=auth_headers).json()
    assert data["user"]["email"] == user.email
    assert data["streak"]["current_streak"] == 15
    assert data["streak"]["last_checkin_date"] == "2024-05-01"
    assert data["streak_level"] == "Expert"


def test_user_profile_without_streak(client, auth_headers, learners):
    data = client.get(f"/api/v1/users/{learners[1].id}", headers=auth_headers).json()
    assert data["streak"] is None
    assert data["streak_level"] == "Beginner"


def test_missing_user(client, auth_headers):
    assert client.get("/api/v1/users/999", headers=auth_headers).status_code == 404


def test_grant_admin(client, auth_headers, learners):
    target = learners[1]
    response = client.post(f"/api/v1/users/{target.id}/grant-admin", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["role"] == ROLE_ADMIN

    overview = client.get("/api/v1/users/roles", headers=auth_headers).json()
    assert overview["admin_count"] == 2


def test_grant_admin_to_inactive_user_rejected(client, auth_headers, learners):
    response = client.post(f"/api/v1/users/{learners[0].id}/grant-admin", headers=auth_headers)
    assert response.status_code == 400


def test_revoke_admin_ends_sessions(client, auth_headers, db_session):
    other = make_user(db_session, "second-admin@example.com", role=ROLE_ADMIN, password="second-pass")
    login = client.post("/api/v1/auth/login",
                        json={"email": "second-admin@example.com", "password": "second-pass"})
    other_headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    response = client.post(f"/api/v1/users/{other.id}/revoke-admin", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "user"

    assert client.get("/api/v1/auth/me", headers=other_headers).status_code == 401
    session = db_session.query(AuthSession).filter(AuthSession.user_id == other.id).one()
    assert session.status == SESSION_REVOKED


def test_cannot_revoke_self(client, auth_headers, admin_user):
    response = client.post(f"/api/v1/users/{admin_user.id}/revoke-admin", headers=auth_headers)
    assert response.status_code == 400


def test_deactivate_and_reactivate(client, auth_headers, learners):
    target = learners[1]
    response = client.put(f"/api/v1/users/{target.id}/status", json={"is_active": False},
                          headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = client.put(f"/api/v1/users/{target.id}/status", json={"is_active": True},
                          headers=auth_headers)
    assert response.json()["is_active"] is True


def test_cannot_deactivate_self(client, auth_headers, admin_user):
    response = client.put(f"/api/v1/users/{admin_user.id}/status", json={"is_active": False},
                          headers=auth_headers)
    assert response.status_code == 400


def test_role_overview(client, auth_headers, learners):
    data = client.get("/api/v1/users/roles", headers=auth_headers).json()
    assert len(data["users"]) == 31
    assert data["admin_count"] == 1
    assert data["user_count"] == 24
    assert data["inactive_count"] == 6
