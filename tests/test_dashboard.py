from datetime import date

from speak_admin.models.streak import StreakRecord

from conftest import make_user


def test_counts_require_admin(client):
    assert client.get("/api/v1/dashboard/counts").status_code == 401


def test_counts_empty(client, auth_headers):
    data = client.get("/api/v1/dashboard/counts", headers=auth_headers).json()
    # 只有登录的管理员自己
    assert data == {"users": 1, "topics": 0, "lessons": 0, "questions": 0, "streaks": 0}


def test_counts(client, auth_headers, db_session):
    learner = make_user(db_session, "learner@example.com")
    db_session.add(StreakRecord(user_id=learner.id, current_streak=2, longest_streak=2,
                                last_checkin_date=date(2024, 1, 2)))
    db_session.commit()

    topic = client.post("/api/v1/topics", json={"name": "Hobbies"}, headers=auth_headers).json()
    for title in ("Sports", "Music"):
        lesson = client.post("/api/v1/lessons", json={"topic_id": topic["id"], "title": title},
                             headers=auth_headers).json()
        client.post("/api/v1/questions", json={"lesson_id": lesson["id"], "prompt": f"{title}?"},
                    headers=auth_headers)

    data = client.get("/api/v1/dashboard/counts", headers=auth_headers).json()
    assert data == {"users": 2, "topics": 1, "lessons": 2, "questions": 2, "streaks": 1}
