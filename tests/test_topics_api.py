def create_topic(client, headers, **data):
    return client.post("/api/v1/topics", json=data, headers=headers)


def test_topics_require_admin(client):
    assert client.get("/api/v1/topics").status_code == 401
    assert client.post("/api/v1/topics", json={"name": "Travel"}).status_code == 401


def test_create_topic_generates_slug(client, auth_headers):
    response = create_topic(client, auth_headers, name="  Đi Chợ Tết  ", position=3)
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Đi Chợ Tết"
    assert data["slug"] == "di-cho-tet"
    assert data["position"] == 3
    assert data["lessons_count"] == 0


def test_create_topic_keeps_given_slug(client, auth_headers):
    response = create_topic(client, auth_headers, name="Travel", slug="my-travel")
    assert response.json()["slug"] == "my-travel"


def test_chinese_name_gets_fallback_slug(client, auth_headers):
    response = create_topic(client, auth_headers, name="旅行")
    assert response.status_code == 201
    assert response.json()["slug"].startswith("topic-")


def test_blank_topic_name_rejected(client, auth_headers):
    response = create_topic(client, auth_headers, name="   ")
    assert response.status_code == 400
    assert response.json()["error"] == "话题名称不能为空"
    assert client.get("/api/v1/topics", headers=auth_headers).json() == []


def test_duplicate_slug_rejected(client, auth_headers):
    assert create_topic(client, auth_headers, name="Food").status_code == 201
    response = create_topic(client, auth_headers, name="food")
    assert response.status_code == 400


def test_invalid_position_defaults_to_one(client, auth_headers):
    response = create_topic(client, auth_headers, name="Work", position=0)
    assert response.json()["position"] == 1


def test_list_topics_ordered_by_position(client, auth_headers):
    create_topic(client, auth_headers, name="Third", position=3)
    create_topic(client, auth_headers, name="First", position=1)
    create_topic(client, auth_headers, name="Second", position=2)

    names = [t["name"] for t in client.get("/api/v1/topics", headers=auth_headers).json()]
    assert names == ["First", "Second", "Third"]


def test_update_topic_keeps_unsent_fields(client, auth_headers):
    topic = create_topic(client, auth_headers, name="Shopping",
                         short_description="Buying things").json()

    response = client.put(f"/api/v1/topics/{topic['id']}", json={"position": 5},
                          headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Shopping"
    assert data["short_description"] == "Buying things"
    assert data["position"] == 5


def test_update_topic_blank_name_rejected(client, auth_headers):
    topic = create_topic(client, auth_headers, name="Shopping").json()
    response = client.put(f"/api/v1/topics/{topic['id']}", json={"name": ""},
                          headers=auth_headers)
    assert response.status_code == 400
    fetched = client.get(f"/api/v1/topics/{topic['id']}", headers=auth_headers).json()
    assert fetched["name"] == "Shopping"


def test_get_missing_topic(client, auth_headers):
    response = client.get("/api/v1/topics/999", headers=auth_headers)
    assert response.status_code == 404


def test_delete_topic_removes_lessons(client, auth_headers):
    topic = create_topic(client, auth_headers, name="Weather").json()
    lesson = client.post("/api/v1/lessons", json={"topic_id": topic["id"], "title": "Rainy days"},
                         headers=auth_headers).json()

    response = client.delete(f"/api/v1/topics/{topic['id']}", headers=auth_headers)
    assert response.status_code == 204

    assert client.get(f"/api/v1/topics/{topic['id']}", headers=auth_headers).status_code == 404
    assert client.get(f"/api/v1/lessons/{lesson['id']}", headers=auth_headers).status_code == 404
