import pytest

from speak_admin.api.routes.drafts import get_draft_service
from speak_admin.main import app
from speak_admin.services.content_draft_service import ContentDraftService
from speak_admin.utils.llm_client import LLMResponseError, MockLLMClient


class BrokenLLMClient(MockLLMClient):
    async def generate_response(self, messages, temperature=0.7, max_tokens=None):
        return "这不是JSON"


@pytest.fixture
def draft_client(client):
    app.dependency_overrides[get_draft_service] = lambda: ContentDraftService(MockLLMClient())
    return client


def test_draft_requires_admin(draft_client):
    response = draft_client.post("/api/v1/drafts", json={"draft_type": "topic", "subject": "旅行"})
    assert response.status_code == 401


def test_topic_draft(draft_client, auth_headers):
    response = draft_client.post("/api/v1/drafts", json={"draft_type": "topic", "subject": "旅行"},
                                 headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["draft_type"] == "topic"
    assert data["draft"]["name"] == "旅行"
    assert set(data["draft"]) == {"name", "short_description", "long_description"}


def test_questions_draft(draft_client, auth_headers):
    payload = {
        "draft_type": "questions",
        "subject": "点餐",
        "question_count": 3,
        "exam": "HSK",
        "question_kinds": ["mcq", "speaking"],
    }
    response = draft_client.post("/api/v1/drafts", json=payload, headers=auth_headers)
    questions = response.json()["draft"]["questions"]
    assert len(questions) == 3
    assert [q["kind"] for q in questions] == ["mcq", "speaking", "mcq"]
    assert all(q["exam"] == "HSK" for q in questions)


def test_unknown_draft_type(draft_client, auth_headers):
    response = draft_client.post("/api/v1/drafts", json={"draft_type": "video", "subject": "x"},
                                 headers=auth_headers)
    assert response.status_code == 422


def test_broken_model_output_returns_502(client, auth_headers):
    app.dependency_overrides[get_draft_service] = lambda: ContentDraftService(BrokenLLMClient())
    response = client.post("/api/v1/drafts", json={"draft_type": "lesson", "subject": "天气"},
                           headers=auth_headers)
    assert response.status_code == 502


@pytest.mark.asyncio
async def test_lesson_draft_service():
    service = ContentDraftService(MockLLMClient())
    draft = await service.generate("lesson", "  问路  ", difficulty="HSK2")
    assert draft == {
        "title": "问路 入门",
        "description": "HSK2 水平的「问路」口语课程",
        "level": "HSK2",
    }


@pytest.mark.asyncio
async def test_questions_draft_truncated_to_count():
    class TooManyQuestions(MockLLMClient):
        async def generate_json(self, system_prompt, user_input):
            return {"questions": [{"prompt": f"q{i}"} for i in range(10)]}

    draft = await ContentDraftService(TooManyQuestions()).generate("questions", "购物", question_count=2)
    assert [q["prompt"] for q in draft["questions"]] == ["q0", "q1"]
    assert [q["position"] for q in draft["questions"]] == [1, 2]


@pytest.mark.asyncio
async def test_unknown_type_in_service():
    with pytest.raises(ValueError):
        await ContentDraftService(MockLLMClient()).generate("video", "电影")


@pytest.mark.asyncio
async def test_non_object_response():
    class ListResponse(MockLLMClient):
        async def generate_json(self, system_prompt, user_input):
            return ["not", "a", "dict"]

    with pytest.raises(LLMResponseError):
        await ContentDraftService(ListResponse()).generate("topic", "旅行")
