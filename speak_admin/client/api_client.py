"""
管理后台HTTP客户端
封装 /api/v1 下的接口；表单必填项在发请求之前就在本地校验。
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from speak_admin.config.settings import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """接口调用失败（网络错误时 status_code 为 None）"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


def _require_text(form: Dict[str, Any], field: str, message: str) -> None:
    value = form.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(message)


class AdminApiClient:
    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None,
                 timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    # ---- 认证 ----

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/login", json={"email": email, "password": password},
                             authenticated=False)

    def logout(self) -> Dict[str, Any]:
        return self._request("POST", "/auth/logout")

    def me(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        return self._request("GET", "/auth/me", timeout=timeout)

    def refresh(self) -> Dict[str, Any]:
        return self._request("POST", "/auth/refresh")

    # ---- 首页 ----

    def dashboard_counts(self) -> Dict[str, int]:
        return self._request("GET", "/dashboard/counts")

    # ---- 话题 ----

    def list_topics(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/topics")

    def create_topic(self, form: Dict[str, Any]) -> Dict[str, Any]:
        _require_text(form, "name", "话题名称不能为空")
        return self._request("POST", "/topics", json=form)

    def update_topic(self, topic_id: int, form: Dict[str, Any]) -> Dict[str, Any]:
        if "name" in form:
            _require_text(form, "name", "话题名称不能为空")
        return self._request("PUT", f"/topics/{topic_id}", json=form)

    def delete_topic(self, topic_id: int) -> None:
        self._request("DELETE", f"/topics/{topic_id}")

    # ---- 课程 ----

    def list_lessons(self, topic_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/topics/{topic_id}/lessons")

    def create_lesson(self, form: Dict[str, Any]) -> Dict[str, Any]:
        _require_text(form, "title", "课程标题不能为空")
        return self._request("POST", "/lessons", json=form)

    def update_lesson(self, lesson_id: int, form: Dict[str, Any]) -> Dict[str, Any]:
        if "title" in form:
            _require_text(form, "title", "课程标题不能为空")
        return self._request("PUT", f"/lessons/{lesson_id}", json=form)

    def delete_lesson(self, lesson_id: int) -> None:
        self._request("DELETE", f"/lessons/{lesson_id}")

    # ---- 题目 ----

    def list_questions(self, lesson_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/lessons/{lesson_id}/questions")

    def create_question(self, form: Dict[str, Any]) -> Dict[str, Any]:
        _require_text(form, "prompt", "题干不能为空")
        return self._request("POST", "/questions", json=form)

    def create_questions(self, lesson_id: int, forms: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        for form in forms:
            _require_text(form, "prompt", "题干不能为空")
        return self._request("POST", "/questions/batch",
                             json={"lesson_id": lesson_id, "questions": forms})

    def update_question(self, question_id: int, form: Dict[str, Any]) -> Dict[str, Any]:
        if "prompt" in form:
            _require_text(form, "prompt", "题干不能为空")
        return self._request("PUT", f"/questions/{question_id}", json=form)

    def delete_question(self, question_id: int) -> None:
        self._request("DELETE", f"/questions/{question_id}")

    # ---- 用户 ----

    def list_users(self, search: Optional[str] = None, tier: str = "all",
                   status: str = "all", page: int = 1) -> Dict[str, Any]:
        params = {"tier": tier, "status": status, "page": page}
        if search:
            params["search"] = search
        return self._request("GET", "/users", params=params)

    def role_overview(self) -> Dict[str, Any]:
        return self._request("GET", "/users/roles")

    def get_user(self, user_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/users/{user_id}")

    def grant_admin(self, user_id: int) -> Dict[str, Any]:
        return self._request("POST", f"/users/{user_id}/grant-admin")

    def revoke_admin(self, user_id: int) -> Dict[str, Any]:
        return self._request("POST", f"/users/{user_id}/revoke-admin")

    def set_user_active(self, user_id: int, is_active: bool) -> Dict[str, Any]:
        return self._request("PUT", f"/users/{user_id}/status", json={"is_active": is_active})

    # ---- AI草稿 ----

    def generate_draft(self, draft_type: str, subject: str, **options) -> Dict[str, Any]:
        _require_text({"subject": subject}, "subject", "生成草稿需要填写主题")
        return self._request("POST", "/drafts",
                             json={"draft_type": draft_type, "subject": subject, **options})

    def _request(self, method: str, path: str, authenticated: bool = True,
                 timeout: Optional[float] = None, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if authenticated and self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        url = f"{self.base_url}/api/v1{path}"
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=timeout or self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"请求失败 {method} {path}: {e}")
            raise ApiError(f"网络请求失败: {e}")

        if response.status_code >= 400:
            try:
                body = response.json()
                message = (body.get("error") if isinstance(body, dict) else None) or response.text
            except ValueError:
                message = response.text
            logger.warning(f"接口返回错误 {method} {path}: {response.status_code} {message}")
            raise ApiError(str(message), status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()
