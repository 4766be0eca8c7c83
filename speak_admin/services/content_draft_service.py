"""
内容草稿服务
调用大模型根据简要需求生成话题/课程/题目草稿；草稿不落库，保存时走正常的创建流程和校验。
"""

import json
import logging
from typing import Any, Dict, List, Optional

from speak_admin.utils.llm_client import LLMClient, LLMResponseError, create_llm_client

logger = logging.getLogger(__name__)

DRAFT_TOPIC = "topic"
DRAFT_LESSON = "lesson"
DRAFT_QUESTIONS = "questions"

_SYSTEM_PROMPTS = {
    DRAFT_TOPIC: (
        "你是中文口语课程的内容编辑。根据用户给出的JSON需求生成一个话题，"
        "只返回JSON对象，字段: name, short_description, long_description。"
    ),
    DRAFT_LESSON: (
        "你是中文口语课程的内容编辑。根据用户给出的JSON需求生成一节课程，"
        "只返回JSON对象，字段: title, description, level。"
    ),
    DRAFT_QUESTIONS: (
        "你是中文口语课程的出题老师。根据用户给出的JSON需求生成 question_count 道题，"
        "只返回JSON对象 {\"questions\": [...]}，每道题字段: position, prompt, simplified_text, "
        "traditional_text, phonetic, exam, kind, explanation；kind 依次取自 question_kinds。"
    ),
}

_DRAFT_FIELDS = {
    DRAFT_TOPIC: ("name", "short_description", "long_description"),
    DRAFT_LESSON: ("title", "description", "level"),
}
_QUESTION_FIELDS = (
    "position", "prompt", "simplified_text", "traditional_text",
    "phonetic", "exam", "kind", "explanation",
)


class ContentDraftService:
    """AI内容草稿生成"""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.llm_client = llm_client or create_llm_client()

    async def generate(self, draft_type: str, subject: str, difficulty: str = "HSK1",
                       question_count: int = 5, exam: str = "OTHER",
                       question_kinds: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        生成草稿

        Raises:
            ValueError: 草稿类型未知
            LLMResponseError: 模型返回内容不符合约定
        """
        if draft_type not in _SYSTEM_PROMPTS:
            raise ValueError(f"未知的草稿类型: {draft_type}")

        brief = {
            "draft_type": draft_type,
            "subject": subject.strip(),
            "difficulty": difficulty,
            "question_count": question_count,
            "exam": exam,
            "question_kinds": question_kinds or ["mcq"],
        }
        logger.info(f"生成{draft_type}草稿: {brief['subject']} ({difficulty})")

        data = await self.llm_client.generate_json(
            _SYSTEM_PROMPTS[draft_type],
            json.dumps(brief, ensure_ascii=False),
        )
        if not isinstance(data, dict):
            raise LLMResponseError("模型返回的草稿不是JSON对象")

        if draft_type == DRAFT_QUESTIONS:
            return {"questions": self._clean_questions(data.get("questions"), question_count)}
        return {field: str(data.get(field) or "") for field in _DRAFT_FIELDS[draft_type]}

    @staticmethod
    def _clean_questions(items: Any, question_count: int) -> List[Dict[str, Any]]:
        if not isinstance(items, list):
            raise LLMResponseError("模型返回的题目列表格式错误")
        questions = []
        for index, item in enumerate(items[:question_count]):
            if not isinstance(item, dict):
                continue
            question = {field: item.get(field) for field in _QUESTION_FIELDS}
            question["position"] = question["position"] or index + 1
            questions.append(question)
        return questions
