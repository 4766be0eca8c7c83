import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from speak_admin.models.question import Question, DEFAULT_EXAM, DEFAULT_KIND
from speak_admin.repositories.lesson_repository import LessonRepository
from speak_admin.repositories.question_repository import QuestionRepository
from speak_admin.services.exceptions import NotFoundError, ValidationError
from speak_admin.utils.helpers import clean_text, normalize_position

logger = logging.getLogger(__name__)

QUESTION_FIELDS = (
    "lesson_id", "position", "prompt", "simplified_text", "traditional_text",
    "phonetic", "image_url", "exam", "kind", "explanation",
)
_TEXT_FIELDS = ("simplified_text", "traditional_text", "phonetic", "image_url", "explanation")


def build_question_payload(form: Dict[str, Any], current: Optional[Question] = None) -> Dict[str, Any]:
    """规范化题目表单，题干为空直接拒绝"""
    merged = {field: getattr(current, field) for field in QUESTION_FIELDS} if current else {}
    merged.update({k: v for k, v in form.items() if k in QUESTION_FIELDS})

    prompt = clean_text(merged.get("prompt"))
    if not prompt:
        raise ValidationError("prompt", "题干不能为空")
    if merged.get("lesson_id") is None:
        raise ValidationError("lesson_id", "题目必须属于某个课程")

    payload = {
        "lesson_id": merged["lesson_id"],
        "position": normalize_position(merged.get("position")),
        "prompt": prompt,
        "exam": clean_text(merged.get("exam")) or DEFAULT_EXAM,
        "kind": clean_text(merged.get("kind")) or DEFAULT_KIND,
    }
    for field in _TEXT_FIELDS:
        payload[field] = clean_text(merged.get(field))
    return payload


class QuestionService:
    """题目管理服务"""

    def __init__(self, db: Session):
        self.db = db
        self.question_repo = QuestionRepository(db)
        self.lesson_repo = LessonRepository(db)

    def list_lesson_questions(self, lesson_id: int) -> List[Question]:
        self._require_lesson(lesson_id)
        return self.question_repo.get_lesson_questions(lesson_id)

    def get_question(self, question_id: int) -> Question:
        question = self.question_repo.get_by_id(question_id)
        if not question:
            raise NotFoundError("题目", question_id)
        return question

    def create_question(self, form: Dict[str, Any]) -> Question:
        payload = build_question_payload(form)
        self._require_lesson(payload["lesson_id"])
        question = self.question_repo.create(**payload)
        logger.info(f"创建题目: {question.id} (课程 {question.lesson_id})")
        return question

    def create_questions(self, lesson_id: int, forms: Sequence[Dict[str, Any]]) -> List[Question]:
        """
        批量创建题目
        全部校验通过后才写入，任意一条不合法则整体拒绝
        """
        if not forms:
            raise ValidationError("questions", "题目列表不能为空")
        payloads = [build_question_payload({**form, "lesson_id": lesson_id}) for form in forms]
        self._require_lesson(lesson_id)

        questions = self.question_repo.create_many(payloads)
        logger.info(f"批量创建题目: {len(questions)} 条 (课程 {lesson_id})")
        return questions

    def update_question(self, question_id: int, form: Dict[str, Any]) -> Question:
        question = self.get_question(question_id)
        payload = build_question_payload(form, current=question)
        if payload["lesson_id"] != question.lesson_id:
            self._require_lesson(payload["lesson_id"])
        question = self.question_repo.update(question_id, **payload)
        logger.info(f"更新题目: {question_id}")
        return question

    def delete_question(self, question_id: int) -> None:
        if not self.question_repo.delete(question_id):
            raise NotFoundError("题目", question_id)
        logger.info(f"删除题目: {question_id}")

    def _require_lesson(self, lesson_id: int) -> None:
        if not self.lesson_repo.get_by_id(lesson_id):
            raise NotFoundError("课程", lesson_id)
