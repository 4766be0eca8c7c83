import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from speak_admin.models.lesson import Lesson
from speak_admin.repositories.lesson_repository import LessonRepository
from speak_admin.repositories.topic_repository import TopicRepository
from speak_admin.services.exceptions import NotFoundError, ValidationError
from speak_admin.utils.helpers import clean_text, normalize_position, to_slug

logger = logging.getLogger(__name__)

LESSON_FIELDS = ("topic_id", "slug", "title", "description", "level", "position", "is_public")


def build_lesson_payload(form: Dict[str, Any], current: Optional[Lesson] = None) -> Dict[str, Any]:
    """规范化课程表单，标题为空直接拒绝"""
    merged = {field: getattr(current, field) for field in LESSON_FIELDS} if current else {}
    merged.update({k: v for k, v in form.items() if k in LESSON_FIELDS})

    title = clean_text(merged.get("title"))
    if not title:
        raise ValidationError("title", "课程标题不能为空")
    if merged.get("topic_id") is None:
        raise ValidationError("topic_id", "课程必须属于某个话题")

    is_public = merged.get("is_public")
    return {
        "topic_id": merged["topic_id"],
        "slug": clean_text(merged.get("slug")) or to_slug(title) or f"lesson-{uuid.uuid4().hex[:8]}",
        "title": title,
        "description": clean_text(merged.get("description")),
        "level": clean_text(merged.get("level")),
        "position": normalize_position(merged.get("position")),
        "is_public": True if is_public is None else bool(is_public),
    }


class LessonService:
    """课程服务，负责话题下课程的增删改查"""

    def __init__(self, db: Session):
        self.db = db
        self.lesson_repo = LessonRepository(db)
        self.topic_repo = TopicRepository(db)

    def list_topic_lessons(self, topic_id: int) -> List[Dict[str, Any]]:
        """获取话题下的课程，附带题目数"""
        if not self.topic_repo.get_by_id(topic_id):
            raise NotFoundError("话题", topic_id)
        lessons = self.lesson_repo.get_topic_lessons(topic_id)
        counts = self.lesson_repo.count_questions([l.id for l in lessons])
        return [{**l.to_dict(), "questions_count": counts.get(l.id, 0)} for l in lessons]

    def get_lesson(self, lesson_id: int) -> Lesson:
        """根据ID获取课程"""
        lesson = self.lesson_repo.get_by_id(lesson_id)
        if not lesson:
            raise NotFoundError("课程", lesson_id)
        return lesson

    def create_lesson(self, form: Dict[str, Any]) -> Lesson:
        """创建新课程"""
        payload = build_lesson_payload(form)
        if not self.topic_repo.get_by_id(payload["topic_id"]):
            raise NotFoundError("话题", payload["topic_id"])
        self._ensure_unique_slug(payload["topic_id"], payload["slug"])

        lesson = self.lesson_repo.create(**payload)
        logger.info(f"创建课程: {lesson.id} - {lesson.title} (话题 {lesson.topic_id})")
        return lesson

    def update_lesson(self, lesson_id: int, form: Dict[str, Any]) -> Lesson:
        """更新课程"""
        lesson = self.get_lesson(lesson_id)
        payload = build_lesson_payload(form, current=lesson)
        if payload["topic_id"] != lesson.topic_id and not self.topic_repo.get_by_id(payload["topic_id"]):
            raise NotFoundError("话题", payload["topic_id"])
        self._ensure_unique_slug(payload["topic_id"], payload["slug"], exclude_id=lesson_id)

        lesson = self.lesson_repo.update(lesson_id, **payload)
        logger.info(f"更新课程: {lesson_id}")
        return lesson

    def delete_lesson(self, lesson_id: int) -> None:
        """删除课程（级联删除题目）"""
        if not self.lesson_repo.delete(lesson_id):
            raise NotFoundError("课程", lesson_id)
        logger.info(f"删除课程: {lesson_id}")

    def _ensure_unique_slug(self, topic_id: int, slug: str, exclude_id: Optional[int] = None) -> None:
        # 同一话题下slug唯一
        existing = self.lesson_repo.get_by_slug(topic_id, slug)
        if existing and existing.id != exclude_id:
            raise ValidationError("slug", f"该话题下slug已存在: {slug}")
