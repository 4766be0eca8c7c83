import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from speak_admin.models.topic import Topic
from speak_admin.repositories.topic_repository import TopicRepository
from speak_admin.services.exceptions import NotFoundError, ValidationError
from speak_admin.utils.helpers import clean_text, normalize_position, to_slug

logger = logging.getLogger(__name__)

TOPIC_FIELDS = ("slug", "name", "short_description", "long_description", "image", "position")


def build_topic_payload(form: Dict[str, Any], current: Optional[Topic] = None) -> Dict[str, Any]:
    """
    规范化话题表单
    更新时未提交的字段沿用当前值；名称为空直接拒绝
    """
    merged = {field: getattr(current, field) for field in TOPIC_FIELDS} if current else {}
    merged.update({k: v for k, v in form.items() if k in TOPIC_FIELDS})

    name = clean_text(merged.get("name"))
    if not name:
        raise ValidationError("name", "话题名称不能为空")

    slug = clean_text(merged.get("slug"))
    return {
        "slug": slug or to_slug(name) or f"topic-{uuid.uuid4().hex[:8]}",
        "name": name,
        "short_description": clean_text(merged.get("short_description")),
        "long_description": clean_text(merged.get("long_description")),
        "image": clean_text(merged.get("image")),
        "position": normalize_position(merged.get("position")),
    }


class TopicService:
    """话题管理服务"""

    def __init__(self, db: Session):
        self.db = db
        self.topic_repo = TopicRepository(db)

    def list_topics(self) -> List[Dict[str, Any]]:
        """获取话题列表，附带课程数"""
        topics = self.topic_repo.get_ordered()
        counts = self.topic_repo.count_lessons([t.id for t in topics])
        return [{**t.to_dict(), "lessons_count": counts.get(t.id, 0)} for t in topics]

    def get_topic(self, topic_id: int) -> Topic:
        topic = self.topic_repo.get_by_id(topic_id)
        if not topic:
            raise NotFoundError("话题", topic_id)
        return topic

    def create_topic(self, form: Dict[str, Any]) -> Topic:
        """创建话题"""
        payload = build_topic_payload(form)
        self._ensure_unique_slug(payload["slug"])
        topic = self.topic_repo.create(**payload)
        logger.info(f"创建话题: {topic.id} - {topic.name}")
        return topic

    def update_topic(self, topic_id: int, form: Dict[str, Any]) -> Topic:
        """更新话题"""
        topic = self.get_topic(topic_id)
        payload = build_topic_payload(form, current=topic)
        self._ensure_unique_slug(payload["slug"], exclude_id=topic_id)
        topic = self.topic_repo.update(topic_id, **payload)
        logger.info(f"更新话题: {topic_id}")
        return topic

    def delete_topic(self, topic_id: int) -> None:
        """删除话题（级联删除课程和题目）"""
        if not self.topic_repo.delete(topic_id):
            raise NotFoundError("话题", topic_id)
        logger.info(f"删除话题: {topic_id}")

    def _ensure_unique_slug(self, slug: str, exclude_id: Optional[int] = None) -> None:
        existing = self.topic_repo.get_by_slug(slug)
        if existing and existing.id != exclude_id:
            raise ValidationError("slug", f"slug已存在: {slug}")
