from typing import Optional, List, Dict
from sqlalchemy.orm import Session
from sqlalchemy import func
from speak_admin.models.topic import Topic
from speak_admin.models.lesson import Lesson
from speak_admin.repositories.base import BaseRepository

class TopicRepository(BaseRepository[Topic]):
    def __init__(self, db: Session):
        super().__init__(db, Topic)

    def get_ordered(self) -> List[Topic]:
        """获取所有话题，按位置升序、创建时间倒序"""
        return self.db.query(Topic).order_by(
            Topic.position.asc(), Topic.created_at.desc(), Topic.id.desc()
        ).all()

    def get_by_slug(self, slug: str) -> Optional[Topic]:
        return self.db.query(Topic).filter(Topic.slug == slug).first()

    def count_lessons(self, topic_ids: List[int]) -> Dict[int, int]:
        """统计每个话题的课程数"""
        if not topic_ids:
            return {}
        rows = self.db.query(Lesson.topic_id, func.count(Lesson.id)).filter(
            Lesson.topic_id.in_(topic_ids)
        ).group_by(Lesson.topic_id).all()
        return {topic_id: count for topic_id, count in rows}
