from typing import Optional, List, Dict
from sqlalchemy.orm import Session
from sqlalchemy import func
from speak_admin.models.lesson import Lesson
from speak_admin.models.question import Question
from speak_admin.repositories.base import BaseRepository

class LessonRepository(BaseRepository[Lesson]):
    def __init__(self, db: Session):
        super().__init__(db, Lesson)

    def get_topic_lessons(self, topic_id: int) -> List[Lesson]:
        """获取话题下的课程，按位置升序、创建时间升序"""
        return self.db.query(Lesson).filter(
            Lesson.topic_id == topic_id
        ).order_by(Lesson.position.asc(), Lesson.created_at.asc(), Lesson.id.asc()).all()

    def get_by_slug(self, topic_id: int, slug: str) -> Optional[Lesson]:
        return self.db.query(Lesson).filter(
            Lesson.topic_id == topic_id,
            Lesson.slug == slug
        ).first()

    def count_questions(self, lesson_ids: List[int]) -> Dict[int, int]:
        """统计每个课程的题目数"""
        if not lesson_ids:
            return {}
        rows = self.db.query(Question.lesson_id, func.count(Question.id)).filter(
            Question.lesson_id.in_(lesson_ids)
        ).group_by(Question.lesson_id).all()
        return {lesson_id: count for lesson_id, count in rows}
