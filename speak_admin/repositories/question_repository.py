from typing import List
from sqlalchemy.orm import Session
from speak_admin.models.question import Question
from speak_admin.repositories.base import BaseRepository

class QuestionRepository(BaseRepository[Question]):
    def __init__(self, db: Session):
        super().__init__(db, Question)

    def get_lesson_questions(self, lesson_id: int) -> List[Question]:
        """获取课程下的题目，按位置升序、创建时间升序"""
        return self.db.query(Question).filter(
            Question.lesson_id == lesson_id
        ).order_by(Question.position.asc(), Question.created_at.asc(), Question.id.asc()).all()
