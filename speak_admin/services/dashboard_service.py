import logging
from typing import Dict

from sqlalchemy.orm import Session

from speak_admin.repositories.lesson_repository import LessonRepository
from speak_admin.repositories.question_repository import QuestionRepository
from speak_admin.repositories.streak_repository import StreakRepository
from speak_admin.repositories.topic_repository import TopicRepository
from speak_admin.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class DashboardService:
    """首页统计服务"""

    def __init__(self, db: Session):
        self.db = db
        self.repos = {
            "users": UserRepository(db),
            "topics": TopicRepository(db),
            "lessons": LessonRepository(db),
            "questions": QuestionRepository(db),
            "streaks": StreakRepository(db),
        }

    def get_counts(self) -> Dict[str, int]:
        """一次性获取各表的记录数"""
        counts = {name: repo.count() for name, repo in self.repos.items()}
        logger.debug(f"首页统计: {counts}")
        return counts
