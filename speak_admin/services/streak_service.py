import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from speak_admin.models.streak import StreakRecord
from speak_admin.repositories.streak_repository import StreakRepository
from speak_admin.repositories.user_repository import UserRepository
from speak_admin.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)

# (最低连续天数, 等级名称)，从高到低
STREAK_LEVELS = (
    (30, "Master"),
    (14, "Expert"),
    (7, "Advanced"),
    (3, "Intermediate"),
    (0, "Beginner"),
)


def streak_level(current_streak: Optional[int]) -> str:
    """根据当前连续天数返回等级名称"""
    value = current_streak or 0
    for threshold, label in STREAK_LEVELS:
        if value >= threshold:
            return label
    return STREAK_LEVELS[-1][1]


class StreakService:
    """打卡连续天数服务"""

    def __init__(self, db: Session):
        self.db = db
        self.streak_repo = StreakRepository(db)
        self.user_repo = UserRepository(db)

    def record_checkin(self, user_id: int, today: Optional[date] = None) -> StreakRecord:
        """
        记录一次打卡
        - 同一天重复打卡不变
        - 昨天打过卡则连续天数+1，否则重置为1
        - 最长连续天数取历史最大值
        """
        if not self.user_repo.get_by_id(user_id):
            raise NotFoundError("用户", user_id)

        today = today or date.today()
        streak = self.streak_repo.get_by_user(user_id)
        if not streak:
            streak = self.streak_repo.create(
                user_id=user_id, current_streak=0, longest_streak=0
            )

        if streak.last_checkin_date == today:
            return streak

        if streak.last_checkin_date == today - timedelta(days=1):
            current = (streak.current_streak or 0) + 1
        else:
            current = 1

        streak = self.streak_repo.update(
            streak.id,
            current_streak=current,
            longest_streak=max(current, streak.longest_streak or 0),
            last_checkin_date=today,
        )
        logger.debug(f"用户 {user_id} 打卡: 连续 {streak.current_streak} 天")
        return streak
