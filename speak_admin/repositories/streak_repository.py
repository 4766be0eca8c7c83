from typing import Optional, List, Dict
from sqlalchemy.orm import Session
from speak_admin.models.streak import StreakRecord
from speak_admin.repositories.base import BaseRepository

class StreakRepository(BaseRepository[StreakRecord]):
    def __init__(self, db: Session):
        super().__init__(db, StreakRecord)

    def get_by_user(self, user_id: int) -> Optional[StreakRecord]:
        return self.db.query(StreakRecord).filter(StreakRecord.user_id == user_id).first()

    def get_for_users(self, user_ids: List[int]) -> Dict[int, StreakRecord]:
        """批量获取用户的打卡记录，按user_id索引"""
        if not user_ids:
            return {}
        rows = self.db.query(StreakRecord).filter(StreakRecord.user_id.in_(user_ids)).all()
        return {row.user_id: row for row in rows}
