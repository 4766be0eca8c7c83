from sqlalchemy import Column, Integer, ForeignKey, Date
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
打卡连续记录模型
每个用户一条,保存当前连续天数、历史最长连续天数和最近打卡日期。
"""
class StreakRecord(BaseModel):
    __tablename__ = "user_checkin_streak"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    current_streak = Column(Integer, default=0)
    longest_streak = Column(Integer, default=0)
    last_checkin_date = Column(Date)

    user = relationship("User", back_populates="streak")

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_checkin_date": self.last_checkin_date.isoformat() if self.last_checkin_date else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
