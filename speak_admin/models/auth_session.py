from sqlalchemy import Column, String, Integer, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
登录会话模型
每签发一个访问令牌就记录一条,用令牌的 jti 关联;登出、刷新或权限撤销时状态改为 revoked。
"""

SESSION_ACTIVE = "active"
SESSION_REVOKED = "revoked"
SESSION_EXPIRED = "expired"


class AuthSession(BaseModel):
    __tablename__ = "auth_sessions"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_id = Column(String(64), unique=True, index=True, nullable=False)
    status = Column(String(20), default=SESSION_ACTIVE)  # active, revoked, expired
    expires_at = Column(DateTime, nullable=False)
    ended_at = Column(DateTime)

    user = relationship("User", back_populates="auth_sessions")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "status": self.status,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
