from sqlalchemy import Column, String, Integer, Boolean, DateTime
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
用户模型
记录平台账号信息,包括邮箱、显示名、密码哈希、角色(admin/user)、是否启用、订阅等级、等级、头像、最近登录时间等。
只有 is_active 且 role=admin 的账号可以登录管理后台。
"""

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(100))
    password_hash = Column(String(255))
    role = Column(String(20), nullable=False, default=ROLE_USER)  # admin, user
    is_active = Column(Boolean, default=True)
    subscription_tier = Column(String(20), default="free")  # free, pro
    level = Column(Integer, default=1)
    profile_image_url = Column(String(500))
    last_login_at = Column(DateTime)

    streak = relationship(
        "StreakRecord", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    auth_sessions = relationship(
        "AuthSession", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN and bool(self.is_active)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "role": self.role,
            "is_active": self.is_active,
            "subscription_tier": self.subscription_tier,
            "level": self.level,
            "profile_image_url": self.profile_image_url,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
