#!/usr/bin/env python3
"""
用户管理服务模块
处理学员列表的搜索/筛选/分页、用户详情（含打卡记录）、管理员权限的授予与撤销、账号启用停用等逻辑
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from sqlalchemy.orm import Session

from speak_admin.config.settings import settings
from speak_admin.models.streak import StreakRecord
from speak_admin.models.user import User, ROLE_ADMIN, ROLE_USER
from speak_admin.repositories.streak_repository import StreakRepository
from speak_admin.repositories.user_repository import UserRepository
from speak_admin.services.auth_service import AuthService
from speak_admin.services.exceptions import NotFoundError, ValidationError
from speak_admin.services.streak_service import streak_level
from speak_admin.utils.helpers import paginate

logger = logging.getLogger(__name__)

FILTER_ALL = "all"
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


class UserWithStreak(NamedTuple):
    user: User
    streak: Optional[StreakRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user.to_dict(),
            "streak": self.streak.to_dict() if self.streak else None,
            "streak_level": streak_level(self.streak.current_streak if self.streak else 0),
        }


def filter_users(rows: Sequence[UserWithStreak], search: Optional[str] = None,
                 tier: str = FILTER_ALL, status: str = FILTER_ALL) -> List[UserWithStreak]:
    """
    内存筛选
    - search: 邮箱或显示名包含关键字（不区分大小写）
    - tier: 订阅等级精确匹配，all表示不过滤
    - status: active / inactive / all
    """
    result = list(rows)

    keyword = (search or "").strip().lower()
    if keyword:
        result = [
            row for row in result
            if keyword in (row.user.email or "").lower()
            or keyword in (row.user.display_name or "").lower()
        ]

    if tier and tier != FILTER_ALL:
        result = [row for row in result if row.user.subscription_tier == tier]

    if status == STATUS_ACTIVE:
        result = [row for row in result if row.user.is_active]
    elif status == STATUS_INACTIVE:
        result = [row for row in result if not row.user.is_active]

    return result


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.streak_repo = StreakRepository(db)
        self.auth_service = AuthService(db)

    def get_user_by_id(self, user_id: int) -> User:
        """根据ID获取用户信息"""
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("用户", user_id)
        return user

    def list_learners(self, search: Optional[str] = None, tier: str = FILTER_ALL,
                      status: str = FILTER_ALL, page: int = 1,
                      page_size: Optional[int] = None) -> Dict[str, Any]:
        """
        学员列表
        先取出全部普通用户并关联打卡记录，再在内存中筛选和分页
        """
        if status not in (FILTER_ALL, STATUS_ACTIVE, STATUS_INACTIVE):
            raise ValidationError("status", f"未知的状态筛选: {status}")
        page_size = page_size or settings.USERS_PAGE_SIZE

        users = self.user_repo.get_learners()
        streaks = self.streak_repo.get_for_users([u.id for u in users])
        rows = [UserWithStreak(u, streaks.get(u.id)) for u in users]

        filtered = filter_users(rows, search=search, tier=tier, status=status)
        items, page, total_pages = paginate(filtered, page, page_size)

        logger.debug(f"学员列表: 共 {len(rows)} 人, 筛选后 {len(filtered)} 人, 第 {page}/{total_pages} 页")
        return {
            "items": [row.to_dict() for row in items],
            "total": len(filtered),
            "page": page,
            "page_size": page_size,
            "total_pages": total_pages,
        }

    def get_profile(self, user_id: int) -> Dict[str, Any]:
        """用户详情：基本信息 + 打卡记录 + 打卡等级"""
        user = self.get_user_by_id(user_id)
        return UserWithStreak(user, self.streak_repo.get_by_user(user_id)).to_dict()

    def role_overview(self) -> Dict[str, Any]:
        """所有用户的角色一览及统计"""
        users = self.user_repo.get_all_newest_first()
        return {
            "users": [
                {"id": u.id, "email": u.email, "role": u.role, "is_active": u.is_active}
                for u in users
            ],
            "admin_count": sum(1 for u in users if u.role == ROLE_ADMIN and u.is_active),
            "user_count": sum(1 for u in users if u.role == ROLE_USER and u.is_active),
            "inactive_count": sum(1 for u in users if not u.is_active),
        }

    def grant_admin(self, user_id: int) -> User:
        """授予管理员权限，仅限启用状态的账号"""
        user = self.get_user_by_id(user_id)
        if not user.is_active:
            raise ValidationError("is_active", "账号已停用，不能授予管理员权限")
        user = self.user_repo.update(user_id, role=ROLE_ADMIN)
        logger.info(f"已授予管理员权限: {user.email}")
        return user

    def revoke_admin(self, user_id: int, acting_user_id: int) -> User:
        """撤销管理员权限，并让其所有会话下线"""
        user = self.get_user_by_id(user_id)
        if user_id == acting_user_id:
            raise ValidationError("role", "不能撤销自己的管理员权限")
        user = self.user_repo.update(user_id, role=ROLE_USER)
        self.auth_service.revoke_user_sessions(user_id)
        logger.info(f"已撤销管理员权限: {user.email}")
        return user

    def set_active(self, user_id: int, is_active: bool, acting_user_id: int) -> User:
        """启用或停用账号；停用时让其所有会话下线"""
        user = self.get_user_by_id(user_id)
        if not is_active and user_id == acting_user_id:
            raise ValidationError("is_active", "不能停用自己的账号")
        user = self.user_repo.update(user_id, is_active=is_active)
        if not is_active:
            self.auth_service.revoke_user_sessions(user_id)
        logger.info(f"账号状态更新: {user.email} -> {'启用' if is_active else '停用'}")
        return user
