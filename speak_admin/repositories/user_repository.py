from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session
from speak_admin.models.user import User, ROLE_USER
from speak_admin.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """根据邮箱获取用户（不区分大小写）"""
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def get_learners(self) -> List[User]:
        """获取所有普通用户，按创建时间倒序"""
        return self.db.query(User).filter(
            User.role == ROLE_USER
        ).order_by(User.created_at.desc(), User.id.desc()).all()

    def get_all_newest_first(self) -> List[User]:
        """获取所有用户，按创建时间倒序"""
        return self.db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
