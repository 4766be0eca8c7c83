from typing import Optional, List
from datetime import datetime
from sqlalchemy.orm import Session
from speak_admin.models.auth_session import AuthSession, SESSION_ACTIVE, SESSION_REVOKED
from speak_admin.repositories.base import BaseRepository

class AuthSessionRepository(BaseRepository[AuthSession]):
    def __init__(self, db: Session):
        super().__init__(db, AuthSession)

    def get_by_token_id(self, token_id: str) -> Optional[AuthSession]:
        """根据令牌jti获取会话"""
        return self.db.query(AuthSession).filter(AuthSession.token_id == token_id).first()

    def get_active_sessions(self, user_id: int) -> List[AuthSession]:
        """获取用户所有活跃会话"""
        return self.db.query(AuthSession).filter(
            AuthSession.user_id == user_id,
            AuthSession.status == SESSION_ACTIVE
        ).all()

    def end_session(self, session: AuthSession, status: str, ended_at: datetime) -> AuthSession:
        session.status = status
        session.ended_at = ended_at
        self.db.commit()
        self.db.refresh(session)
        return session

    def revoke_user_sessions(self, user_id: int, ended_at: datetime) -> int:
        """撤销用户所有活跃会话，返回撤销数量"""
        sessions = self.get_active_sessions(user_id)
        for session in sessions:
            session.status = SESSION_REVOKED
            session.ended_at = ended_at
        if sessions:
            self.db.commit()
        return len(sessions)
