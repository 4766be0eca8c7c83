import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import jwt
import pytz
from sqlalchemy.orm import Session

from speak_admin.models.auth_session import SESSION_ACTIVE, SESSION_EXPIRED, SESSION_REVOKED
from speak_admin.models.user import User, ROLE_ADMIN
from speak_admin.repositories.auth_session_repository import AuthSessionRepository
from speak_admin.repositories.user_repository import UserRepository
from speak_admin.services.exceptions import AuthenticationError, PermissionDeniedError
from speak_admin.utils.helpers import as_utc
from speak_admin.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


@dataclass
class SignInResult:
    token: str
    expires_at: datetime
    user: User


class AuthService:
    """
    管理员登录会话服务
    - 登录：校验密码 + 只允许启用状态的管理员
    - 每次鉴权：校验令牌签名和过期时间、服务端会话状态，并重新读取用户角色
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.session_repo = AuthSessionRepository(db)

    def sign_in(self, email: str, password: str) -> SignInResult:
        """邮箱密码登录"""
        user = self.user_repo.get_by_email(email or "")
        if not user or not verify_password(user.password_hash, password):
            logger.warning(f"登录失败，账号或密码错误: {email}")
            raise AuthenticationError("邮箱或密码错误")

        if not user.is_admin:
            logger.warning(f"登录被拒绝，非管理员或已停用: {email} role={user.role} active={user.is_active}")
            raise PermissionDeniedError()

        now = datetime.now(pytz.utc)
        token, token_id, expires_at = create_access_token(user.id, user.email, user.role)
        self.session_repo.create(user_id=user.id, token_id=token_id, expires_at=expires_at)
        user = self.user_repo.update(user.id, last_login_at=now)

        logger.info(f"管理员登录成功: {user.email}")
        return SignInResult(token=token, expires_at=expires_at, user=user)

    def sign_out(self, token: str) -> bool:
        """登出，撤销服务端会话；令牌无法识别时返回False"""
        token_id = self._token_id_for_sign_out(token)
        if not token_id:
            return False

        session = self.session_repo.get_by_token_id(token_id)
        if not session:
            return False
        if session.status == SESSION_ACTIVE:
            self.session_repo.end_session(session, SESSION_REVOKED, datetime.now(pytz.utc))
            logger.info(f"会话已登出: user={session.user_id}")
        return True

    def verify(self, token: str) -> User:
        """
        校验令牌并返回当前管理员

        Raises:
            AuthenticationError: 令牌无效、过期或会话已失效
            PermissionDeniedError: 用户不再是启用状态的管理员（同时撤销该会话）
        """
        if not token:
            raise AuthenticationError("缺少访问令牌")

        try:
            payload = decode_access_token(token)
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("登录已过期，请重新登录")
        except jwt.InvalidTokenError as e:
            logger.warning(f"令牌校验失败: {e}")
            raise AuthenticationError("访问令牌无效")

        session = self.session_repo.get_by_token_id(payload["jti"])
        if not session or session.status != SESSION_ACTIVE:
            raise AuthenticationError("会话已失效，请重新登录")

        now = datetime.now(pytz.utc)
        if as_utc(session.expires_at) <= now:
            self.session_repo.end_session(session, SESSION_EXPIRED, now)
            raise AuthenticationError("登录已过期，请重新登录")

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            raise AuthenticationError("访问令牌无效")

        user = self.user_repo.get_by_id(user_id)
        if not user or user.id != session.user_id:
            raise AuthenticationError("访问令牌无效")

        if not user.is_admin:
            # 角色被撤销或账号被停用：直接让该会话下线
            self.session_repo.end_session(session, SESSION_REVOKED, now)
            logger.warning(f"非管理员访问被拒绝并已登出: {user.email}")
            raise PermissionDeniedError()

        return user

    def refresh(self, token: str) -> SignInResult:
        """换发新令牌，旧会话随即撤销"""
        user = self.verify(token)
        old_session = self.session_repo.get_by_token_id(decode_access_token(token)["jti"])

        new_token, token_id, expires_at = create_access_token(user.id, user.email, user.role)
        self.session_repo.create(user_id=user.id, token_id=token_id, expires_at=expires_at)
        self.session_repo.end_session(old_session, SESSION_REVOKED, datetime.now(pytz.utc))

        logger.info(f"令牌已刷新: {user.email}")
        return SignInResult(token=new_token, expires_at=expires_at, user=user)

    def revoke_user_sessions(self, user_id: int) -> int:
        """撤销某个用户的全部活跃会话"""
        count = self.session_repo.revoke_user_sessions(user_id, datetime.now(pytz.utc))
        if count:
            logger.info(f"已撤销用户 {user_id} 的 {count} 个会话")
        return count

    def ensure_admin_user(self, email: str, password: Optional[str] = None,
                          display_name: Optional[str] = None) -> User:
        """
        确保指定邮箱是启用状态的管理员
        - 不存在则创建
        - 存在则提升为管理员并启用；给了密码时同时重置密码
        """
        normalized = email.strip().lower()
        user = self.user_repo.get_by_email(normalized)

        if user:
            update_data = {"role": ROLE_ADMIN, "is_active": True}
            if password:
                update_data["password_hash"] = hash_password(password)
            user = self.user_repo.update(user.id, **update_data)
            logger.info(f"已将现有用户设为管理员: {normalized}")
            return user

        user = self.user_repo.create(
            email=normalized,
            display_name=display_name,
            password_hash=hash_password(password) if password else None,
            role=ROLE_ADMIN,
            is_active=True,
        )
        logger.info(f"已创建管理员: {normalized}")
        return user

    def _token_id_for_sign_out(self, token: str) -> Optional[str]:
        # 登出时允许令牌已过期，但签名必须正确
        if not token:
            return None
        try:
            payload = decode_access_token(token, verify_exp=False)
        except jwt.InvalidTokenError:
            return None
        return payload.get("jti")
