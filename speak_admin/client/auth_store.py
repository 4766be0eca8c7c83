"""
客户端本地登录状态
整个状态序列化为一个JSON文件（auth-storage），包含用户、令牌、是否已登录和登录时间。
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from speak_admin.config.settings import settings
from speak_admin.utils.security import is_token_expired

logger = logging.getLogger(__name__)


class SimpleUser(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = None
    role: str
    is_active: bool
    level: Optional[int] = None
    created_at: Optional[str] = None
    last_login_at: Optional[str] = None


class AuthState(BaseModel):
    is_authenticated: bool = False
    user: Optional[SimpleUser] = None
    token: Optional[str] = None
    session_time: Optional[float] = None  # 登录时间（epoch秒）


class AuthStore:
    """持久化的登录状态"""

    def __init__(self, path: Optional[str] = None, session_duration_hours: Optional[int] = None):
        self.path = Path(os.path.expanduser(path or settings.AUTH_STORAGE_PATH))
        hours = session_duration_hours or settings.SESSION_DURATION_HOURS
        self.session_duration = hours * 3600
        self.state = self._load()

    def login(self, user: SimpleUser, token: str) -> AuthState:
        self.state = AuthState(
            is_authenticated=True,
            user=user,
            token=token,
            session_time=time.time(),
        )
        self._save()
        logger.info(f"本地登录状态已保存: {user.email}")
        return self.state

    def logout(self) -> None:
        """清空本地登录状态"""
        self.state = AuthState()
        self._save()
        logger.info("本地登录状态已清除")

    def update_token(self, token: str) -> None:
        self.state.token = token
        self.state.session_time = time.time()
        self._save()

    def update_user(self, user: SimpleUser) -> None:
        """服务端确认后用最新的用户信息覆盖本地"""
        self.state.user = user
        self._save()

    def is_session_valid(self, now: Optional[float] = None) -> bool:
        """登录时间在有效期内"""
        if not self.state.session_time:
            return False
        now = time.time() if now is None else now
        return now - self.state.session_time < self.session_duration

    def is_token_valid(self, now: Optional[float] = None) -> bool:
        """本地预检查令牌格式和过期时间（不校验签名）"""
        if not self.state.token:
            return False
        at = None if now is None else datetime.fromtimestamp(now, timezone.utc)
        return not is_token_expired(self.state.token, at)

    def has_credentials(self) -> bool:
        return bool(self.state.is_authenticated and self.state.user and self.state.token)

    def _load(self) -> AuthState:
        if not self.path.exists():
            return AuthState()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return AuthState.model_validate(data)
        except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
            # 文件损坏按未登录处理
            logger.warning(f"读取本地登录状态失败: {e}")
            return AuthState()

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.state.model_dump_json(), encoding="utf-8")
