"""
密码哈希与访问令牌工具

服务端签发和校验令牌时一律使用 decode_access_token（校验签名和过期时间）；
decode_token_payload 不校验签名，只给客户端做本地预检查用。
"""

import logging
import math
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import jwt
import pytz
from werkzeug.security import check_password_hash, generate_password_hash

from speak_admin.config.settings import settings

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: Optional[str], password: str) -> bool:
    if not password_hash or not password:
        return False
    return check_password_hash(password_hash, password)


def create_access_token(user_id: int, email: str, role: str,
                        expires_minutes: Optional[int] = None) -> Tuple[str, str, datetime]:
    """
    签发访问令牌

    Returns:
        (token, jti, 过期时间)
    """
    now = datetime.now(pytz.utc)
    expires_at = now + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token_id = uuid.uuid4().hex
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "jti": token_id,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, token_id, expires_at


def decode_access_token(token: str, verify_exp: bool = True) -> Dict[str, Any]:
    """
    校验并解码访问令牌

    Args:
        verify_exp: 为False时只校验签名（用于登出已过期的令牌）

    Raises:
        jwt.ExpiredSignatureError: 令牌已过期
        jwt.InvalidTokenError: 签名错误或格式非法
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub", "jti"], "verify_exp": verify_exp},
    )


def decode_token_payload(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """不校验签名地解码payload，格式不合法时返回None"""
    if not token or not isinstance(token, str):
        return None
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        logger.debug(f"令牌payload解码失败: {e}")
        return None


def is_token_expired(token: Optional[str], now: Optional[datetime] = None) -> bool:
    """本地判断令牌是否过期；无法解析或缺少exp一律视为过期"""
    payload = decode_token_payload(token)
    if not payload:
        return True
    exp = payload.get("exp")
    if not isinstance(exp, (int, float)) or isinstance(exp, bool) or not math.isfinite(exp):
        return True
    now = now or datetime.now(pytz.utc)
    return exp <= now.timestamp()
