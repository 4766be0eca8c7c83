"""
客户端会话与角色守卫
本地状态只做预检查（登录时间、令牌格式和过期时间），真正的权限以服务端 /auth/me 的结果为准。
任何一步检查失败都会清空本地登录状态。
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ValidationError as PydanticValidationError

from speak_admin.client.api_client import AdminApiClient, ApiError
from speak_admin.client.auth_store import AuthStore, SimpleUser
from speak_admin.config.settings import settings
from speak_admin.models.user import ROLE_ADMIN

logger = logging.getLogger(__name__)

ROUTE_LOADING = "/"
ROUTE_DASHBOARD = "/dashboard"
ROUTE_LOGIN = "/login"

PROTECTED_PREFIXES = (
    "/dashboard",
    "/users",
    "/user-management",
    "/profile",
    "/speaking",
    "/topics",
    "/lessons",
)

MALFORMED_RESPONSE_MESSAGE = "服务端返回内容异常，请重新登录"

# 200 响应但内容不是预期结构
_MALFORMED_RESPONSE = (PydanticValidationError, KeyError, TypeError)


class SessionState(BaseModel):
    is_authenticated: bool = False
    is_admin: bool = False
    user: Optional[SimpleUser] = None
    loading: bool = False
    error: Optional[str] = None


def resolve_route(state: SessionState) -> str:
    """加载中停留在根路径，管理员进入首页，其余跳转登录页"""
    if state.loading:
        return ROUTE_LOADING
    if state.is_authenticated and state.is_admin:
        return ROUTE_DASHBOARD
    return ROUTE_LOGIN


def is_protected(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PROTECTED_PREFIXES)


def _parse_token_response(result: Any) -> Tuple[SimpleUser, str]:
    """从登录/刷新响应中取出用户和令牌"""
    token = result["access_token"]
    if not isinstance(token, str) or not token:
        raise TypeError("access_token 不是有效字符串")
    return SimpleUser.model_validate(result["user"]), token


class SessionManager:
    def __init__(self, store: AuthStore, api_client: AdminApiClient,
                 check_timeout: Optional[float] = None):
        self.store = store
        self.api_client = api_client
        self.check_timeout = check_timeout or settings.PERMISSION_CHECK_TIMEOUT
        self.state = SessionState(loading=True)
        if store.state.token:
            self.api_client.token = store.state.token

    def sign_in(self, email: str, password: str) -> SessionState:
        """
        登录
        服务端已经拒绝非管理员，这里对返回的用户再确认一次角色和启用状态
        """
        try:
            user, token = _parse_token_response(self.api_client.login(email.strip(), password))
        except ApiError as e:
            logger.warning(f"登录失败: {e}")
            return self._signed_out(str(e))
        except _MALFORMED_RESPONSE as e:
            logger.warning(f"登录返回内容无法解析: {e}")
            return self._signed_out(MALFORMED_RESPONSE_MESSAGE)

        if user.role != ROLE_ADMIN or not user.is_active:
            logger.warning(f"非管理员账号尝试登录: {user.email}")
            return self._signed_out("账号没有管理员权限或已被停用")

        return self._signed_in(user, token)

    def sign_out(self) -> SessionState:
        """登出：通知服务端撤销会话，本地状态无论如何都清空"""
        if self.api_client.token:
            try:
                self.api_client.logout()
            except ApiError as e:
                logger.warning(f"服务端登出失败: {e}")
        return self._signed_out()

    def check_session(self) -> SessionState:
        """
        检查当前会话：
        1. 本地有用户和令牌
        2. 登录时间未超过有效期
        3. 令牌格式正确且未过期
        4. 服务端确认仍是启用状态的管理员（整个请求限时 check_timeout 秒）
        """
        self.state = SessionState(loading=True, user=self.store.state.user)

        if not self.store.has_credentials():
            return self._signed_out()
        if not self.store.is_session_valid():
            logger.info("本地会话已超时")
            return self._signed_out("登录已过期，请重新登录")
        if not self.store.is_token_valid():
            logger.info("本地令牌无效或已过期")
            return self._signed_out("登录已过期，请重新登录")

        self.api_client.token = self.store.state.token
        try:
            user = SimpleUser.model_validate(self._fetch_current_user())
        except FutureTimeoutError:
            logger.warning(f"服务端权限检查超过 {self.check_timeout} 秒")
            return self._signed_out("权限检查超时，请重新登录")
        except ApiError as e:
            logger.warning(f"服务端权限检查失败: {e}")
            return self._signed_out(str(e))
        except _MALFORMED_RESPONSE as e:
            logger.warning(f"权限检查返回内容无法解析: {e}")
            return self._signed_out(MALFORMED_RESPONSE_MESSAGE)

        if user.role != ROLE_ADMIN or not user.is_active:
            return self._signed_out("账号没有管理员权限或已被停用")

        self.store.update_user(user)
        self.state = SessionState(is_authenticated=True, is_admin=True, user=user)
        return self.state

    def refresh_session(self) -> SessionState:
        """换发令牌，失败则清空本地状态"""
        try:
            user, token = _parse_token_response(self.api_client.refresh())
        except ApiError as e:
            logger.warning(f"令牌刷新失败: {e}")
            return self._signed_out(str(e))
        except _MALFORMED_RESPONSE as e:
            logger.warning(f"刷新返回内容无法解析: {e}")
            return self._signed_out(MALFORMED_RESPONSE_MESSAGE)

        return self._signed_in(user, token)

    def guard(self, path: str) -> Optional[str]:
        """
        访问受保护页面前调用，返回需要跳转的路径；None 表示可以访问
        """
        if not is_protected(path):
            return None
        state = self.check_session()
        if state.is_authenticated and state.is_admin:
            return None
        return ROUTE_LOGIN

    def _fetch_current_user(self) -> Any:
        # requests 的 timeout 只限制单次连接和读取，这里再给整个调用加一个总时限
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self.api_client.me, timeout=self.check_timeout)
            return future.result(timeout=self.check_timeout)
        finally:
            executor.shutdown(wait=False)

    def _signed_in(self, user: SimpleUser, token: str) -> SessionState:
        self.store.login(user, token)
        self.api_client.token = token
        self.state = SessionState(is_authenticated=True, is_admin=True, user=user)
        return self.state

    def _signed_out(self, error: Optional[str] = None) -> SessionState:
        self.store.logout()
        self.api_client.token = None
        self.state = SessionState(error=error)
        return self.state
