import time
from unittest.mock import Mock

import pytest

from speak_admin.client.api_client import ApiError
from speak_admin.client.auth_store import AuthStore, SimpleUser
from speak_admin.client.session_manager import SessionManager, SessionState, is_protected, resolve_route
from speak_admin.utils.security import create_access_token

ADMIN = {"id": 1, "email": "admin@example.com", "role": "admin", "is_active": True}


@pytest.fixture
def store(tmp_path):
    return AuthStore(path=str(tmp_path / "auth-storage.json"))


@pytest.fixture
def api():
    api = Mock()
    api.token = None
    return api


def valid_token():
    token, _, _ = create_access_token(1, ADMIN["email"], ADMIN["role"])
    return token


def logged_in(store, token=None):
    store.login(SimpleUser(**ADMIN), token or valid_token())
    return store


def test_resolve_route():
    assert resolve_route(SessionState(loading=True)) == "/"
    assert resolve_route(SessionState(is_authenticated=True, is_admin=True)) == "/dashboard"
    assert resolve_route(SessionState(is_authenticated=True, is_admin=False)) == "/login"
    assert resolve_route(SessionState()) == "/login"


def test_protected_paths():
    assert is_protected("/dashboard")
    assert is_protected("/users/12")
    assert is_protected("/user-management")
    assert not is_protected("/login")
    assert not is_protected("/dashboards")


def test_sign_in(store, api):
    token = valid_token()
    api.login.return_value = {"access_token": token, "user": ADMIN}

    state = SessionManager(store, api).sign_in(" admin@example.com ", "pw")

    api.login.assert_called_once_with("admin@example.com", "pw")
    assert state.is_authenticated and state.is_admin
    assert store.has_credentials()
    assert store.state.token == token
    assert api.token == token


def test_sign_in_rejects_non_admin_response(store, api):
    api.login.return_value = {"access_token": valid_token(), "user": {**ADMIN, "role": "user"}}
    state = SessionManager(store, api).sign_in("admin@example.com", "pw")
    assert not state.is_authenticated
    assert state.error
    assert not store.has_credentials()


def test_sign_in_failure(store, api):
    api.login.side_effect = ApiError("邮箱或密码错误", status_code=401)
    state = SessionManager(store, api).sign_in("admin@example.com", "wrong")
    assert state.error == "邮箱或密码错误"
    assert resolve_route(state) == "/login"


def test_check_session_without_credentials(store, api):
    state = SessionManager(store, api).check_session()
    assert not state.is_authenticated
    api.me.assert_not_called()


def test_check_session_confirms_with_server(store, api):
    logged_in(store)
    api.me.return_value = {**ADMIN, "display_name": "管理员"}

    state = SessionManager(store, api, check_timeout=3).check_session()

    api.me.assert_called_once_with(timeout=3)
    assert state.is_authenticated and state.is_admin
    assert store.state.user.display_name == "管理员"


def test_check_session_expired_token(store, api):
    token, _, _ = create_access_token(1, ADMIN["email"], ADMIN["role"], expires_minutes=-1)
    logged_in(store, token)

    state = SessionManager(store, api).check_session()

    assert not state.is_authenticated
    api.me.assert_not_called()
    assert not store.has_credentials()


def test_check_session_malformed_token(store, api):
    logged_in(store, "garbage")
    state = SessionManager(store, api).check_session()
    assert not state.is_authenticated
    assert store.state.token is None


def test_check_session_local_session_timeout(store, api):
    logged_in(store)
    store.state.session_time -= 25 * 3600

    state = SessionManager(store, api).check_session()

    assert not state.is_authenticated
    api.me.assert_not_called()


def test_check_session_server_rejects(store, api):
    """服务端拒绝（角色撤销、超时、网络错误）时清空本地状态"""
    logged_in(store)
    api.me.side_effect = ApiError("账号没有管理员权限或已被停用", status_code=403)

    state = SessionManager(store, api).check_session()

    assert not state.is_authenticated
    assert not store.has_credentials()
    assert api.token is None


def test_check_session_server_returns_non_admin(store, api):
    logged_in(store)
    api.me.return_value = {**ADMIN, "is_active": False}
    state = SessionManager(store, api).check_session()
    assert not state.is_admin
    assert not store.has_credentials()


def test_sign_out_clears_even_if_server_fails(store, api):
    logged_in(store)
    api.logout.side_effect = ApiError("网络请求失败")
    manager = SessionManager(store, api)

    state = manager.sign_out()

    api.logout.assert_called_once()
    assert not state.is_authenticated
    assert not store.has_credentials()


def test_refresh_session(store, api):
    logged_in(store)
    new_token = valid_token()
    api.refresh.return_value = {"access_token": new_token, "user": ADMIN}

    state = SessionManager(store, api).refresh_session()

    assert state.is_authenticated
    assert store.state.token == new_token


def test_guard(store, api):
    manager = SessionManager(store, api)
    assert manager.guard("/login") is None
    assert manager.guard("/dashboard") == "/login"

    logged_in(store)
    api.me.return_value = ADMIN
    assert manager.guard("/dashboard") is None


@pytest.mark.parametrize("result", [
    {},
    None,
    {"access_token": "tok"},
    {"access_token": None, "user": ADMIN},
    {"access_token": "tok", "user": {"id": "not-a-number"}},
])
def test_sign_in_malformed_response(store, api, result):
    """登录接口返回 200 但内容不完整时不登录"""
    api.login.return_value = result
    state = SessionManager(store, api).sign_in("admin@example.com", "pw")
    assert not state.is_authenticated
    assert state.error
    assert not store.has_credentials()
    assert api.token is None


@pytest.mark.parametrize("current", [None, [], {"email": "admin@example.com"}])
def test_check_session_malformed_response(store, api, current):
    logged_in(store)
    api.me.return_value = current

    state = SessionManager(store, api).check_session()

    assert not state.is_authenticated
    assert state.error
    assert not store.has_credentials()


def test_refresh_session_missing_token(store, api):
    logged_in(store)
    api.refresh.return_value = {"user": ADMIN}

    state = SessionManager(store, api).refresh_session()

    assert not state.is_authenticated
    assert not store.has_credentials()


def test_check_session_deadline(store, api):
    """服务端迟迟不返回时按超时处理"""
    logged_in(store)

    def slow_me(timeout=None):
        time.sleep(0.5)
        return ADMIN

    api.me.side_effect = slow_me

    started = time.monotonic()
    state = SessionManager(store, api, check_timeout=0.1).check_session()

    assert time.monotonic() - started < 0.4
    assert not state.is_authenticated
    assert state.error
    assert not store.has_credentials()
