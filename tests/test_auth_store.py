import time

import pytest

from speak_admin.client.auth_store import AuthStore, SimpleUser
from speak_admin.utils.security import create_access_token


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "auth-storage.json")


@pytest.fixture
def user():
    return SimpleUser(id=1, email="admin@example.com", role="admin", is_active=True)


def test_empty_store(store_path):
    store = AuthStore(path=store_path)
    assert not store.has_credentials()
    assert not store.is_session_valid()
    assert not store.is_token_valid()


def test_login_persists(store_path, user):
    token, _, _ = create_access_token(1, user.email, user.role)
    AuthStore(path=store_path).login(user, token)

    reloaded = AuthStore(path=store_path)
    assert reloaded.has_credentials()
    assert reloaded.state.user.email == "admin@example.com"
    assert reloaded.is_session_valid()
    assert reloaded.is_token_valid()


def test_logout_clears(store_path, user):
    store = AuthStore(path=store_path)
    store.login(user, "a.b.c")
    store.logout()

    reloaded = AuthStore(path=store_path)
    assert not reloaded.has_credentials()
    assert reloaded.state.token is None


def test_session_duration(store_path, user):
    store = AuthStore(path=store_path, session_duration_hours=24)
    store.login(user, "a.b.c")
    started = store.state.session_time

    assert store.is_session_valid(now=started + 23 * 3600)
    assert not store.is_session_valid(now=started + 24 * 3600)


def test_expired_token(store_path, user):
    token, _, _ = create_access_token(1, user.email, user.role, expires_minutes=-1)
    store = AuthStore(path=store_path)
    store.login(user, token)
    assert not store.is_token_valid()


def test_token_valid_until_exp(store_path, user):
    token, _, expires_at = create_access_token(1, user.email, user.role, expires_minutes=10)
    store = AuthStore(path=store_path)
    store.login(user, token)

    assert store.is_token_valid(now=time.time())
    assert not store.is_token_valid(now=expires_at.timestamp() + 1)


def test_malformed_token(store_path, user):
    store = AuthStore(path=store_path)
    store.login(user, "not-a-token")
    assert not store.is_token_valid()


def test_corrupt_file_treated_as_logged_out(tmp_path):
    path = tmp_path / "auth-storage.json"
    path.write_text("{broken", encoding="utf-8")
    store = AuthStore(path=str(path))
    assert not store.has_credentials()


def test_update_user(store_path, user):
    store = AuthStore(path=store_path)
    store.login(user, "a.b.c")
    store.update_user(user.model_copy(update={"display_name": "新名字"}))
    assert AuthStore(path=store_path).state.user.display_name == "新名字"
