import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from speak_admin.main import app
from speak_admin.models.base import Base
from speak_admin.models.user import User, ROLE_ADMIN, ROLE_USER
from speak_admin.utils.database import get_db
from speak_admin.utils.security import hash_password

# 测试数据库（内存库，所有连接共享）
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture(scope="function")
def db_session():
    """创建测试数据库会话"""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端（不触发 lifespan）"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_user(db_session, email, role=ROLE_USER, is_active=True, password="user-pass-123", **extra):
    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
        **extra,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, ADMIN_EMAIL, role=ROLE_ADMIN, password=ADMIN_PASSWORD,
                     display_name="管理员")


@pytest.fixture
def admin_token(client, admin_user):
    response = client.post("/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}
