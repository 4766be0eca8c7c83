from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import logging

from speak_admin.config.settings import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    """按数据库类型生成引擎参数"""
    if database_url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            # 内存库需要所有连接共享同一个连接
            options["poolclass"] = StaticPool
        return options
    return {"pool_pre_ping": True, "pool_recycle": 3600}


# 创建数据库引擎
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # 在DEBUG模式下输出SQL语句
    **_engine_options(settings.DATABASE_URL),
)

# 创建SessionLocal类
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"数据库会话错误: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def get_db_session() -> Session:
    """
    直接获取数据库会话
    在启动任务和脚本中使用，调用方负责关闭
    """
    return SessionLocal()


def check_db_connection() -> bool:
    """检查数据库连接是否正常"""
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        return True
    except Exception as e:
        logger.error(f"数据库连接检查失败: {e}")
        return False


def init_db():
    """初始化数据库表，并按配置创建初始管理员"""
    try:
        from speak_admin.models.base import Base
        from speak_admin.models.user import User  # noqa: F401
        from speak_admin.models.topic import Topic  # noqa: F401
        from speak_admin.models.lesson import Lesson  # noqa: F401
        from speak_admin.models.question import Question  # noqa: F401
        from speak_admin.models.streak import StreakRecord  # noqa: F401
        from speak_admin.models.auth_session import AuthSession  # noqa: F401

        # 创建所有表
        Base.metadata.create_all(bind=engine)
        logger.info("数据库表初始化完成")

        if settings.INITIAL_ADMIN_EMAIL and settings.INITIAL_ADMIN_PASSWORD:
            _init_admin_user()

    except Exception as e:
        logger.error(f"数据库初始化失败: {e}")
        raise


def _init_admin_user():
    """创建或修复初始管理员账号"""
    from speak_admin.services.auth_service import AuthService

    db = get_db_session()
    try:
        AuthService(db).ensure_admin_user(
            settings.INITIAL_ADMIN_EMAIL,
            settings.INITIAL_ADMIN_PASSWORD,
        )
        logger.info(f"初始管理员已就绪: {settings.INITIAL_ADMIN_EMAIL}")
    finally:
        db.close()
