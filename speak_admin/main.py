#!/usr/bin/env python3
"""
口语课程管理后台 - FastAPI 主应用入口
Description: 提供话题/课程/题目/用户的管理接口，所有管理接口都要求有效的管理员会话
"""

import logging
import platform
from contextlib import asynccontextmanager

import psutil
import uvicorn
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from speak_admin.config.settings import settings
from speak_admin.services.content_draft_service import ContentDraftService
from speak_admin.utils.database import check_db_connection, init_db
from speak_admin.utils.helpers import format_timestamp
from speak_admin.utils.logger import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    - 启动时初始化日志、数据库表和草稿服务
    """
    setup_logging()
    logger.info("初始化管理后台...")

    try:
        init_db()
        app.state.draft_service = ContentDraftService()
        logger.info("管理后台启动完成")
    except Exception as e:
        logger.error(f"应用启动失败: {e}")
        raise

    yield

    logger.info("管理后台已关闭")

def create_application() -> FastAPI:
    """创建并配置FastAPI应用实例"""

    app = FastAPI(
        title=settings.APP_NAME,
        description="口语练习平台的话题、课程、题目和用户管理接口",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # 配置CORS中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 全局异常处理，未知路由的404也走这里
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        return JSONResponse(
            status_code=422,
            content={"error": "请求参数校验失败", "details": jsonable_encoder(exc.errors())}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.error(f"未处理的异常: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "内部服务器错误"}
        )

    from speak_admin.api.routes import auth, dashboard, drafts, lessons, questions, topics, users

    # 注册API路由
    app.include_router(auth.router, prefix="/api/v1/auth", tags=["登录认证"])
    app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["首页统计"])
    app.include_router(topics.router, prefix="/api/v1/topics", tags=["话题管理"])
    app.include_router(lessons.router, prefix="/api/v1/lessons", tags=["课程管理"])
    app.include_router(questions.router, prefix="/api/v1/questions", tags=["题目管理"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["用户管理"])
    app.include_router(drafts.router, prefix="/api/v1/drafts", tags=["AI草稿"])

    # 健康检查端点
    @app.get("/")
    async def root():
        """根端点 - 服务状态检查"""
        return {
            "status": "running",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": format_timestamp()
        }

    @app.get("/health")
    async def health_check():
        """健康检查端点"""
        db_status = check_db_connection()
        return {
            "status": "healthy" if db_status else "unhealthy",
            "database": "connected" if db_status else "disconnected",
            "timestamp": format_timestamp()
        }

    @app.get("/api/v1/system/info")
    async def system_info():
        """系统信息端点"""
        return {
            "python_version": platform.python_version(),
            "platform": platform.platform(),
            "cpu_usage": psutil.cpu_percent(),
            "memory_usage": psutil.virtual_memory().percent,
            "access_token_expire_minutes": settings.ACCESS_TOKEN_EXPIRE_MINUTES,
            "users_page_size": settings.USERS_PAGE_SIZE,
            "llm_model": settings.LLM_MODEL if settings.LLM_API_KEY else "mock",
        }

    return app

# 创建应用实例
app = create_application()

if __name__ == "__main__":
    """开发环境直接运行"""
    uvicorn.run(
        "speak_admin.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        log_level="info",
    )
