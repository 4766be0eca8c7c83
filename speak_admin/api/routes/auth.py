import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from speak_admin.api.deps import get_bearer_token, get_current_admin, to_http_exception
from speak_admin.api.schemas.auth_schemas import (
    AdminUserResponse, LoginRequest, LogoutResponse, TokenResponse
)
from speak_admin.models.user import User
from speak_admin.services.auth_service import AuthService
from speak_admin.services.exceptions import AdminServiceError
from speak_admin.utils.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    管理员登录，返回访问令牌
    """
    try:
        result = AuthService(db).sign_in(credentials.email, credentials.password)
    except AdminServiceError as e:
        raise to_http_exception(e)

    return TokenResponse(
        access_token=result.token,
        expires_at=result.expires_at,
        user=AdminUserResponse.model_validate(result.user),
    )

@router.post("/logout", response_model=LogoutResponse)
async def logout(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)):
    """
    登出，撤销服务端会话（令牌已失效时同样返回成功）
    """
    AuthService(db).sign_out(token)
    return {"message": "已退出登录"}

@router.get("/me", response_model=AdminUserResponse)
async def me(current_admin: User = Depends(get_current_admin)):
    """
    获取当前管理员（客户端用来重新确认角色和启用状态）
    """
    return current_admin

@router.post("/refresh", response_model=TokenResponse)
async def refresh(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)):
    """
    换发新令牌
    """
    try:
        result = AuthService(db).refresh(token)
    except AdminServiceError as e:
        raise to_http_exception(e)

    return TokenResponse(
        access_token=result.token,
        expires_at=result.expires_at,
        user=AdminUserResponse.model_validate(result.user),
    )
