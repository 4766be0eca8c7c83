import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from speak_admin.api.deps import get_current_admin, to_http_exception
from speak_admin.api.schemas.user_schemas import (
    RoleOverviewResponse, UserListResponse, UserResponse,
    UserStatusUpdate, UserWithStreakResponse
)
from speak_admin.models.user import User
from speak_admin.services.exceptions import AdminServiceError
from speak_admin.services.user_service import UserService
from speak_admin.utils.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=UserListResponse)
async def list_learners(
    search: Optional[str] = None,
    tier: str = "all",
    status: str = "all",
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """
    学员列表：按邮箱/显示名搜索，按订阅等级和状态筛选，分页
    """
    try:
        return UserService(db).list_learners(
            search=search, tier=tier, status=status, page=page, page_size=page_size
        )
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.get("/roles", response_model=RoleOverviewResponse)
async def role_overview(db: Session = Depends(get_db),
                        current_admin: User = Depends(get_current_admin)):
    """
    所有用户的角色一览
    """
    return UserService(db).role_overview()

@router.get("/{user_id}", response_model=UserWithStreakResponse)
async def get_user_profile(user_id: int, db: Session = Depends(get_db),
                           current_admin: User = Depends(get_current_admin)):
    """
    用户详情（含打卡记录）
    """
    try:
        return UserService(db).get_profile(user_id)
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.post("/{user_id}/grant-admin", response_model=UserResponse)
async def grant_admin(user_id: int, db: Session = Depends(get_db),
                      current_admin: User = Depends(get_current_admin)):
    """
    授予管理员权限
    """
    try:
        return UserService(db).grant_admin(user_id)
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.post("/{user_id}/revoke-admin", response_model=UserResponse)
async def revoke_admin(user_id: int, db: Session = Depends(get_db),
                       current_admin: User = Depends(get_current_admin)):
    """
    撤销管理员权限
    """
    try:
        return UserService(db).revoke_admin(user_id, acting_user_id=current_admin.id)
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.put("/{user_id}/status", response_model=UserResponse)
async def update_user_status(user_id: int, status_data: UserStatusUpdate,
                             db: Session = Depends(get_db),
                             current_admin: User = Depends(get_current_admin)):
    """
    启用/停用账号
    """
    try:
        return UserService(db).set_active(
            user_id, status_data.is_active, acting_user_id=current_admin.id
        )
    except AdminServiceError as e:
        raise to_http_exception(e)
