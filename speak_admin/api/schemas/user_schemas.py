from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import date, datetime

class UserResponse(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = None
    role: str
    is_active: bool
    subscription_tier: Optional[str] = None
    level: Optional[int] = None
    profile_image_url: Optional[str] = None
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )

class StreakResponse(BaseModel):
    user_id: int
    current_streak: int
    longest_streak: int
    last_checkin_date: Optional[date] = None
    updated_at: Optional[datetime] = None

class UserWithStreakResponse(BaseModel):
    user: UserResponse
    streak: Optional[StreakResponse] = None
    streak_level: str

class UserListResponse(BaseModel):
    items: List[UserWithStreakResponse]
    total: int
    page: int
    page_size: int
    total_pages: int

class UserRoleItem(BaseModel):
    id: int
    email: str
    role: str
    is_active: bool

class RoleOverviewResponse(BaseModel):
    users: List[UserRoleItem]
    admin_count: int
    user_count: int
    inactive_count: int

class UserStatusUpdate(BaseModel):
    is_active: bool
