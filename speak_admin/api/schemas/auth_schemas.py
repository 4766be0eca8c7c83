from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class LoginRequest(BaseModel):
    email: str
    password: str

class AdminUserResponse(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = None
    role: str
    is_active: bool
    level: Optional[int] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: AdminUserResponse

class LogoutResponse(BaseModel):
    message: str
