from pydantic import BaseModel, EmailStr
from typing import Optional, List
from datetime import datetime


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    is_admin: bool = False


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    roles: List[str] = []
    is_admin: bool = False
    email_confirmed_at: Optional[datetime] = None


class ChangePasswordRequest(BaseModel):
    new_password: str
    confirm_password: str


class RoleAssignmentResponse(BaseModel):
    id: str
    user_id: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True
