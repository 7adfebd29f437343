from fastapi import APIRouter, Depends, HTTPException, Request
from seatfinder.config.settings import settings
from seatfinder.core.dependencies import (
    get_auth_service, get_role_service, get_current_token, get_current_user_id
)
from seatfinder.core.rate_limit import limiter
from seatfinder.modules.auth.schemas import (
    LoginRequest, TokenResponse, CurrentUserResponse, ChangePasswordRequest
)
from seatfinder.modules.auth.service import AuthService, RoleService, invalidate_role_cache
from typing import Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
    role_service: RoleService = Depends(get_role_service)
):
    """Login and get access token. Role lookup is refreshed for the signed-in user."""
    token = service.login(login_data)
    invalidate_role_cache(token.user_id)
    token.is_admin = role_service.is_admin(token.user_id)
    logger.info(f"User {token.user_id} signed in (admin={token.is_admin})")
    return token


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    current_user: Dict = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and drop cached identity/roles for this user"""
    service.logout(token)
    invalidate_role_cache(current_user["id"])
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    role_service: RoleService = Depends(get_role_service)
):
    """Current user with roles and the is_admin flag used for UI gating"""
    roles = role_service.get_roles(current_user["id"])
    return CurrentUserResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        roles=roles,
        is_admin=len(roles) > 0,
        email_confirmed_at=current_user.get("email_confirmed_at"),
    )


@router.post("/password", status_code=200)
async def change_password(
    body: ChangePasswordRequest,
    current_user: Dict = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service)
):
    """Change the signed-in user's password"""
    if len(body.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")
    if body.new_password != body.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match")
    service.change_password(current_user["id"], body.new_password)
    return {"message": "Password changed successfully"}
