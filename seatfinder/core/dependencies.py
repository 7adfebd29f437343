"""
Core dependencies for route protection and role checking
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from seatfinder.database.supabase_client import get_supabase, get_service_supabase
from seatfinder.modules.auth.service import AuthService, RoleService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401 like an invalid token
security = HTTPBearer(auto_error=False)


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    service_client: Client = Depends(get_service_supabase),
) -> AuthService:
    return AuthService(supabase, admin_client=service_client)


def get_role_service(service_client: Client = Depends(get_service_supabase)) -> RoleService:
    return RoleService(service_client)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def require_admin(
    user_data: dict = Depends(get_current_user_id),
    role_service: RoleService = Depends(get_role_service)
) -> dict:
    """Dependency: user must hold at least one user_roles row"""
    if not role_service.is_admin(user_data["id"]):
        logger.info(f"Admin access denied for user {user_data['id']}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: admin access required"
        )
    return user_data
