import hashlib
import time
import logging
from supabase import Client
from seatfinder.config.tables_config import ADMIN_ROLES
from seatfinder.core.exceptions import BackendError
from seatfinder.modules.auth.schemas import LoginRequest, TokenResponse, RoleAssignmentResponse
from fastapi import HTTPException
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

# user_id -> (role names, expires_at). Invalidated on login/logout and role removal
_ROLE_CACHE: Dict[str, tuple] = {}
_ROLE_CACHE_TTL_SEC = 300
_ROLE_CACHE_MAX_SIZE = 500


def clear_auth_cache(token: Optional[str] = None):
    if token is None:
        _AUTH_USER_CACHE.clear()
        return
    _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)


def invalidate_role_cache(user_id: Optional[str] = None):
    if user_id is None:
        _ROLE_CACHE.clear()
        return
    _ROLE_CACHE.pop(user_id, None)


class AuthService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        self.admin_client = admin_client

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "email_confirmed_at": getattr(user, "email_confirmed_at", None),
                "created_at": user.created_at,
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        clear_auth_cache(token)
        try:
            # Supabase tokens are stateless JWTs, so logout is mainly client-side
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Supabase sign_out failed: {e}")
            return False

    def change_password(self, user_id: str, new_password: str) -> None:
        """Set a new password for the user (requires service role key)"""
        if self.admin_client is None:
            raise HTTPException(
                status_code=500,
                detail="Service role key not configured. Cannot change password."
            )
        try:
            self.admin_client.auth.admin.update_user_by_id(user_id, {"password": new_password})
        except Exception as e:
            raise BackendError.from_exception(e)


class RoleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def fetch_roles(self, user_id: str) -> List[str]:
        """Read role names for a user straight from user_roles (one round-trip, no cache)."""
        result = self.supabase.table("user_roles")\
            .select("role")\
            .eq("user_id", user_id)\
            .execute()
        return [r["role"] for r in (result.data or [])]

    def get_roles(self, user_id: str) -> List[str]:
        """Role names for a user, cached per user id for a few minutes."""
        cached = _ROLE_CACHE.get(user_id)
        now = time.time()
        if cached is not None and cached[1] > now:
            return cached[0]
        try:
            roles = self.fetch_roles(user_id)
        except Exception as e:
            # Not cached: a transient failure must not pin the user as non-admin
            logger.error(f"Error getting roles for user {user_id}: {e}")
            return []
        if len(_ROLE_CACHE) >= _ROLE_CACHE_MAX_SIZE:
            for key in [k for k, (_, expires_at) in _ROLE_CACHE.items() if expires_at <= now]:
                del _ROLE_CACHE[key]
        if len(_ROLE_CACHE) < _ROLE_CACHE_MAX_SIZE:
            _ROLE_CACHE[user_id] = (roles, now + _ROLE_CACHE_TTL_SEC)
        return roles

    def is_admin(self, user_id: str) -> bool:
        """Any role row grants admin UI access"""
        return len(self.get_roles(user_id)) > 0

    def has_elevated_role(self, user_id: str) -> bool:
        """True if the user holds admin or super_admin (cached; for display only)"""
        return any(role in ADMIN_ROLES for role in self.get_roles(user_id))

    def verify_elevated_role(self, user_id: str) -> bool:
        """
        Authoritative admin/super_admin check for privileged operations.
        Always reads user_roles; the cache is refreshed with the result.
        """
        try:
            roles = self.fetch_roles(user_id)
        except Exception as e:
            logger.error(f"Error verifying roles for user {user_id}: {e}")
            invalidate_role_cache(user_id)
            return False
        if user_id in _ROLE_CACHE or len(_ROLE_CACHE) < _ROLE_CACHE_MAX_SIZE:
            _ROLE_CACHE[user_id] = (roles, time.time() + _ROLE_CACHE_TTL_SEC)
        return any(role in ADMIN_ROLES for role in roles)

    def list_role_assignments(self) -> List[RoleAssignmentResponse]:
        try:
            result = self.supabase.table("user_roles")\
                .select("*")\
                .order("created_at")\
                .execute()
            return [RoleAssignmentResponse(**r) for r in (result.data or [])]
        except Exception as e:
            raise BackendError.from_exception(e)

    def get_role_assignment(self, role_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("user_roles")\
                .select("*")\
                .eq("id", role_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise BackendError.from_exception(e)
        return result.data[0] if result.data else None

    def remove_role_assignment(self, role_id: str, user_id: str) -> None:
        try:
            self.supabase.table("user_roles").delete().eq("id", role_id).execute()
        except Exception as e:
            raise BackendError.from_exception(e)
        invalidate_role_cache(user_id)
