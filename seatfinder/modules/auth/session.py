"""
Explicit admin session for programmatic clients.

Holds the signed-in identity, exposes current_user() / is_admin() /
on_session_change(), and caches the role lookup per user id. The cache is
dropped on every sign-in and sign-out.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from seatfinder.modules.auth.schemas import LoginRequest, TokenResponse
from seatfinder.modules.auth.service import AuthService, RoleService

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[Dict[str, Any]]], None]


class AdminSession:
    def __init__(self, auth_service: AuthService, role_service: RoleService):
        self.auth_service = auth_service
        self.role_service = role_service
        self._user: Optional[Dict[str, Any]] = None
        self._token: Optional[str] = None
        self._roles: Dict[str, List[str]] = {}
        self._listeners: List[SessionListener] = []
        self.admin_loading = False

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def access_token(self) -> Optional[str]:
        return self._token

    def current_user(self) -> Optional[Dict[str, Any]]:
        return self._user

    def sign_in(self, email: str, password: str) -> TokenResponse:
        token = self.auth_service.login(LoginRequest(email=email, password=password))
        self._roles.clear()
        self._token = token.access_token
        self._user = {"id": token.user_id, "email": token.email}
        self._notify()
        return token

    def sign_out(self) -> None:
        if self._token:
            self.auth_service.logout(self._token)
        self._roles.clear()
        self._token = None
        self._user = None
        self._notify()

    def roles(self) -> List[str]:
        if self._user is None:
            return []
        user_id = self._user["id"]
        if user_id not in self._roles:
            self.admin_loading = True
            try:
                self._roles[user_id] = self.role_service.fetch_roles(user_id)
            finally:
                self.admin_loading = False
        return self._roles[user_id]

    def is_admin(self) -> bool:
        return len(self.roles()) > 0

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Register a listener called with the new user (or None). Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            try:
                listener(self._user)
            except Exception as e:
                logger.warning(f"Session listener failed: {e}")
