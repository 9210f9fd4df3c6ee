from __future__ import annotations

import logging
from typing import Any, Optional

from bsm.domain.errors import AuthorizationError, NotFoundError
from bsm.domain.models import USER_ROLES, User

log = logging.getLogger(__name__)


PERMISSIONS: dict[str, set[str]] = {
    "manage_users": {"admin"},
    "change_settings": {"admin"},
}


def role_allows(user: User, action: str) -> bool:
    return user.role in PERMISSIONS.get(action, ())


def require_permission(user: Optional[User], action: str) -> None:
    if user is None:
        raise AuthorizationError("Login required.")
    if not role_allows(user, action):
        raise AuthorizationError(f"Role '{user.role}' is not allowed to perform '{action}'.")


class AuthService:
    """Login session for one caller plus role checks."""

    def __init__(self, provider):
        self.provider = provider
        self._current: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._current

    @property
    def is_admin(self) -> bool:
        return self._current is not None and self._current.role == "admin"

    async def login(self, username: str, password: str) -> User:
        username_clean = (username or "").strip()
        if not username_clean:
            raise AuthorizationError("Username is required.")

        user = await self.provider.authenticate_user(username_clean, password or "")
        if not user:
            log.warning("login_failed username=%s", username_clean)
            raise AuthorizationError("Invalid username or password.")

        self._current = user
        log.info("login_ok user_id=%s role=%s", user.id, user.role)
        return user

    def logout(self) -> None:
        self._current = None

    def can(self, user: User, action: str) -> bool:
        return role_allows(user, action)

    def require_action(self, user: Optional[User], action: str) -> None:
        require_permission(user, action)

    async def list_users(self, actor: User) -> list[User]:
        self.require_action(actor, "manage_users")
        return await self.provider.get_users()

    async def create_user(self, actor: User, username: str, password: str, name: str, role: str = "user") -> User:
        self.require_action(actor, "manage_users")

        username = (username or "").strip()
        target_role = (role or "").strip().lower()
        if not username:
            raise AuthorizationError("Username is required.")
        if not password:
            raise AuthorizationError("Password is required.")
        if target_role not in USER_ROLES:
            raise AuthorizationError(f"Unknown role '{role}'.")

        user = await self.provider.add_user(username, password, (name or username).strip(), target_role)
        log.info("user_created user_id=%s role=%s actor=%s", user.id, user.role, actor.id)
        return user

    async def update_user(self, actor: User, user_id: str, **changes: Any) -> User:
        self.require_action(actor, "manage_users")
        if "role" in changes and changes["role"] not in USER_ROLES:
            raise AuthorizationError(f"Unknown role '{changes['role']}'.")
        updated = await self.provider.update_user(user_id, **changes)
        if not updated:
            raise NotFoundError("User not found.")
        return updated

    async def delete_user(self, actor: User, user_id: str) -> User:
        self.require_action(actor, "manage_users")
        if actor.id == user_id:
            raise AuthorizationError("Users cannot delete their own account.")
        removed = await self.provider.delete_user(user_id)
        if not removed:
            raise NotFoundError("User not found.")
        return removed
