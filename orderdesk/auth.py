"""Session state for the signed-in user."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from orderdesk.api import ApiClient, ApiError
from orderdesk.config import MIN_PASSWORD_LENGTH
from orderdesk.models import RegistrationForm, User
from orderdesk.persistence import clear_session, load_session, save_session

logger = logging.getLogger(__name__)

ROLES = ("customer", "chef")


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a login or register attempt."""

    success: bool
    message: str = ""


def validate_registration(form: RegistrationForm) -> str | None:
    """Return the first problem with `form`, or None when it can be submitted."""
    if not form.name.strip():
        return "Name is required"
    if not form.email.strip():
        return "Email is required"
    if form.password != form.confirm_password:
        return "Passwords do not match"
    if len(form.password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if form.role not in ROLES:
        return "Invalid role"
    return None


class AuthSession:
    """Holds the current user and bearer token and keeps the session store in sync."""

    def __init__(self, api: ApiClient, db_path: str | None = None) -> None:
        self.api = api
        self.db_path = db_path
        self.user: User | None = None
        self.token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    @property
    def is_chef(self) -> bool:
        return self.user is not None and self.user.is_chef

    def restore(self) -> bool:
        """Load a previously saved session; returns whether one was found."""
        saved = load_session(self.db_path)
        if saved is None:
            return False
        self._set(saved.token, saved.user)
        logger.info("session_restored user=%s role=%s", saved.user.email, saved.user.role)
        return True

    async def login(self, email: str, password: str) -> AuthResult:
        if not email.strip() or not password:
            return AuthResult(False, "Email and password are required")
        try:
            token, user = await self.api.login(email.strip(), password)
        except ApiError as exc:
            return AuthResult(False, exc.message or "Login failed")
        self._persist(token, user)
        return AuthResult(True, f"Welcome back, {user.name or user.email}")

    async def register(self, form: RegistrationForm) -> AuthResult:
        problem = validate_registration(form)
        if problem is not None:
            return AuthResult(False, problem)
        try:
            token, user = await self.api.register(form.name.strip(), form.email.strip(), form.password, form.role)
        except ApiError as exc:
            return AuthResult(False, exc.message or "Registration failed")
        self._persist(token, user)
        return AuthResult(True, "Registration successful!")

    def logout(self) -> None:
        logger.info("session_logout user=%s", self.user.email if self.user else None)
        clear_session(self.db_path)
        self._set(None, None)

    def expire(self) -> None:
        """Drop a token the server rejected."""
        logger.info("session_expired user=%s", self.user.email if self.user else None)
        clear_session(self.db_path)
        self._set(None, None)

    def _persist(self, token: str, user: User) -> None:
        save_session(token, user, self.db_path)
        self._set(token, user)
        logger.info("session_started user=%s role=%s", user.email, user.role)

    def _set(self, token: str | None, user: User | None) -> None:
        self.token = token
        self.user = user
        self.api.token = token
