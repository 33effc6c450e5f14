from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import normalize_email, require_min_length, require_non_empty
from ..core.constants import MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..core.exceptions import (
    DuplicateEmail,
    EmailTaken,
    InvalidCredentials,
    NotFoundError,
    ValidationError,
)
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _password_matches(user: User, password: str) -> bool:
    try:
        return check_password_hash(user.password_hash, password or "")
    except (ValueError, TypeError):
        # placeholder or corrupted hash
        return False


class AuthService:
    """Use cases: register and login against the credential store."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, name: str, email: str, password: str) -> User:
        name = require_min_length(require_non_empty(name, "name"), "name", MIN_NAME_LENGTH)
        email = normalize_email(email)
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise DuplicateEmail("User with this email already exists")

        user_id = self._users.create_user(name=name, email=email, password_hash=generate_password_hash(password))
        user = self._users.get_by_id(user_id)
        if not user:
            raise RuntimeError("Failed to retrieve created user")

        logger.info("New user registered: %s", email)
        return user

    def login(self, *, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        user = self._users.get_by_email(email) if email else None
        if not user or not _password_matches(user, password):
            logger.info("Failed login for: %s", email or "<empty>")
            raise InvalidCredentials("Invalid email or password")

        logger.info("User logged in: %s", email)
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get_by_id(user_id)


class ProfileService:
    """Use cases: profile update and password change for the current user."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        current_password: Optional[str] = None,
        new_password: Optional[str] = None,
    ) -> User:
        user = self._require_user(user_id)

        new_name = None
        if name is not None and name.strip() and name.strip() != user.name:
            new_name = require_min_length(name.strip(), "name", MIN_NAME_LENGTH)

        new_email = None
        if email is not None and email.strip():
            candidate = normalize_email(email)
            if candidate != user.email:
                other = self._users.get_by_email(candidate)
                if other and other.user_id != user.user_id:
                    raise EmailTaken("Email is already taken")
                new_email = candidate

        new_hash = None
        if new_password:
            if not current_password:
                raise ValidationError(
                    "Current password is required to change password",
                    details=[{"field": "currentPassword", "message": "required"}],
                )
            if not _password_matches(user, current_password):
                raise InvalidCredentials("Current password is incorrect")
            require_min_length(new_password, "newPassword", MIN_PASSWORD_LENGTH)
            new_hash = generate_password_hash(new_password)

        if new_name is None and new_email is None and new_hash is None:
            raise ValidationError("No changes to update")

        self._users.update_user(user.user_id, name=new_name, email=new_email, password_hash=new_hash)
        logger.info("Profile updated for user: %s", user.email)
        return self._require_user(user.user_id)

    def change_password(self, user_id: int, *, current_password: str, new_password: str) -> None:
        user = self._require_user(user_id)
        if not current_password:
            raise ValidationError(
                "Current password is required",
                details=[{"field": "currentPassword", "message": "required"}],
            )
        require_min_length(new_password, "newPassword", MIN_PASSWORD_LENGTH)

        if not _password_matches(user, current_password):
            raise InvalidCredentials("Current password is incorrect")

        self._users.update_user(user.user_id, password_hash=generate_password_hash(new_password))
        logger.info("Password changed for user ID: %s", user.user_id)
