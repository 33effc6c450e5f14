from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, details: Optional[Sequence] = None):
        super().__init__(message)
        self.details = list(details or [])


class MissingFields(ValidationError):
    """Raised when a manual entry lacks one of its required fields."""

    def __init__(self, fields: Sequence[str]):
        super().__init__("Missing required fields", details=list(fields))
        self.fields = list(fields)


class DuplicateEmail(ValidationError):
    """Raised on registration when the email is already in use."""


class EmailTaken(ValidationError):
    """Raised on profile update when the new email belongs to another user."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens cannot be trusted."""


class InvalidCredentials(AuthenticationError):
    """Raised when login credentials are invalid."""


class InvalidToken(AuthenticationError):
    """Raised when a bearer token is malformed, expired or wrongly signed."""


class AuthorizationError(DomainError):
    """Raised when an action is not allowed (e.g. registration disabled)."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""
