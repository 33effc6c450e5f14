from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.exceptions import InvalidToken

_ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenIdentity:
    """Identity carried inside a verified bearer token."""

    user_id: int
    email: str


class TokenService:
    """Stateless bearer tokens (HS256 JWT).

    Nothing is stored server-side: logout is the client discarding its token.
    """

    def __init__(self, secret: str, *, expires_hours: int = DEFAULT_TOKEN_HOURS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._ttl = timedelta(hours=int(expires_hours))

    def issue(self, user_id: int, email: str, *, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "userId": int(user_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenIdentity:
        if not token:
            raise InvalidToken("Access token required")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": ["exp", "userId"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidToken("Token expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidToken("Invalid token") from e

        try:
            user_id = int(payload["userId"])
        except (TypeError, ValueError) as e:
            raise InvalidToken("Invalid token") from e
        return TokenIdentity(user_id=user_id, email=str(payload.get("email", "")))
