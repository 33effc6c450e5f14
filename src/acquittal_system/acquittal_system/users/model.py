from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none


@dataclass(frozen=True)
class User:
    """Domain entity: a registered user.

    Plain data object, no DB access. `password_hash` never leaves the
    service layer; use `to_public()` for responses.
    """

    user_id: int
    email: str
    name: str
    password_hash: str
    created_at: Optional[datetime] = None

    def to_public(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "created_at": isoformat_or_none(self.created_at),
        }
