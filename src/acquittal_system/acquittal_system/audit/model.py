from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none


@dataclass(frozen=True)
class AuditEntry:
    entry_id: int
    user_email: str
    action: str
    details: str
    ip: str
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "user": self.user_email,
            "action": self.action,
            "timestamp": isoformat_or_none(self.created_at),
            "ip": self.ip,
            "details": self.details,
        }
