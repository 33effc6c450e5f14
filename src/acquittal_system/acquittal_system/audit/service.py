from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.constants import DEFAULT_AUDIT_PAGE_SIZE, MAX_AUDIT_PAGE_SIZE
from ..core.enums import AuditAction
from .model import AuditEntry
from .repository import AuditRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditPage:
    entries: list[AuditEntry]
    page: int
    limit: int
    total: int


class AuditService:
    """Records who did what; the trail is readable from the settings API.

    `enabled` is consulted on every call so the system setting
    `enableAuditLog` takes effect without a restart.
    """

    def __init__(self, audit: AuditRepository, *, enabled: Optional[Callable[[], bool]] = None):
        self._audit = audit
        self._enabled = enabled or (lambda: True)

    def record(self, *, user_email: str, action: AuditAction, details: str = "", ip: str = "") -> None:
        if not self._enabled():
            return
        self._audit.add(user_email=user_email or "", action=AuditAction(action).value, details=details, ip=ip or "")
        logger.debug("audit %s by %s: %s", action, user_email, details)

    def page(self, *, page: int = 1, limit: int = DEFAULT_AUDIT_PAGE_SIZE) -> AuditPage:
        page = max(int(page), 1)
        limit = min(max(int(limit), 1), MAX_AUDIT_PAGE_SIZE)
        entries = list(self._audit.list_page(limit=limit, offset=(page - 1) * limit))
        return AuditPage(entries=entries, page=page, limit=limit, total=self._audit.count())
