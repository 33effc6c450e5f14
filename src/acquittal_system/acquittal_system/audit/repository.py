from __future__ import annotations

from typing import Protocol, Sequence

from .model import AuditEntry


class AuditRepository(Protocol):
    def add(self, *, user_email: str, action: str, details: str, ip: str) -> int:
        raise NotImplementedError

    def list_page(self, *, limit: int, offset: int) -> Sequence[AuditEntry]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
