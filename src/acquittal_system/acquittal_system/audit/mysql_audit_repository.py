from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_int
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, user_email: str, action: str, details: str, ip: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO audit_log(user_email, action, details, ip) VALUES(%s,%s,%s,%s)",
                (user_email, action, details, ip),
            )
            return int(cur.lastrowid)

    def list_page(self, *, limit: int, offset: int) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_email, action, details, ip, created_at
                FROM audit_log
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                (int(limit), int(offset)),
            )
            return [
                AuditEntry(
                    entry_id=int(r["id"]),
                    user_email=r["user_email"],
                    action=r["action"],
                    details=r.get("details") or "",
                    ip=r.get("ip") or "",
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM audit_log")
            row = fetchone(cur)
            return to_int(row["n"]) if row else 0
