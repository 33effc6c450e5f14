from __future__ import annotations

import json
from typing import Any, Optional

from ..core.enums import SettingsScope
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import SettingsRepository


def _load_json(value: Any) -> Optional[dict]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return value if isinstance(value, dict) else None


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_scope(self, scope: SettingsScope) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT settings FROM app_settings WHERE scope=%s", (SettingsScope(scope).value,))
            row = fetchone(cur)
            return _load_json(row["settings"]) if row else None

    def save_scope(self, scope: SettingsScope, data: dict) -> None:
        payload = json.dumps(data)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO app_settings(scope, settings) VALUES(%s, %s)
                ON DUPLICATE KEY UPDATE settings=VALUES(settings)
                """,
                (SettingsScope(scope).value, payload),
            )

    def get_preferences(self, user_id: int) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT preferences FROM user_preferences WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _load_json(row["preferences"]) if row else None

    def save_preferences(self, user_id: int, data: dict) -> None:
        payload = json.dumps(data)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_preferences(user_id, preferences) VALUES(%s, %s)
                ON DUPLICATE KEY UPDATE preferences=VALUES(preferences)
                """,
                (int(user_id), payload),
            )
