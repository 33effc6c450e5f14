from __future__ import annotations

from dataclasses import astuple
from typing import Any, Sequence

from ..core.enums import FormType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, jsonable_row
from .forms import schema_for
from .repository import RecordRepository


class MySQLRecordRepository(RecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_many(self, form_type: FormType, records: Sequence[Any]) -> int:
        if not records:
            return 0

        schema = schema_for(form_type)
        columns = schema.field_names
        placeholders = ",".join(["%s"] * len(columns))
        sql = f"INSERT INTO {schema.table} ({', '.join(columns)}) VALUES ({placeholders})"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(sql, [astuple(r) for r in records])
        return len(records)

    def list_rows(self, form_type: FormType, *, newest_first: bool = False) -> Sequence[dict]:
        schema = schema_for(form_type)
        order = "uploaded_at DESC, id DESC" if newest_first else "id"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {', '.join(schema.export_columns)} FROM {schema.table} ORDER BY {order}")
            return [jsonable_row(r) for r in fetchall(cur)]
