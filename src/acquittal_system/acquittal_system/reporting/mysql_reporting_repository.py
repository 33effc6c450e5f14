from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import FormType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, jsonable_row, to_int, to_number
from ..records.forms import FORMS, SALARIES_FORM1, SALARY_ENTRY_FORM2, schema_for
from .repository import ReportingRepository, TableTotals

# Columns below are interpolated from FormSchema, never from request input.
_GROUPABLE = {"facility_name", "employee_name", "supplier", "position"}
_EMPLOYEE_COLUMNS = {
    FormType.SALARIES_FORM1: "employee_name, position, salary_amount, payment_date, payment_method",
    FormType.SALARY_ENTRY_FORM2: "employee_id, employee_name, position, basic_salary, allowances, deductions, net_salary, payment_status",
}


class MySQLReportingRepository(ReportingRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def totals(self, form_type: FormType, *, since: Optional[datetime] = None) -> TableTotals:
        schema = schema_for(form_type)
        sql = f"SELECT COUNT(*) AS n, COALESCE(SUM({schema.amount_field}), 0) AS total FROM {schema.table}"
        params: tuple = ()
        if since is not None:
            sql += " WHERE uploaded_at >= %s"
            params = (since,)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            row = fetchone(cur) or {}
            return TableTotals(record_count=to_int(row.get("n")), total_amount=to_number(row.get("total")))

    def count_distinct(self, form_type: FormType, column: str) -> int:
        if column not in _GROUPABLE:
            raise ValueError(f"Unsupported column: {column}")
        schema = schema_for(form_type)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(DISTINCT {column}) AS n FROM {schema.table} WHERE {column} <> %s",
                ("",),
            )
            row = fetchone(cur) or {}
            return to_int(row.get("n"))

    def uploads_since(self, since: datetime) -> int:
        parts = [f"SELECT COUNT(*) AS n FROM {s.table} WHERE uploaded_at >= %s" for s in FORMS.values()]
        sql = f"SELECT COALESCE(SUM(n), 0) AS total FROM ({' UNION ALL '.join(parts)}) AS uploads"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(since for _ in parts))
            row = fetchone(cur) or {}
            return to_int(row.get("total"))

    def monthly_amounts(self, form_type: FormType, *, since: Optional[datetime] = None, limit: Optional[int] = None) -> Sequence[dict]:
        schema = schema_for(form_type)
        where = "WHERE uploaded_at >= %s" if since is not None else ""
        params: list = [since] if since is not None else []
        sql = f"""
            SELECT DATE_FORMAT(uploaded_at, '%Y-%m') AS month,
                   COUNT(*) AS record_count,
                   COALESCE(SUM({schema.amount_field}), 0) AS total_amount
            FROM {schema.table}
            {where}
            GROUP BY DATE_FORMAT(uploaded_at, '%Y-%m')
            ORDER BY month DESC
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = [jsonable_row(r) for r in fetchall(cur)]
        rows.reverse()
        return rows

    def top_groups(self, form_type: FormType, column: str, *, limit: int) -> Sequence[dict]:
        if column not in _GROUPABLE:
            raise ValueError(f"Unsupported column: {column}")
        schema = schema_for(form_type)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {column} AS label,
                       COUNT(*) AS record_count,
                       COALESCE(SUM({schema.amount_field}), 0) AS total_amount
                FROM {schema.table}
                WHERE {column} IS NOT NULL AND {column} <> %s
                GROUP BY {column}
                ORDER BY total_amount DESC
                LIMIT %s
                """,
                ("", int(limit)),
            )
            return [jsonable_row(r) for r in fetchall(cur)]

    def position_stats(self, *, limit: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT position,
                       COUNT(*) AS employee_count,
                       COALESCE(AVG(salary_amount), 0) AS avg_salary,
                       COALESCE(SUM(salary_amount), 0) AS total_salary
                FROM {SALARIES_FORM1.table}
                GROUP BY position
                ORDER BY avg_salary DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [jsonable_row(r) for r in fetchall(cur)]

    def facility_breakdown(self, form_type: FormType) -> Sequence[dict]:
        schema = schema_for(form_type)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT facility_name,
                       COUNT(*) AS record_count,
                       COALESCE(SUM({schema.amount_field}), 0) AS total_amount,
                       MAX(uploaded_at) AS last_updated
                FROM {schema.table}
                GROUP BY facility_name
                ORDER BY total_amount DESC
                """,
                (),
            )
            return [jsonable_row(r) for r in fetchall(cur)]

    def facility_employee_counts(self) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT facility_name, COUNT(DISTINCT employee_name) AS n
                FROM (
                    SELECT facility_name, employee_name FROM {SALARIES_FORM1.table}
                    UNION
                    SELECT facility_name, employee_name FROM {SALARY_ENTRY_FORM2.table}
                ) AS staff
                WHERE employee_name <> %s
                GROUP BY facility_name
                """,
                ("",),
            )
            return {r["facility_name"]: to_int(r["n"]) for r in fetchall(cur)}

    def recent_uploads(self, *, limit: int) -> Sequence[dict]:
        parts = [
            f"SELECT '{s.form_type.dataset}' AS dataset, id AS record_id, facility_name, uploaded_at FROM {s.table}"
            for s in FORMS.values()
        ]
        sql = f"SELECT * FROM ({' UNION ALL '.join(parts)}) AS all_uploads ORDER BY uploaded_at DESC LIMIT %s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(limit),))
            return [jsonable_row(r) for r in fetchall(cur)]

    def employee_rows(self, form_type: FormType) -> Sequence[dict]:
        schema = schema_for(form_type)
        columns = _EMPLOYEE_COLUMNS.get(schema.form_type)
        if not columns:
            raise ValueError(f"{schema.form_type.value} has no employee rows")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {columns} FROM {schema.table} ORDER BY {schema.amount_field} DESC",
                (),
            )
            return [jsonable_row(r) for r in fetchall(cur)]
