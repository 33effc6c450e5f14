from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local, start_of_day
from ..core.constants import CHART_MONTHS, DEFAULT_ACTIVITY_LIMIT, MONTH_WINDOW_DAYS, RECENT_UPLOAD_DAYS, TOP_N
from ..core.enums import FormType
from ..records.forms import FORMS, schema_for
from .repository import ReportingRepository

logger = logging.getLogger(__name__)


def _months_back(moment: datetime, months: int) -> datetime:
    """First instant of the month `months - 1` months before `moment`'s month."""

    year, month = moment.year, moment.month - (months - 1)
    while month <= 0:
        month += 12
        year -= 1
    return datetime(year, month, 1)


def _dataset(label: str, data: list) -> dict:
    return {"label": label, "data": data}


class DashboardService:
    """Aggregates shown on the dashboard.

    All time windows are computed from `clock` so they can be pinned in tests.
    """

    def __init__(
        self,
        reporting: ReportingRepository,
        *,
        clock: Callable[[], datetime] = now_local,
        db_ping: Optional[Callable[[], bool]] = None,
    ):
        self._reporting = reporting
        self._clock = clock
        self._db_ping = db_ping
        self._started_at = clock()

    def overview(self) -> dict:
        totals = [self._reporting.totals(ft) for ft in FORMS]
        now = self._clock()
        employees = self._reporting.count_distinct(FormType.SALARIES_FORM1, "employee_name") + self._reporting.count_distinct(
            FormType.SALARY_ENTRY_FORM2, "employee_name"
        )
        return {
            "totalRecords": sum(t.record_count for t in totals),
            "totalAmount": sum(t.total_amount for t in totals),
            "totalFacilities": self._reporting.count_distinct(FormType.GOODS_SERVICES, "facility_name"),
            "totalEmployees": employees,
            "recentUploads": self._reporting.uploads_since(now - timedelta(days=RECENT_UPLOAD_DAYS)),
            "pendingReports": 0,
        }

    def charts(self) -> dict:
        since = _months_back(self._clock(), CHART_MONTHS)
        monthly = self._reporting.monthly_amounts(FormType.GOODS_SERVICES, since=since)
        facilities = self._reporting.top_groups(FormType.GOODS_SERVICES, "facility_name", limit=TOP_N)
        salaries = self._reporting.top_groups(FormType.SALARIES_FORM1, "employee_name", limit=TOP_N)
        return {
            "monthly": {
                "labels": [r["month"] for r in monthly],
                "datasets": [_dataset("Goods & Services Amount", [r["total_amount"] for r in monthly])],
            },
            "facilities": {
                "labels": [r["label"] for r in facilities],
                "datasets": [_dataset("Total Amount", [r["total_amount"] for r in facilities])],
            },
            "salaries": {
                "labels": [r["label"] for r in salaries],
                "datasets": [_dataset("Total Salary", [r["total_amount"] for r in salaries])],
            },
        }

    def recent_activity(self, *, limit: int = DEFAULT_ACTIVITY_LIMIT) -> list[dict]:
        limit = max(1, int(limit))
        activities = []
        for row in self._reporting.recent_uploads(limit=limit):
            schema = schema_for(row["dataset"].replace("_", "-"))
            activities.append(
                {
                    "id": f"{row['dataset']}-{row['record_id']}",
                    "type": "upload",
                    "description": f"Uploaded {schema.label} data",
                    "facility": row.get("facility_name") or "",
                    "timestamp": row["uploaded_at"],
                    "user": "System",
                }
            )
        return activities

    def facility_summary(self) -> list[dict]:
        merged: dict[str, dict] = {}

        def entry(name: str) -> dict:
            if name not in merged:
                merged[name] = {
                    "facilityName": name,
                    "goodsServicesTotal": 0.0,
                    "salariesTotal": 0.0,
                    "employeeCount": 0,
                    "lastUpdated": None,
                }
            return merged[name]

        for ft in FORMS:
            for row in self._reporting.facility_breakdown(ft):
                e = entry(row["facility_name"])
                if ft is FormType.GOODS_SERVICES:
                    e["goodsServicesTotal"] += row["total_amount"]
                else:
                    e["salariesTotal"] += row["total_amount"]
                last = row.get("last_updated")
                if last and (e["lastUpdated"] is None or last > e["lastUpdated"]):
                    e["lastUpdated"] = last

        for name, count in self._reporting.facility_employee_counts().items():
            entry(name)["employeeCount"] = count

        return sorted(merged.values(), key=lambda e: (-e["goodsServicesTotal"], e["facilityName"]))

    def quick_stats(self) -> dict:
        now = self._clock()
        month_start = now - timedelta(days=MONTH_WINDOW_DAYS)
        return {
            "todayUploads": self._reporting.uploads_since(start_of_day(now)),
            "weekUploads": self._reporting.uploads_since(now - timedelta(days=RECENT_UPLOAD_DAYS)),
            "monthUploads": self._reporting.uploads_since(month_start),
            "monthAmount": sum(self._reporting.totals(ft, since=month_start).total_amount for ft in FORMS),
        }

    def notifications(self) -> list[dict]:
        now = self._clock()
        items: list[dict] = []

        today = self._reporting.uploads_since(start_of_day(now))
        if today:
            items.append(
                {
                    "id": "uploads-today",
                    "type": "success",
                    "title": "New data",
                    "message": f"{today} record(s) uploaded today",
                    "timestamp": now.isoformat(),
                    "read": False,
                }
            )

        if sum(self._reporting.totals(ft).record_count for ft in FORMS) == 0:
            items.append(
                {
                    "id": "empty-store",
                    "type": "info",
                    "title": "No data yet",
                    "message": "Upload a spreadsheet or add a manual entry to get started",
                    "timestamp": now.isoformat(),
                    "read": False,
                }
            )

        items.append(
            {
                "id": "backup-reminder",
                "type": "warning",
                "title": "Backup Reminder",
                "message": "Remember to run a database backup regularly",
                "timestamp": (now - timedelta(hours=1)).isoformat(),
                "read": True,
            }
        )
        return items

    def mark_read(self, notification_id: str, *, user_email: str) -> None:
        # Notifications are derived on each request; acknowledgement is only logged.
        logger.info("Notification %s marked as read by %s", notification_id, user_email)

    def system_status(self) -> dict:
        database = "unknown"
        if self._db_ping is not None:
            database = "connected" if self._db_ping() else "unavailable"
        now = self._clock()
        return {
            "database": database,
            "uptime": max(0.0, (now - self._started_at).total_seconds()),
            "startedAt": self._started_at.isoformat(),
            "serverTime": now.isoformat(),
        }


class ReportingService:
    def __init__(self, reporting: ReportingRepository):
        self._reporting = reporting

    def summary(self) -> dict:
        totals = {ft: self._reporting.totals(ft) for ft in FORMS}
        summary = {f"{ft.dataset}_total": t.total_amount for ft, t in totals.items()}
        summary["grand_total"] = sum(t.total_amount for t in totals.values())
        return {
            "summary": summary,
            "record_counts": {ft.dataset: t.record_count for ft, t in totals.items()},
        }

    def facility_summary(self) -> dict:
        return {
            ft.dataset: [
                {
                    "facility_name": r["facility_name"],
                    "record_count": r["record_count"],
                    "total_amount": r["total_amount"],
                }
                for r in self._reporting.facility_breakdown(ft)
            ]
            for ft in FORMS
        }

    def analytics(self) -> dict:
        suppliers = self._reporting.top_groups(FormType.GOODS_SERVICES, "supplier", limit=TOP_N)
        trends = self._reporting.monthly_amounts(FormType.GOODS_SERVICES, limit=CHART_MONTHS)
        return {
            "top_suppliers": [
                {"supplier": r["label"], "transaction_count": r["record_count"], "total_amount": r["total_amount"]}
                for r in suppliers
            ],
            "top_positions": list(self._reporting.position_stats(limit=TOP_N)),
            # newest month first
            "monthly_trends": list(reversed(trends)),
        }

    def employee_summary(self) -> dict:
        return {
            "employees": list(self._reporting.employee_rows(FormType.SALARIES_FORM1)),
            "employee_details": list(self._reporting.employee_rows(FormType.SALARY_ENTRY_FORM2)),
        }
