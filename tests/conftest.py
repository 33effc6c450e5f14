from __future__ import annotations

from dataclasses import asdict, replace
from datetime import datetime
from typing import Optional

import pytest

from src.acquittal_system.acquittal_system.audit.model import AuditEntry
from src.acquittal_system.acquittal_system.container import build_services
from src.acquittal_system.acquittal_system.core.enums import FormType, SettingsScope
from src.acquittal_system.acquittal_system.database.mysql_base import jsonable_row
from src.acquittal_system.acquittal_system.main import create_app
from src.acquittal_system.acquittal_system.records.forms import FORMS, schema_for
from src.acquittal_system.acquittal_system.reporting.repository import TableTotals
from src.acquittal_system.acquittal_system.users.model import User

FIXED_NOW = datetime(2024, 5, 15, 12, 0, 0)


class InMemoryUsers:
    def __init__(self):
        self._by_id: dict[int, User] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self._by_id.values():
            if u.email == email:
                return u
        return None

    def create_user(self, *, name: str, email: str, password_hash: str) -> int:
        self._id += 1
        self._by_id[self._id] = User(
            user_id=self._id, email=email, name=name, password_hash=password_hash, created_at=FIXED_NOW
        )
        return self._id

    def update_user(self, user_id: int, *, name=None, email=None, password_hash=None) -> bool:
        user = self._by_id.get(int(user_id))
        if not user:
            return False
        changes = {k: v for k, v in {"name": name, "email": email, "password_hash": password_hash}.items() if v is not None}
        self._by_id[user.user_id] = replace(user, **changes)
        return True

    def delete(self, user_id: int) -> None:
        self._by_id.pop(int(user_id), None)


class InMemoryRecords:
    """Rows per form, stamped with `uploaded_at` from a settable clock."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.rows: dict[FormType, list[dict]] = {ft: [] for ft in FORMS}
        self.now = now
        self._id = 0
        self.fail_on_insert = False

    def insert_many(self, form_type: FormType, records) -> int:
        if self.fail_on_insert:
            raise RuntimeError("insert failed")
        batch = []
        for r in records:
            self._id += 1
            batch.append({"id": self._id, **asdict(r), "uploaded_at": self.now})
        self.rows[FormType(form_type)].extend(batch)
        return len(batch)

    def list_rows(self, form_type: FormType, *, newest_first: bool = False):
        rows = list(self.rows[FormType(form_type)])
        if newest_first:
            rows.sort(key=lambda r: (r["uploaded_at"], r["id"]), reverse=True)
        return [jsonable_row(r) for r in rows]


class InMemoryReporting:
    """Aggregations computed in Python over InMemoryRecords."""

    def __init__(self, records: InMemoryRecords):
        self._records = records

    def _rows(self, form_type, since=None):
        rows = self._records.rows[FormType(form_type)]
        return [r for r in rows if since is None or r["uploaded_at"] >= since]

    def totals(self, form_type, *, since=None):
        amount = schema_for(form_type).amount_field
        rows = self._rows(form_type, since)
        return TableTotals(record_count=len(rows), total_amount=float(sum(r[amount] for r in rows)))

    def count_distinct(self, form_type, column):
        return len({r[column] for r in self._rows(form_type) if r[column]})

    def uploads_since(self, since):
        return sum(len(self._rows(ft, since)) for ft in FORMS)

    def monthly_amounts(self, form_type, *, since=None, limit=None):
        amount = schema_for(form_type).amount_field
        months: dict[str, dict] = {}
        for r in self._rows(form_type, since):
            key = r["uploaded_at"].strftime("%Y-%m")
            m = months.setdefault(key, {"month": key, "record_count": 0, "total_amount": 0.0})
            m["record_count"] += 1
            m["total_amount"] += float(r[amount])
        out = sorted(months.values(), key=lambda m: m["month"])
        return out[-limit:] if limit else out

    def top_groups(self, form_type, column, *, limit):
        amount = schema_for(form_type).amount_field
        groups: dict[str, dict] = {}
        for r in self._rows(form_type):
            if not r[column]:
                continue
            g = groups.setdefault(r[column], {"label": r[column], "record_count": 0, "total_amount": 0.0})
            g["record_count"] += 1
            g["total_amount"] += float(r[amount])
        return sorted(groups.values(), key=lambda g: -g["total_amount"])[:limit]

    def position_stats(self, *, limit):
        groups: dict[str, list[float]] = {}
        for r in self._rows(FormType.SALARIES_FORM1):
            groups.setdefault(r["position"], []).append(float(r["salary_amount"]))
        out = [
            {"position": p, "employee_count": len(v), "avg_salary": sum(v) / len(v), "total_salary": sum(v)}
            for p, v in groups.items()
        ]
        return sorted(out, key=lambda g: -g["avg_salary"])[:limit]

    def facility_breakdown(self, form_type):
        amount = schema_for(form_type).amount_field
        groups: dict[str, dict] = {}
        for r in self._rows(form_type):
            g = groups.setdefault(
                r["facility_name"],
                {"facility_name": r["facility_name"], "record_count": 0, "total_amount": 0.0, "last_updated": None},
            )
            g["record_count"] += 1
            g["total_amount"] += float(r[amount])
            stamp = r["uploaded_at"].isoformat()
            if g["last_updated"] is None or stamp > g["last_updated"]:
                g["last_updated"] = stamp
        return sorted(groups.values(), key=lambda g: -g["total_amount"])

    def facility_employee_counts(self):
        staff: dict[str, set] = {}
        for ft in (FormType.SALARIES_FORM1, FormType.SALARY_ENTRY_FORM2):
            for r in self._rows(ft):
                if r["employee_name"]:
                    staff.setdefault(r["facility_name"], set()).add(r["employee_name"])
        return {k: len(v) for k, v in staff.items()}

    def recent_uploads(self, *, limit):
        rows = [
            {"dataset": ft.dataset, "record_id": r["id"], "facility_name": r["facility_name"], "uploaded_at": r["uploaded_at"]}
            for ft in FORMS
            for r in self._rows(ft)
        ]
        rows.sort(key=lambda r: (r["uploaded_at"], r["record_id"]), reverse=True)
        return [jsonable_row(r) for r in rows[:limit]]

    def employee_rows(self, form_type):
        schema = schema_for(form_type)
        rows = sorted(self._rows(form_type), key=lambda r: -float(r[schema.amount_field]))
        return [jsonable_row(r) for r in rows]


class InMemorySettings:
    def __init__(self):
        self.scopes: dict[SettingsScope, dict] = {}
        self.preferences: dict[int, dict] = {}

    def get_scope(self, scope):
        return self.scopes.get(SettingsScope(scope))

    def save_scope(self, scope, data):
        self.scopes[SettingsScope(scope)] = dict(data)

    def get_preferences(self, user_id):
        return self.preferences.get(int(user_id))

    def save_preferences(self, user_id, data):
        self.preferences[int(user_id)] = dict(data)


class InMemoryAudit:
    def __init__(self):
        self.entries: list[AuditEntry] = []

    def add(self, *, user_email, action, details, ip):
        entry = AuditEntry(
            entry_id=len(self.entries) + 1,
            user_email=user_email,
            action=action,
            details=details,
            ip=ip,
            created_at=FIXED_NOW,
        )
        self.entries.append(entry)
        return entry.entry_id

    def list_page(self, *, limit, offset):
        newest = list(reversed(self.entries))
        return newest[offset : offset + limit]

    def count(self):
        return len(self.entries)


class RecordingCursor:
    def __init__(self, db: "RecordingDB"):
        self._db = db
        self.lastrowid = None
        self.rowcount = 0

    def execute(self, sql, params=()):
        self._db.statements.append((sql, tuple(params)))
        if self._db.error is not None:
            raise self._db.error
        self.lastrowid = self._db.lastrowid
        self.rowcount = 1

    def executemany(self, sql, seq_params):
        self._db.statements.append((sql, [tuple(p) for p in seq_params]))

    def fetchone(self):
        return self._db.rows[0] if self._db.rows else None

    def fetchall(self):
        return list(self._db.rows)

    def close(self):
        pass


class RecordingDB:
    """Stands in for DatabaseConnection: records SQL, returns canned rows or raises `error`."""

    def __init__(self):
        self.statements: list[tuple[str, tuple]] = []
        self.rows: list[dict] = []
        self.error: Optional[Exception] = None
        self.lastrowid = 1
        self.commits = 0
        self.rollbacks = 0

    def connect(self):
        return self

    def cursor(self, dictionary=True):
        return RecordingCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        pass

    def sent(self, index: int = -1) -> str:
        """The statement as the driver ships it: only `%s` markers are replaced."""

        sql, params = self.statements[index]
        assert sql.count("%s") == len(params)
        return " ".join(sql.replace("%s", "?").split())


@pytest.fixture
def recording_db():
    return RecordingDB()


@pytest.fixture
def users_repo():
    return InMemoryUsers()


@pytest.fixture
def records_repo():
    return InMemoryRecords()


@pytest.fixture
def reporting_repo(records_repo):
    return InMemoryReporting(records_repo)


@pytest.fixture
def settings_repo():
    return InMemorySettings()


@pytest.fixture
def audit_repo():
    return InMemoryAudit()


@pytest.fixture
def container(users_repo, records_repo, reporting_repo, settings_repo, audit_repo, tmp_path):
    return build_services(
        conn=None,
        users_repo=users_repo,
        records_repo=records_repo,
        reporting_repo=reporting_repo,
        settings_repo=settings_repo,
        audit_repo=audit_repo,
        db_config={"host": "localhost", "user": "test", "password": "", "database": "chs_acquittals_test"},
        jwt_secret="test-jwt-secret",
        backup_dir=tmp_path / "backups",
    )


@pytest.fixture
def app(container):
    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def registered(client):
    res = client.post(
        "/api/auth/register",
        json={"name": "Alice Admin", "email": "alice@example.com", "password": "secret123"},
    )
    assert res.status_code == 201
    return res.get_json()


@pytest.fixture
def auth_header(registered):
    return {"Authorization": f"Bearer {registered['token']}"}
