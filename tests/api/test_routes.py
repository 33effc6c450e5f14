from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from src.acquittal_system.acquittal_system.core.enums import FormType

PROTECTED = [
    ("get", "/api/auth/profile"),
    ("get", "/api/auth/verify"),
    ("get", "/api/dashboard/overview"),
    ("get", "/api/reporting/summary"),
    ("get", "/api/export/excel"),
    ("get", "/api/settings/system"),
    ("post", "/api/data-entry/goods-services"),
    ("post", "/api/data-entry/salaries-form1-manual"),
    ("get", "/api/data-entry/data"),
]


def test_health_is_public(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.get_json()["status"] == "OK"


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert res.get_json() == {"error": "Route not found", "path": "/api/nope"}


@pytest.mark.parametrize("method,path", PROTECTED)
def test_protected_routes_require_token(client, method, path):
    res = getattr(client, method)(path)
    assert res.status_code == 401
    assert res.get_json() == {"error": "Access token required"}


@pytest.mark.parametrize("method,path", PROTECTED)
def test_protected_routes_reject_bad_token(client, method, path):
    res = getattr(client, method)(path, headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 403


@pytest.mark.parametrize("method,path", PROTECTED)
def test_protected_routes_reject_expired_token(client, container, registered, method, path):
    user = registered["user"]
    stale = container.tokens.issue(user["id"], user["email"], now=datetime.now(timezone.utc) - timedelta(hours=25))

    res = getattr(client, method)(path, headers={"Authorization": f"Bearer {stale}"})

    assert res.status_code == 403
    assert res.get_json() == {"error": "Invalid token"}


def test_register_login_and_verify(client, registered):
    assert registered["message"] == "User registered successfully"
    assert registered["user"]["email"] == "alice@example.com"
    assert "password" not in registered["user"]

    dup = client.post(
        "/api/auth/register",
        json={"name": "Alice Again", "email": "alice@example.com", "password": "secret123"},
    )
    assert dup.status_code == 400

    bad = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.get_json() == {"error": "Invalid email or password"}

    ok = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert ok.status_code == 200
    token = ok.get_json()["token"]

    res = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert res.get_json()["valid"] is True


def test_deleted_user_loses_access(client, auth_header, registered, users_repo):
    users_repo.delete(registered["user"]["id"])
    assert client.get("/api/auth/profile", headers=auth_header).status_code == 401


def test_registration_can_be_disabled(client, auth_header):
    admin = client.get("/api/settings/admin", headers=auth_header).get_json()["settings"]
    res = client.put("/api/settings/admin", json={**admin, "registrationEnabled": False}, headers=auth_header)
    assert res.status_code == 200

    res = client.post("/api/auth/register", json={"name": "Bob", "email": "bob@example.com", "password": "secret123"})
    assert res.status_code == 403


def test_upload_and_dashboard(client, auth_header, audit_repo):
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(
            [
                {"Facility Name": "Clinic A", "Employee Name": "Jane", "Position": "Nurse", "Salary Amount": 1000},
                {"Facility Name": "Clinic B", "Employee Name": "John", "Position": "Driver", "Salary Amount": 500},
            ]
        ).to_excel(writer, index=False)
    buf.seek(0)

    res = client.post(
        "/api/data-entry/salaries-form1",
        data={"file": (buf, "salaries.xlsx")},
        headers=auth_header,
        content_type="multipart/form-data",
    )
    assert res.status_code == 200
    assert res.get_json() == {"message": "Data uploaded successfully", "records_processed": 2}

    stats = client.get("/api/dashboard/overview", headers=auth_header).get_json()["stats"]
    assert stats["totalRecords"] == 2
    assert stats["totalAmount"] == 1500

    assert "UPLOAD" in [e.action for e in audit_repo.entries]


def test_upload_errors(client, auth_header):
    res = client.post("/api/data-entry/goods-services", data={}, headers=auth_header, content_type="multipart/form-data")
    assert res.status_code == 400
    assert res.get_json()["error"] == "No file uploaded"

    res = client.post(
        "/api/data-entry/goods-services",
        data={"file": (io.BytesIO(b"hello"), "notes.txt")},
        headers=auth_header,
        content_type="multipart/form-data",
    )
    assert res.status_code == 400


def test_upload_too_large(client, auth_header):
    res = client.post(
        "/api/data-entry/goods-services",
        data={"file": (io.BytesIO(b"x" * (2 * 1024 * 1024)), "big.csv")},
        headers=auth_header,
        content_type="multipart/form-data",
    )
    assert res.status_code == 413


def test_manual_entry_missing_fields(client, auth_header, records_repo):
    res = client.post("/api/data-entry/goods-services-manual", json={"facility_name": "Clinic A"}, headers=auth_header)

    body = res.get_json()
    assert res.status_code == 400
    assert body["error"] == "Missing required fields"
    assert "total_cost" in body["details"]
    assert records_repo.rows[FormType.GOODS_SERVICES] == []


def test_manual_entry_saved(client, auth_header):
    res = client.post(
        "/api/data-entry/salary-entry-form2-manual",
        json={
            "facility_name": "Clinic A",
            "employee_id": "E7",
            "employee_name": "Ann",
            "position": "Nurse",
            "basic_salary": 900,
            "net_salary": 850,
        },
        headers=auth_header,
    )
    assert res.status_code == 200
    assert res.get_json() == {"message": "Record saved successfully", "success": True}

    data = client.get("/api/data-entry/data", headers=auth_header).get_json()
    assert data["salary_entry_form2"][0]["file_name"] == "Manual Entry"


def test_exports_are_attachments(client, auth_header):
    res = client.get("/api/export/excel", headers=auth_header)
    assert res.status_code == 200
    assert "chs_acquittals_report.xlsx" in res.headers["Content-Disposition"]

    res = client.get("/api/export/pdf", headers=auth_header)
    assert res.status_code == 200
    assert res.mimetype == "application/pdf"
    assert res.data.startswith(b"%PDF")


def test_settings_validation_error_shape(client, auth_header):
    res = client.put("/api/settings/system", json={"maxFileSize": 1}, headers=auth_header)

    body = res.get_json()
    assert res.status_code == 400
    assert body["error"] == "Validation failed"
    assert body["details"][0]["field"] == "maxFileSize"


def test_audit_log_lists_actions(client, auth_header):
    res = client.get("/api/settings/audit-log?page=1&limit=10", headers=auth_header)

    body = res.get_json()
    assert body["pagination"] == {"page": 1, "limit": 10, "total": 1}
    assert body["auditLog"][0]["action"] == "REGISTER"


def test_profile_update(client, auth_header):
    res = client.put("/api/auth/profile", json={"name": "Alice Renamed"}, headers=auth_header)

    assert res.status_code == 200
    assert res.get_json()["user"]["name"] == "Alice Renamed"


@pytest.mark.parametrize(
    "body,field",
    [
        ({"name": 12345}, "name"),
        ({"email": ["alice@example.com"]}, "email"),
        ({"currentPassword": "secret123", "newPassword": 12345678}, "newPassword"),
        ({"name": "Alice", "role": "admin"}, "role"),
    ],
)
def test_profile_update_rejects_bad_types(client, auth_header, body, field):
    res = client.put("/api/auth/profile", json=body, headers=auth_header)

    data = res.get_json()
    assert res.status_code == 400
    assert data["error"] == "Validation failed"
    assert data["details"][0]["field"] == field


def test_change_password_rejects_bad_types(client, auth_header):
    res = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "secret123", "newPassword": 12345678},
        headers=auth_header,
    )

    assert res.status_code == 400
    assert res.get_json()["details"][0]["field"] == "newPassword"


def test_change_password_then_login(client, auth_header):
    res = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "secret123", "newPassword": "changed456"},
        headers=auth_header,
    )
    assert res.status_code == 200

    ok = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "changed456"})
    assert ok.status_code == 200
