from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.acquittal_system.acquittal_system.core.enums import FormType
from src.acquittal_system.acquittal_system.records.model import (
    GoodsServicesRecord,
    SalariesForm1Record,
    SalaryEntryForm2Record,
)
from src.acquittal_system.acquittal_system.reporting.service import DashboardService, ReportingService

NOW = datetime(2024, 5, 15, 12, 0, 0)


def goods(facility: str, total: float, supplier: str = "MedCo") -> GoodsServicesRecord:
    return GoodsServicesRecord(
        facility_name=facility,
        reporting_period="Q2",
        item_description="Gloves",
        quantity=1,
        unit_cost=total,
        total_cost=total,
        supplier=supplier,
        date_purchased=None,
        notes="",
        file_name="goods.xlsx",
    )


def salary1(facility: str, name: str, amount: float, position: str = "Nurse") -> SalariesForm1Record:
    return SalariesForm1Record(
        facility_name=facility,
        employee_name=name,
        position=position,
        salary_amount=amount,
        payment_date=None,
        payment_method="Bank",
        notes="",
        file_name="s1.xlsx",
    )


def salary2(facility: str, name: str, net: float) -> SalaryEntryForm2Record:
    return SalaryEntryForm2Record(
        facility_name=facility,
        employee_id="E1",
        employee_name=name,
        position="Nurse",
        basic_salary=net,
        allowances=0,
        deductions=0,
        net_salary=net,
        payment_date=None,
        payment_status="Paid",
        file_name="s2.xlsx",
    )


@pytest.fixture
def seeded(records_repo):
    records_repo.now = NOW - timedelta(days=20)
    records_repo.insert_many(FormType.GOODS_SERVICES, [goods("Clinic A", 100.0, "Acme")])
    records_repo.now = NOW - timedelta(hours=2)
    records_repo.insert_many(FormType.GOODS_SERVICES, [goods("Clinic A", 50.5), goods("Clinic B", 300.0)])
    records_repo.insert_many(FormType.SALARIES_FORM1, [salary1("Clinic A", "Jane", 1000.0), salary1("Clinic B", "John", 800.0, "Driver")])
    records_repo.insert_many(FormType.SALARY_ENTRY_FORM2, [salary2("Clinic A", "Jane", 950.0), salary2("Clinic A", "Ann", 700.0)])
    return records_repo


@pytest.fixture
def dashboard(reporting_repo):
    return DashboardService(reporting_repo, clock=lambda: NOW, db_ping=lambda: True)


def test_overview_totals_equal_sum_of_rows(seeded, dashboard):
    stats = dashboard.overview()

    expected = 100.0 + 50.5 + 300.0 + 1000.0 + 800.0 + 950.0 + 700.0
    assert stats["totalRecords"] == 7
    assert stats["totalAmount"] == pytest.approx(expected)
    assert stats["totalFacilities"] == 2
    assert stats["totalEmployees"] == 4
    assert stats["recentUploads"] == 6
    assert stats["pendingReports"] == 0


def test_overview_on_empty_store_is_all_zero(dashboard):
    stats = dashboard.overview()
    assert stats == {
        "totalRecords": 0,
        "totalAmount": 0,
        "totalFacilities": 0,
        "totalEmployees": 0,
        "recentUploads": 0,
        "pendingReports": 0,
    }


def test_quick_stats_windows(seeded, dashboard):
    stats = dashboard.quick_stats()

    assert stats["todayUploads"] == 6
    assert stats["weekUploads"] == 6
    assert stats["monthUploads"] == 7
    assert stats["monthAmount"] == pytest.approx(3900.5)


def test_charts_top_facilities_and_salaries(seeded, dashboard):
    charts = dashboard.charts()

    assert charts["facilities"]["labels"] == ["Clinic B", "Clinic A"]
    assert charts["facilities"]["datasets"][0]["data"] == [300.0, 150.5]
    assert charts["salaries"]["labels"] == ["Jane", "John"]
    assert charts["monthly"]["labels"] == ["2024-04", "2024-05"]


def test_facility_summary_merges_tables(seeded, dashboard):
    summary = {s["facilityName"]: s for s in dashboard.facility_summary()}

    assert summary["Clinic A"]["goodsServicesTotal"] == pytest.approx(150.5)
    assert summary["Clinic A"]["salariesTotal"] == pytest.approx(2650.0)
    assert summary["Clinic A"]["employeeCount"] == 2
    assert summary["Clinic B"]["employeeCount"] == 1
    assert [s["facilityName"] for s in dashboard.facility_summary()] == ["Clinic B", "Clinic A"]


def test_recent_activity_is_newest_first_and_limited(seeded, dashboard):
    activities = dashboard.recent_activity(limit=3)

    assert len(activities) == 3
    assert all(a["type"] == "upload" for a in activities)
    assert activities[0]["description"] == "Uploaded Salary Entry Form 2 data"


def test_notifications_and_status(seeded, dashboard):
    ids = [n["id"] for n in dashboard.notifications()]
    assert "uploads-today" in ids
    assert "empty-store" not in ids
    assert dashboard.system_status()["database"] == "connected"


def test_reporting_summary_and_analytics(seeded, reporting_repo):
    reporting = ReportingService(reporting_repo)

    summary = reporting.summary()
    assert summary["summary"]["goods_services_total"] == pytest.approx(450.5)
    assert summary["summary"]["grand_total"] == pytest.approx(3900.5)
    assert summary["record_counts"] == {"goods_services": 3, "salaries_form1": 2, "salary_entry_form2": 2}

    analytics = reporting.analytics()
    assert analytics["top_suppliers"][0] == {"supplier": "MedCo", "transaction_count": 2, "total_amount": 350.5}
    assert analytics["top_positions"][0]["position"] == "Nurse"
    assert [m["month"] for m in analytics["monthly_trends"]] == ["2024-05", "2024-04"]

    employees = reporting.employee_summary()
    assert [e["employee_name"] for e in employees["employees"]] == ["Jane", "John"]
    assert [e["employee_name"] for e in employees["employee_details"]] == ["Jane", "Ann"]
