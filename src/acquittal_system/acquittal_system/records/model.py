from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class GoodsServicesRecord:
    """One purchased item on a goods & services acquittal."""

    facility_name: str = ""
    reporting_period: str = ""
    item_description: str = ""
    quantity: float = 0
    unit_cost: float = 0
    total_cost: float = 0
    supplier: str = ""
    date_purchased: Optional[date] = None
    notes: str = ""
    file_name: str = ""


@dataclass(frozen=True)
class SalariesForm1Record:
    """One salary payment line (form 1)."""

    facility_name: str = ""
    employee_name: str = ""
    position: str = ""
    salary_amount: float = 0
    payment_date: Optional[date] = None
    payment_method: str = ""
    notes: str = ""
    file_name: str = ""


@dataclass(frozen=True)
class SalaryEntryForm2Record:
    """One salary entry with its breakdown (form 2)."""

    facility_name: str = ""
    employee_id: str = ""
    employee_name: str = ""
    position: str = ""
    basic_salary: float = 0
    allowances: float = 0
    deductions: float = 0
    net_salary: float = 0
    payment_date: Optional[date] = None
    payment_status: str = ""
    file_name: str = ""
