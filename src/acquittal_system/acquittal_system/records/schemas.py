"""Request schemas for manual data entry.

Presence of the required fields is checked by the ingestion service first
(so the client gets a `MissingFields` error listing them); these models then
enforce types and reject unknown fields.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..common.datetime_utils import coerce_date
from ..core.enums import FormType


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _optional_date(value: Any) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = coerce_date(value)
    if parsed is None:
        raise ValueError("must be a date (YYYY-MM-DD)")
    return parsed


def _optional_number(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    return value


class _ManualEntry(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class GoodsServicesEntry(_ManualEntry):
    facility_name: str = Field(..., min_length=1, max_length=255)
    reporting_period: str = Field(..., min_length=1, max_length=100)
    item_description: str = Field(..., min_length=1)
    quantity: float = Field(..., ge=0)
    unit_cost: float = Field(..., ge=0)
    total_cost: float = Field(..., ge=0)
    supplier: str = Field(default="", max_length=255)
    date_purchased: Optional[date] = None
    notes: str = ""

    @field_validator("facility_name", "reporting_period", "item_description", "supplier", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _text(v)

    @field_validator("date_purchased", mode="before")
    @classmethod
    def _coerce_date(cls, v):
        return _optional_date(v)


class SalariesForm1Entry(_ManualEntry):
    facility_name: str = Field(..., min_length=1, max_length=255)
    employee_name: str = Field(..., min_length=1, max_length=255)
    position: str = Field(..., min_length=1, max_length=255)
    salary_amount: float = Field(..., ge=0)
    payment_date: Optional[date] = None
    payment_method: str = Field(default="", max_length=100)
    notes: str = ""

    @field_validator("facility_name", "employee_name", "position", "payment_method", "notes", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _text(v)

    @field_validator("payment_date", mode="before")
    @classmethod
    def _coerce_date(cls, v):
        return _optional_date(v)


class SalaryEntryForm2Entry(_ManualEntry):
    facility_name: str = Field(..., min_length=1, max_length=255)
    employee_id: str = Field(..., min_length=1, max_length=100)
    employee_name: str = Field(..., min_length=1, max_length=255)
    position: str = Field(..., min_length=1, max_length=255)
    basic_salary: float = Field(..., ge=0)
    allowances: float = Field(default=0, ge=0)
    deductions: float = Field(default=0, ge=0)
    net_salary: float
    payment_date: Optional[date] = None
    payment_status: str = Field(default="", max_length=100)

    @field_validator("facility_name", "employee_id", "employee_name", "position", "payment_status", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _text(v)

    @field_validator("allowances", "deductions", mode="before")
    @classmethod
    def _coerce_optional_number(cls, v):
        return _optional_number(v)

    @field_validator("payment_date", mode="before")
    @classmethod
    def _coerce_date(cls, v):
        return _optional_date(v)


MANUAL_ENTRY_SCHEMAS: dict[FormType, type[_ManualEntry]] = {
    FormType.GOODS_SERVICES: GoodsServicesEntry,
    FormType.SALARIES_FORM1: SalariesForm1Entry,
    FormType.SALARY_ENTRY_FORM2: SalaryEntryForm2Entry,
}
