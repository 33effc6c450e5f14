"""Static description of the three acquittal forms.

Each form maps spreadsheet headers (exact text) to record fields, names its
table and the column summed as its amount, and lists the fields a manual
entry must carry.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Type

from ..core.enums import FormType
from .model import GoodsServicesRecord, SalariesForm1Record, SalaryEntryForm2Record

TEXT = "text"
NUMBER = "number"
DATE = "date"


@dataclass(frozen=True)
class Column:
    header: str
    field: str
    kind: str = TEXT


@dataclass(frozen=True)
class FormSchema:
    form_type: FormType
    label: str
    table: str
    record_cls: Type
    columns: tuple[Column, ...]
    amount_field: str
    detail_field: str
    required_manual: tuple[str, ...]

    @property
    def field_names(self) -> list[str]:
        """Insertable columns, in record order (includes file_name)."""
        return [f.name for f in fields(self.record_cls)]

    @property
    def export_columns(self) -> list[str]:
        return ["id", *self.field_names, "uploaded_at"]

    def kind_of(self, field_name: str) -> str:
        for col in self.columns:
            if col.field == field_name:
                return col.kind
        return TEXT


GOODS_SERVICES = FormSchema(
    form_type=FormType.GOODS_SERVICES,
    label="Goods and Services",
    table="goods_services_data",
    record_cls=GoodsServicesRecord,
    columns=(
        Column("Facility Name", "facility_name"),
        Column("Reporting Period", "reporting_period"),
        Column("Item Description", "item_description"),
        Column("Quantity", "quantity", NUMBER),
        Column("Unit Cost", "unit_cost", NUMBER),
        Column("Total Cost", "total_cost", NUMBER),
        Column("Supplier", "supplier"),
        Column("Date Purchased", "date_purchased", DATE),
        Column("Notes", "notes"),
    ),
    amount_field="total_cost",
    detail_field="item_description",
    required_manual=(
        "facility_name",
        "reporting_period",
        "item_description",
        "quantity",
        "unit_cost",
        "total_cost",
    ),
)

SALARIES_FORM1 = FormSchema(
    form_type=FormType.SALARIES_FORM1,
    label="Salaries Form 1",
    table="salaries_form1_data",
    record_cls=SalariesForm1Record,
    columns=(
        Column("Facility Name", "facility_name"),
        Column("Employee Name", "employee_name"),
        Column("Position", "position"),
        Column("Salary Amount", "salary_amount", NUMBER),
        Column("Payment Date", "payment_date", DATE),
        Column("Payment Method", "payment_method"),
        Column("Notes", "notes"),
    ),
    amount_field="salary_amount",
    detail_field="employee_name",
    required_manual=("facility_name", "employee_name", "position", "salary_amount"),
)

SALARY_ENTRY_FORM2 = FormSchema(
    form_type=FormType.SALARY_ENTRY_FORM2,
    label="Salary Entry Form 2",
    table="salary_entry_form2_data",
    record_cls=SalaryEntryForm2Record,
    columns=(
        Column("Facility Name", "facility_name"),
        Column("Employee ID", "employee_id"),
        Column("Employee Name", "employee_name"),
        Column("Position", "position"),
        Column("Basic Salary", "basic_salary", NUMBER),
        Column("Allowances", "allowances", NUMBER),
        Column("Deductions", "deductions", NUMBER),
        Column("Net Salary", "net_salary", NUMBER),
        Column("Payment Date", "payment_date", DATE),
        Column("Payment Status", "payment_status"),
    ),
    amount_field="net_salary",
    detail_field="employee_name",
    required_manual=(
        "facility_name",
        "employee_id",
        "employee_name",
        "position",
        "basic_salary",
        "net_salary",
    ),
)

FORMS: dict[FormType, FormSchema] = {
    FormType.GOODS_SERVICES: GOODS_SERVICES,
    FormType.SALARIES_FORM1: SALARIES_FORM1,
    FormType.SALARY_ENTRY_FORM2: SALARY_ENTRY_FORM2,
}


def schema_for(form_type: FormType) -> FormSchema:
    return FORMS[FormType(form_type)]
