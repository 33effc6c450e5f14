from __future__ import annotations

from enum import Enum


class FormType(str, Enum):
    """The three record schemas accepted by data entry (URL slug values)."""

    GOODS_SERVICES = "goods-services"
    SALARIES_FORM1 = "salaries-form1"
    SALARY_ENTRY_FORM2 = "salary-entry-form2"

    @property
    def dataset(self) -> str:
        """Underscore key used in JSON payloads (goods_services, ...)."""
        return self.value.replace("-", "_")


class AuditAction(str, Enum):
    LOGIN = "LOGIN"
    REGISTER = "REGISTER"
    UPLOAD = "UPLOAD"
    MANUAL_ENTRY = "MANUAL_ENTRY"
    EXPORT = "EXPORT"
    SETTINGS = "SETTINGS"
    BACKUP = "BACKUP"


class SettingsScope(str, Enum):
    SYSTEM = "system"
    ADMIN = "admin"
