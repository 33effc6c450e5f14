"""Validated shapes of the three settings scopes.

Each model carries the defaults served when nothing has been stored yet.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Settings(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class SystemSettings(_Settings):
    maxFileSize: int = Field(default=10 * 1024 * 1024, ge=1024, le=100 * 1024 * 1024)
    allowedFileTypes: list[str] = Field(default_factory=lambda: [".xlsx", ".csv"])
    sessionTimeout: int = Field(default=3600, ge=300, le=86400)
    enableNotifications: bool = True
    enableAuditLog: bool = True
    backupFrequency: Literal["daily", "weekly", "monthly"] = "daily"
    emailNotifications: bool = True

    @field_validator("allowedFileTypes")
    @classmethod
    def _normalize_extensions(cls, v: list[str]) -> list[str]:
        out = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            out.append(ext if ext.startswith(".") else f".{ext}")
        if not out:
            raise ValueError("at least one file type is required")
        return out


class NotificationPreferences(_Settings):
    email: bool = True
    browser: bool = True
    sms: bool = False


class UserPreferences(_Settings):
    theme: Literal["light", "dark", "auto"] = "light"
    language: str = Field(default="en", min_length=2, max_length=5)
    timezone: str = Field(default="UTC", min_length=1)
    dateFormat: str = Field(default="YYYY-MM-DD", min_length=1)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)


class AdminSettings(_Settings):
    maintenanceMode: bool = False
    registrationEnabled: bool = True
    maxUsers: int = Field(default=1000, ge=1, le=10000)
    dataRetentionDays: int = Field(default=365, ge=30, le=3650)
    securityLevel: Literal["low", "medium", "high"] = "medium"
