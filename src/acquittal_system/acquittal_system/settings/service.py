from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from ..common.datetime_utils import now_local
from ..common.validators import schema_error_details
from ..core.enums import SettingsScope
from ..core.exceptions import ValidationError
from ..database.backup import BackupFile, create_backup, latest_backup
from .repository import SettingsRepository
from .schemas import AdminSettings, SystemSettings, UserPreferences

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: Type[M], payload: Any) -> M:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(dict(payload))
    except SchemaError as e:
        raise ValidationError("Validation failed", details=schema_error_details(e)) from e


def _stored(model: Type[M], stored: Optional[Mapping[str, Any]], label: str) -> M:
    """Load persisted settings; keys the model no longer knows are dropped, invalid data gives defaults."""

    if not stored:
        return model()
    known = {k: v for k, v in stored.items() if k in model.model_fields}
    if len(known) != len(stored):
        logger.warning("Ignoring unknown %s settings keys: %s", label, sorted(set(stored) - set(known)))
    try:
        return model.model_validate(known)
    except SchemaError as e:
        logger.warning("Stored %s settings are invalid, using defaults: %s", label, schema_error_details(e))
        return model()


def _backup_dict(backup: Optional[BackupFile]) -> dict:
    if backup is None:
        return {"status": "none", "lastBackup": None, "backupSize": 0, "file": None}
    return {
        "status": "completed",
        "lastBackup": backup.created_at.isoformat(),
        "backupSize": backup.size_bytes,
        "file": backup.path.name,
    }


class SettingsService:
    """System/admin settings, per-user preferences, backups and health."""

    def __init__(
        self,
        settings: SettingsRepository,
        *,
        db_config: dict,
        backup_dir: str | Path,
        db_ping: Optional[Callable[[], bool]] = None,
        clock: Callable[[], datetime] = now_local,
        backup_runner: Callable[..., BackupFile] = create_backup,
    ):
        self._settings = settings
        self._db_config = db_config
        self._backup_dir = Path(backup_dir)
        self._db_ping = db_ping
        self._clock = clock
        self._backup_runner = backup_runner
        self._started_at = clock()

    def get_system(self) -> SystemSettings:
        stored = self._settings.get_scope(SettingsScope.SYSTEM)
        return _stored(SystemSettings, stored, "system")

    def update_system(self, payload: Mapping[str, Any], *, user_email: str = "") -> SystemSettings:
        settings = _validate(SystemSettings, payload)
        self._settings.save_scope(SettingsScope.SYSTEM, settings.model_dump())
        logger.info("System settings updated by %s", user_email)
        return settings

    def get_admin(self) -> AdminSettings:
        stored = self._settings.get_scope(SettingsScope.ADMIN)
        return _stored(AdminSettings, stored, "admin")

    def update_admin(self, payload: Mapping[str, Any], *, user_email: str = "") -> AdminSettings:
        settings = _validate(AdminSettings, payload)
        self._settings.save_scope(SettingsScope.ADMIN, settings.model_dump())
        logger.info("Admin settings updated by %s", user_email)
        return settings

    def registration_enabled(self) -> bool:
        return self.get_admin().registrationEnabled

    def audit_enabled(self) -> bool:
        return self.get_system().enableAuditLog

    def get_preferences(self, user_id: int) -> UserPreferences:
        stored = self._settings.get_preferences(user_id)
        return _stored(UserPreferences, stored, f"user {user_id} preference")

    def update_preferences(self, user_id: int, payload: Mapping[str, Any]) -> UserPreferences:
        prefs = _validate(UserPreferences, payload)
        self._settings.save_preferences(user_id, prefs.model_dump())
        logger.info("Preferences updated for user %s", user_id)
        return prefs

    def export_all(self, user_id: int) -> dict:
        return {
            "system": self.get_system().model_dump(),
            "user": {"preferences": self.get_preferences(user_id).model_dump()},
            "admin": self.get_admin().model_dump(),
        }

    def import_all(self, user_id: int, payload: Any, *, user_email: str = "") -> None:
        """Validate every scope first, then store them; nothing is written if any scope is invalid."""

        if not isinstance(payload, Mapping) or not all(payload.get(k) for k in ("system", "user", "admin")):
            raise ValidationError("Invalid settings format")

        user = payload["user"]
        prefs_payload = user.get("preferences", user) if isinstance(user, Mapping) else user

        system = _validate(SystemSettings, payload["system"])
        prefs = _validate(UserPreferences, prefs_payload)
        admin = _validate(AdminSettings, payload["admin"])

        self._settings.save_scope(SettingsScope.SYSTEM, system.model_dump())
        self._settings.save_scope(SettingsScope.ADMIN, admin.model_dump())
        self._settings.save_preferences(user_id, prefs.model_dump())
        logger.info("Settings imported by %s", user_email)

    def backup_status(self) -> dict:
        status = _backup_dict(latest_backup(self._backup_dir))
        status["frequency"] = self.get_system().backupFrequency
        status["directory"] = str(self._backup_dir)
        return status

    def trigger_backup(self, *, user_email: str = "") -> dict:
        """Run mysqldump now and wait for it; BackupError propagates to the caller."""

        logger.info("Manual backup triggered by %s", user_email)
        backup = self._backup_runner(self._db_config, out_dir=self._backup_dir)
        return _backup_dict(backup)

    def health(self) -> dict:
        database = "unknown"
        if self._db_ping is not None:
            database = "connected" if self._db_ping() else "unavailable"
        now = self._clock()
        return {
            "status": "healthy" if database != "unavailable" else "degraded",
            "database": database,
            "uptime": max(0.0, (now - self._started_at).total_seconds()),
            "timestamp": now.isoformat(),
        }
