from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.repository import AuditRepository
from .audit.service import AuditService
from .core.constants import DEFAULT_TOKEN_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .exports.service import ExportService
from .ingestion.service import IngestionService
from .records.mysql_record_repository import MySQLRecordRepository
from .records.repository import RecordRepository
from .reporting.mysql_reporting_repository import MySQLReportingRepository
from .reporting.repository import ReportingRepository
from .reporting.service import DashboardService, ReportingService
from .sessions.token_service import TokenService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, ProfileService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    records_repo: RecordRepository
    reporting_repo: ReportingRepository
    settings_repo: SettingsRepository
    audit_repo: AuditRepository

    tokens: TokenService
    auth_service: AuthService
    profile_service: ProfileService
    ingestion_service: IngestionService
    dashboard_service: DashboardService
    reporting_service: ReportingService
    export_service: ExportService
    settings_service: SettingsService
    audit_service: AuditService


def build_services(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    records_repo: RecordRepository,
    reporting_repo: ReportingRepository,
    settings_repo: SettingsRepository,
    audit_repo: AuditRepository,
    db_config: dict,
    jwt_secret: str,
    jwt_expires_hours: int = DEFAULT_TOKEN_HOURS,
    backup_dir: str | Path = "backups",
) -> Container:
    """Wire services over the given repositories (MySQL in the app, fakes in tests)."""

    db_ping = conn.ping if conn is not None else None
    settings_service = SettingsService(
        settings_repo,
        db_config=db_config,
        backup_dir=backup_dir,
        db_ping=db_ping,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        records_repo=records_repo,
        reporting_repo=reporting_repo,
        settings_repo=settings_repo,
        audit_repo=audit_repo,
        tokens=TokenService(jwt_secret, expires_hours=jwt_expires_hours),
        auth_service=AuthService(users_repo),
        profile_service=ProfileService(users_repo),
        ingestion_service=IngestionService(records_repo),
        dashboard_service=DashboardService(reporting_repo, db_ping=db_ping),
        reporting_service=ReportingService(reporting_repo),
        export_service=ExportService(records_repo),
        settings_service=settings_service,
        audit_service=AuditService(audit_repo, enabled=settings_service.audit_enabled),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_expires_hours: int = DEFAULT_TOKEN_HOURS,
    backup_dir: str | Path = "backups",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        records_repo=MySQLRecordRepository(conn),
        reporting_repo=MySQLReportingRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
        db_config=db_config,
        jwt_secret=jwt_secret,
        jwt_expires_hours=jwt_expires_hours,
        backup_dir=backup_dir,
    )
