from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import client_ip, error_response, json_body, validation_response
from ..container import Container
from ..core.constants import DEFAULT_AUDIT_PAGE_SIZE
from ..core.enums import AuditAction
from ..core.exceptions import ValidationError
from ..database.backup import BackupError
from ..sessions.decorators import current_user, make_token_required

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.tokens, container.auth_service.get_user)
    settings = container.settings_service

    def audit(details: str, action: AuditAction = AuditAction.SETTINGS) -> None:
        container.audit_service.record(
            user_email=current_user().email, action=action, details=details, ip=client_ip()
        )

    @app.route("/api/settings/system", methods=["GET"], endpoint="settings_system")
    @token_required
    def settings_system():
        return jsonify({"settings": settings.get_system().model_dump()})

    @app.route("/api/settings/system", methods=["PUT"], endpoint="settings_update_system")
    @token_required
    def settings_update_system():
        try:
            updated = settings.update_system(json_body(), user_email=current_user().email)
        except ValidationError as e:
            return validation_response(e)
        audit("System settings updated")
        return jsonify({"message": "System settings updated successfully", "settings": updated.model_dump()})

    @app.route("/api/settings/preferences", methods=["GET"], endpoint="settings_preferences")
    @token_required
    def settings_preferences():
        return jsonify({"preferences": settings.get_preferences(current_user().user_id).model_dump()})

    @app.route("/api/settings/preferences", methods=["PUT"], endpoint="settings_update_preferences")
    @token_required
    def settings_update_preferences():
        try:
            prefs = settings.update_preferences(current_user().user_id, json_body())
        except ValidationError as e:
            return validation_response(e)
        return jsonify({"message": "User preferences updated successfully", "preferences": prefs.model_dump()})

    @app.route("/api/settings/admin", methods=["GET"], endpoint="settings_admin")
    @token_required
    def settings_admin():
        return jsonify({"settings": settings.get_admin().model_dump()})

    @app.route("/api/settings/admin", methods=["PUT"], endpoint="settings_update_admin")
    @token_required
    def settings_update_admin():
        try:
            updated = settings.update_admin(json_body(), user_email=current_user().email)
        except ValidationError as e:
            return validation_response(e)
        audit("Admin settings updated")
        return jsonify({"message": "Admin settings updated successfully", "settings": updated.model_dump()})

    @app.route("/api/settings/backup/status", methods=["GET"], endpoint="settings_backup_status")
    @token_required
    def settings_backup_status():
        return jsonify({"backupStatus": settings.backup_status()})

    @app.route("/api/settings/backup/trigger", methods=["POST"], endpoint="settings_backup_trigger")
    @token_required
    def settings_backup_trigger():
        try:
            backup = settings.trigger_backup(user_email=current_user().email)
        except BackupError as e:
            logger.error("Backup failed: %s", e)
            return error_response("Backup failed", 500, details=str(e))
        audit(f"Backup written: {backup['file']}", AuditAction.BACKUP)
        return jsonify({"message": "Backup completed", "backup": backup})

    @app.route("/api/settings/health", methods=["GET"], endpoint="settings_health")
    @token_required
    def settings_health():
        return jsonify({"health": settings.health()})

    @app.route("/api/settings/audit-log", methods=["GET"], endpoint="settings_audit_log")
    @token_required
    def settings_audit_log():
        page = container.audit_service.page(
            page=request.args.get("page", 1, type=int),
            limit=request.args.get("limit", DEFAULT_AUDIT_PAGE_SIZE, type=int),
        )
        return jsonify(
            {
                "auditLog": [e.to_dict() for e in page.entries],
                "pagination": {"page": page.page, "limit": page.limit, "total": page.total},
            }
        )

    @app.route("/api/settings/export", methods=["GET"], endpoint="settings_export")
    @token_required
    def settings_export():
        response = jsonify(settings.export_all(current_user().user_id))
        response.headers["Content-Disposition"] = 'attachment; filename="settings_export.json"'
        return response

    @app.route("/api/settings/import", methods=["POST"], endpoint="settings_import")
    @token_required
    def settings_import():
        user = current_user()
        try:
            settings.import_all(user.user_id, request.get_json(silent=True), user_email=user.email)
        except ValidationError as e:
            return validation_response(e)
        audit("Settings imported")
        return jsonify({"message": "Settings imported successfully"})
