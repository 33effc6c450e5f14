from __future__ import annotations

import logging
from pathlib import PurePath

from flask import Flask, current_app, jsonify, request

from ..common.http import client_ip, error_response, json_body, validation_response
from ..container import Container
from ..core.enums import AuditAction, FormType
from ..core.exceptions import ValidationError
from ..sessions.decorators import current_user, make_token_required

logger = logging.getLogger(__name__)


def _allowed(filename: str) -> bool:
    allowed = current_app.config.get("UPLOAD_EXTENSIONS") or (".xlsx", ".csv")
    return PurePath(filename).suffix.lower() in {ext.lower() for ext in allowed}


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.tokens, container.auth_service.get_user)

    def make_upload_view(form_type: FormType):
        def upload():
            file = request.files.get("file")
            if file is None or not file.filename:
                return error_response("No file uploaded", 400)
            if not _allowed(file.filename):
                return error_response("Only Excel (.xlsx) and CSV files are allowed", 400)

            filename = PurePath(file.filename).name
            try:
                written = container.ingestion_service.ingest(form_type, file.read(), filename)
            except ValidationError as e:
                return validation_response(e)
            except Exception:
                logger.exception("Upload of %s (%s) failed", filename, form_type.value)
                return error_response("Failed to process file", 500)

            container.audit_service.record(
                user_email=current_user().email,
                action=AuditAction.UPLOAD,
                details=f"Uploaded {filename} ({written} records)",
                ip=client_ip(),
            )
            return jsonify({"message": "Data uploaded successfully", "records_processed": written})

        return upload

    def make_manual_view(form_type: FormType):
        def manual_entry():
            try:
                record = container.ingestion_service.ingest_manual(form_type, json_body())
            except ValidationError as e:
                return validation_response(e)

            container.audit_service.record(
                user_email=current_user().email,
                action=AuditAction.MANUAL_ENTRY,
                details=f"Manual {form_type.value} entry for {record.facility_name}",
                ip=client_ip(),
            )
            return jsonify({"message": "Record saved successfully", "success": True})

        return manual_entry

    for form_type in FormType:
        app.add_url_rule(
            f"/api/data-entry/{form_type.value}",
            endpoint=f"upload_{form_type.dataset}",
            view_func=token_required(make_upload_view(form_type)),
            methods=["POST"],
        )
        app.add_url_rule(
            f"/api/data-entry/{form_type.value}-manual",
            endpoint=f"manual_{form_type.dataset}",
            view_func=token_required(make_manual_view(form_type)),
            methods=["POST"],
        )

    @app.route("/api/data-entry/data", methods=["GET"], endpoint="data_entry_list")
    @token_required
    def data_entry_list():
        return jsonify(container.ingestion_service.list_all())
