from __future__ import annotations

import io

from flask import Flask, send_file

from ..common.http import client_ip
from ..container import Container
from ..core.constants import REPORT_FILENAME
from ..core.enums import AuditAction
from ..sessions.decorators import current_user, make_token_required
from .excel import XLSX_MIMETYPE


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.tokens, container.auth_service.get_user)

    def audit(kind: str) -> None:
        container.audit_service.record(
            user_email=current_user().email,
            action=AuditAction.EXPORT,
            details=f"Exported {kind} report",
            ip=client_ip(),
        )

    @app.route("/api/export/excel", methods=["GET"], endpoint="export_excel")
    @token_required
    def export_excel():
        data = container.export_service.export_spreadsheet()
        audit("Excel")
        return send_file(
            io.BytesIO(data),
            download_name=f"{REPORT_FILENAME}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/api/export/pdf", methods=["GET"], endpoint="export_pdf")
    @token_required
    def export_pdf():
        data = container.export_service.export_pdf()
        audit("PDF")
        return send_file(
            io.BytesIO(data),
            download_name=f"{REPORT_FILENAME}.pdf",
            as_attachment=True,
            mimetype="application/pdf",
        )
