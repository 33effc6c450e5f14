from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_ACTIVITY_LIMIT
from ..sessions.decorators import current_user, make_token_required


def register(app: Flask, container: Container) -> None:
    token_required = make_token_required(container.tokens, container.auth_service.get_user)
    dashboard = container.dashboard_service
    reporting = container.reporting_service

    @app.route("/api/dashboard/overview", methods=["GET"], endpoint="dashboard_overview")
    @token_required
    def dashboard_overview():
        return jsonify({"stats": dashboard.overview()})

    @app.route("/api/dashboard/charts", methods=["GET"], endpoint="dashboard_charts")
    @token_required
    def dashboard_charts():
        return jsonify({"chartData": dashboard.charts()})

    @app.route("/api/dashboard/recent-activity", methods=["GET"], endpoint="dashboard_recent_activity")
    @token_required
    def dashboard_recent_activity():
        limit = request.args.get("limit", DEFAULT_ACTIVITY_LIMIT, type=int)
        return jsonify({"activities": dashboard.recent_activity(limit=limit)})

    @app.route("/api/dashboard/facility-summary", methods=["GET"], endpoint="dashboard_facility_summary")
    @token_required
    def dashboard_facility_summary():
        return jsonify({"summaries": dashboard.facility_summary()})

    @app.route("/api/dashboard/quick-stats", methods=["GET"], endpoint="dashboard_quick_stats")
    @token_required
    def dashboard_quick_stats():
        return jsonify({"quickStats": dashboard.quick_stats()})

    @app.route("/api/dashboard/notifications", methods=["GET"], endpoint="dashboard_notifications")
    @token_required
    def dashboard_notifications():
        return jsonify({"notifications": dashboard.notifications()})

    @app.route(
        "/api/dashboard/notifications/<notification_id>/read",
        methods=["PUT"],
        endpoint="dashboard_notification_read",
    )
    @token_required
    def dashboard_notification_read(notification_id: str):
        dashboard.mark_read(notification_id, user_email=current_user().email)
        return jsonify({"message": "Notification marked as read"})

    @app.route("/api/dashboard/system-status", methods=["GET"], endpoint="dashboard_system_status")
    @token_required
    def dashboard_system_status():
        return jsonify({"systemStatus": dashboard.system_status()})

    @app.route("/api/reporting/summary", methods=["GET"], endpoint="reporting_summary")
    @token_required
    def reporting_summary():
        return jsonify(reporting.summary())

    @app.route("/api/reporting/facility-summary", methods=["GET"], endpoint="reporting_facility_summary")
    @token_required
    def reporting_facility_summary():
        return jsonify(reporting.facility_summary())

    @app.route("/api/reporting/analytics", methods=["GET"], endpoint="reporting_analytics")
    @token_required
    def reporting_analytics():
        return jsonify(reporting.analytics())

    @app.route("/api/reporting/employee-summary", methods=["GET"], endpoint="reporting_employee_summary")
    @token_required
    def reporting_employee_summary():
        return jsonify(reporting.employee_summary())
