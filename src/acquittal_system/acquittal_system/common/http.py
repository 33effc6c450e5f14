from __future__ import annotations

from typing import Any

from flask import jsonify, request

from ..core.exceptions import ValidationError


def json_body() -> dict[str, Any]:
    """Request JSON as a dict; anything else (missing, malformed, a list) is {}."""

    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or ""


def error_response(message: str, status: int, **extra):
    return jsonify({"error": message, **extra}), status


def validation_response(e: ValidationError, status: int = 400):
    if e.details:
        return error_response(str(e), status, details=e.details)
    return error_response(str(e), status)
