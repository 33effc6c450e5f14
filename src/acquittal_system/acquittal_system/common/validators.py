from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", details=[{"field": field_name, "message": "required"}])
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(
            f"{field_name} must be at least {min_len} characters",
            details=[{"field": field_name, "message": f"min length {min_len}"}],
        )
    return value


def normalize_email(value: str, field_name: str = "email") -> str:
    email = (value or "").strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Valid email is required", details=[{"field": field_name, "message": "invalid email"}])
    return email


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def schema_error_details(exc) -> list[dict]:
    """Flatten a pydantic ValidationError into [{field, message}]."""

    return [
        {"field": ".".join(str(p) for p in err.get("loc", ())) or "body", "message": err.get("msg", "invalid")}
        for err in exc.errors()
    ]
