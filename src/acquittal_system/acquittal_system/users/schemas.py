"""Request schemas for profile changes.

Fields stay optional here; which combinations are required is decided by
ProfileService. These models only reject wrong types and unknown keys.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as SchemaError

from ..common.validators import schema_error_details
from ..core.exceptions import ValidationError


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    name: Optional[str] = None
    email: Optional[str] = None
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None


class PasswordChange(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None


M = TypeVar("M", bound=BaseModel)


def parse_request(model: Type[M], payload: Mapping[str, Any]) -> M:
    try:
        return model.model_validate(dict(payload))
    except SchemaError as e:
        raise ValidationError("Validation failed", details=schema_error_details(e)) from e
