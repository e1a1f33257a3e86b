from __future__ import annotations

import re
from typing import Any

from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_str(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    value = value.strip()
    return value or None


def require_time_of_day(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not _HHMM.match(value):
        raise ValidationError(f"{field_name} must use HH:MM")
    return value
