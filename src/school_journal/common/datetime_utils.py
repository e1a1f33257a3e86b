from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def require_iso_date(value: Any, field_name: str = "date") -> str:
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    try:
        return parse_iso_date(str(value)).strftime("%Y-%m-%d")
    except ValueError:
        raise ValidationError(f"{field_name} must use YYYY-MM-DD")
