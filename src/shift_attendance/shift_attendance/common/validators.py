from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_iso_date(value: Optional[str], field_name: str) -> date:
    text = require_non_empty(value, field_name)
    try:
        return parse_iso_date(text)
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date") from exc


def require_date_range(start: date, end: date) -> tuple[date, date]:
    if start > end:
        raise ValidationError("start date must not be after end date")
    return start, end
