from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from ..core.constants import DEFAULT_UTC_OFFSET_MINUTES
from ..core.exceptions import ValidationError

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True, order=True)
class LocalTime:
    """Time of day on the organisation's local clock (minute precision)."""

    hour: int
    minute: int = 0

    def __post_init__(self) -> None:
        if not (0 <= int(self.hour) <= 23 and 0 <= int(self.minute) <= 59):
            raise ValidationError(f"Invalid time of day: {self.hour}:{self.minute}")

    @classmethod
    def parse(cls, value: str) -> "LocalTime":
        """Parse ``HHMM``, ``HH:MM`` or ``HH:MM:SS``."""

        text = (value or "").strip()
        try:
            if ":" in text:
                parts = text.split(":")
                return cls(int(parts[0]), int(parts[1]))
            if len(text) == 4 and text.isdigit():
                return cls(int(text[:2]), int(text[2:]))
        except ValueError as exc:
            raise ValidationError(f"Invalid time of day: {value!r}") from exc
        raise ValidationError(f"Invalid time of day: {value!r}")

    @classmethod
    def from_time(cls, value: time) -> "LocalTime":
        return cls(value.hour, value.minute)

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    @property
    def minutes(self) -> int:
        return self.hour * 60 + self.minute

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class OrgTimezone:
    """Fixed UTC offset in which schedules and leave dates are expressed."""

    offset: timedelta = timedelta(minutes=DEFAULT_UTC_OFFSET_MINUTES)

    @classmethod
    def from_minutes(cls, minutes: int) -> "OrgTimezone":
        return cls(timedelta(minutes=int(minutes)))

    def to_utc(self, local_day: date, at: LocalTime) -> datetime:
        """UTC instant of ``at`` on ``local_day``."""

        return datetime.combine(local_day, at.to_time(), tzinfo=timezone.utc) - self.offset

    def local_date(self, instant: datetime) -> date:
        return (ensure_utc(instant) + self.offset).date()


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def utc_now() -> datetime:
    """Current UTC time; the default clock of the attendance service."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    # Naive datetimes from storage are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_midnight(day: date) -> datetime:
    return datetime.combine(day, time(0, 0), tzinfo=timezone.utc)


def iter_dates(start: date, end: date) -> Iterator[date]:
    day = start
    while day <= end:
        yield day
        day += ONE_DAY


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def round_hours(hours: float) -> float:
    """Round to two decimals, half away from zero, never negative."""

    if hours <= 0:
        return 0.0
    return float(Decimal(repr(hours)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def isoformat_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
