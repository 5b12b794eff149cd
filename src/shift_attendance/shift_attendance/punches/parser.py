from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import ensure_utc
from .model import PunchEvent, RawPunch

logger = logging.getLogger(__name__)


def parse_timestamp(value: object) -> Optional[datetime]:
    """Best-effort conversion of a stored punch time into an aware UTC datetime."""

    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return ensure_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def parse_punches(rows: Iterable[RawPunch]) -> list[PunchEvent]:
    """Distinct valid punches sorted ascending; unparseable timestamps are dropped."""

    events: set[PunchEvent] = set()
    for row in rows:
        timestamp = parse_timestamp(row.log_time)
        if timestamp is None:
            logger.debug("Dropping punch with unparseable time %r for employee %s", row.log_time, row.employee_id)
            continue
        events.add(PunchEvent(timestamp=timestamp, employee_id=row.employee_id))
    return sorted(events)
