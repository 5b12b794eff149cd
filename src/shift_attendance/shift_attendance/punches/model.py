from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class RawPunch:
    """Punch row as stored; ``log_time`` is not yet validated."""

    employee_id: str
    log_time: Any


@dataclass(frozen=True, order=True)
class PunchEvent:
    """Validated punch instant (aware, UTC).

    Device status codes are not carried: direction is inferred from ordering.
    """

    timestamp: datetime
    employee_id: str = ""
