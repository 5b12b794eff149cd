from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from ..common.datetime_utils import iter_dates
from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRecord:
    employee_id: str
    start_date: date
    end_date: date
    status: LeaveStatus = LeaveStatus.APPROVED


def approved_leave_dates(records: Iterable[LeaveRecord]) -> frozenset[date]:
    """Every calendar date covered by an approved leave record."""

    dates: set[date] = set()
    for record in records:
        if record.status != LeaveStatus.APPROVED:
            continue
        dates.update(iter_dates(record.start_date, record.end_date))
    return frozenset(dates)
