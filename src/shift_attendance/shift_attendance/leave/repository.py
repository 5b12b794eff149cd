from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import LeaveRecord


class LeaveRepository(Protocol):
    async def list_approved(self, *, employee_id: str, start: date, end: date) -> Sequence[LeaveRecord]:
        """Approved leave overlapping ``[start, end]``."""

        raise NotImplementedError
