from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import ScheduleException, WeeklySchedulePattern


class ScheduleRepository(Protocol):
    async def get_patterns(self, pattern_ids: Sequence[int]) -> Sequence[WeeklySchedulePattern]:
        """Patterns for ``pattern_ids``, in the order the ids were given.

        Unknown ids are skipped.
        """

        raise NotImplementedError

    async def list_exceptions(self, *, employee_id: str, start: date, end: date) -> Sequence[ScheduleException]:
        raise NotImplementedError
