from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import RawPunch


class PunchRepository(Protocol):
    async def list_for_employee(self, *, employee_id: str, start: datetime, end: datetime) -> Sequence[RawPunch]:
        """Deduplicated punches logged in ``[start, end]`` (UTC)."""

        raise NotImplementedError
