from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Read access to the roster.

    Note: services depend on this interface, never on a concrete database.
    """

    async def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    async def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError
