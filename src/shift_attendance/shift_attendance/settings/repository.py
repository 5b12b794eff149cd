from __future__ import annotations

from typing import Optional, Protocol

from .model import OrganizationSettings


class SettingsRepository(Protocol):
    async def get_organization_settings(self) -> OrganizationSettings:
        raise NotImplementedError

    async def get_department_grace_minutes(self, department_id: int) -> Optional[int]:
        """Legacy per-department late-in allowance."""

        raise NotImplementedError
