from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType
from typing import Optional

from ..common.datetime_utils import LocalTime, OrgTimezone
from ..common.working_day import WorkingDayPolicy
from ..core.constants import (
    DEFAULT_BATCH_CONCURRENCY,
    DEFAULT_GRACE_MINUTES,
    DEFAULT_UTC_OFFSET_MINUTES,
    DEFAULT_WORKING_DAY_START,
)


@dataclass(frozen=True)
class OrganizationSettings:
    """Organisation-wide values stored alongside the data; unset fields fall back to file config."""

    default_grace_minutes: Optional[int] = None
    working_day_enabled: Optional[bool] = None
    working_day_start: Optional[LocalTime] = None


@dataclass(frozen=True)
class EngineSettings:
    utc_offset_minutes: int = DEFAULT_UTC_OFFSET_MINUTES
    default_grace_minutes: int = DEFAULT_GRACE_MINUTES
    working_day_enabled: bool = False
    working_day_start: LocalTime = field(default_factory=lambda: LocalTime.parse(DEFAULT_WORKING_DAY_START))
    batch_concurrency: int = DEFAULT_BATCH_CONCURRENCY

    @property
    def tz(self) -> OrgTimezone:
        return OrgTimezone.from_minutes(self.utc_offset_minutes)

    def working_day_policy(self, organization: Optional[OrganizationSettings] = None) -> WorkingDayPolicy:
        enabled = self.working_day_enabled
        start = self.working_day_start
        if organization is not None:
            if organization.working_day_enabled is not None:
                enabled = organization.working_day_enabled
            if organization.working_day_start is not None:
                start = organization.working_day_start
        return WorkingDayPolicy(enabled=enabled, start=start, tz=self.tz)

    @classmethod
    def from_settings_module(cls, settings: ModuleType) -> "EngineSettings":
        return cls(
            utc_offset_minutes=int(getattr(settings, "ORG_UTC_OFFSET_MINUTES", DEFAULT_UTC_OFFSET_MINUTES)),
            default_grace_minutes=int(getattr(settings, "DEFAULT_GRACE_MINUTES", DEFAULT_GRACE_MINUTES)),
            working_day_enabled=bool(getattr(settings, "WORKING_DAY_ENABLED", False)),
            working_day_start=LocalTime.parse(getattr(settings, "WORKING_DAY_START_TIME", DEFAULT_WORKING_DAY_START)),
            batch_concurrency=int(getattr(settings, "BATCH_CONCURRENCY", DEFAULT_BATCH_CONCURRENCY)),
        )
