from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..common.datetime_utils import LocalTime
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, run_blocking
from .model import OrganizationSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

GRACE_KEY = "buffer_time_minutes"
WORKING_DAY_ENABLED_KEY = "working_day_enabled"
WORKING_DAY_START_KEY = "working_day_start_time"


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def settings_from_rows(values: Mapping[str, Any]) -> OrganizationSettings:
    """Organisation settings from ``company_settings`` key/value pairs; bad values are ignored."""

    start = None
    raw_start = values.get(WORKING_DAY_START_KEY)
    if raw_start:
        try:
            start = LocalTime.parse(str(raw_start))
        except ValidationError:
            logger.warning("ignoring invalid %s=%r", WORKING_DAY_START_KEY, raw_start)

    return OrganizationSettings(
        default_grace_minutes=_as_int(values.get(GRACE_KEY)),
        working_day_enabled=as_bool(values.get(WORKING_DAY_ENABLED_KEY)),
        working_day_start=start,
    )


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    async def get_organization_settings(self) -> OrganizationSettings:
        return await run_blocking(self._get_organization_settings)

    async def get_department_grace_minutes(self, department_id: int) -> Optional[int]:
        return await run_blocking(self._get_department_grace_minutes, department_id)

    def _get_organization_settings(self) -> OrganizationSettings:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT setting_key, setting_value FROM company_settings WHERE setting_key IN (%s, %s, %s)",
                (GRACE_KEY, WORKING_DAY_ENABLED_KEY, WORKING_DAY_START_KEY),
            )
            return settings_from_rows({r["setting_key"]: r["setting_value"] for r in fetchall(cur)})

    def _get_department_grace_minutes(self, department_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT grace_period_minutes FROM departments WHERE id=%s", (int(department_id),))
            row = fetchone(cur)
            return _as_int(row.get("grace_period_minutes")) if row else None
