from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_GRACE_MINUTES


def resolve_grace_minutes(
    *,
    schedule_override: Optional[int],
    organization_default: Optional[int],
    department_grace: Optional[int],
    fallback: int = DEFAULT_GRACE_MINUTES,
) -> int:
    """Schedule override > organisation default > department grace > fallback."""

    for candidate in (schedule_override, organization_default, department_grace):
        if candidate is not None:
            return int(candidate)
    return int(fallback)
