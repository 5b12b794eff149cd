from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import ONE_DAY, hours_between
from ..common.working_day import WorkingDayPolicy
from ..core.constants import MATCH_BUFFER_AFTER_MINUTES, MATCH_BUFFER_BEFORE_MINUTES
from ..punches.model import PunchEvent
from ..schedules.model import ShiftWindow

logger = logging.getLogger(__name__)

INSIDE_WINDOW_SCORE = 10000.0
AFTER_MIDNIGHT_SCORE = 20000.0
OVERNIGHT_BUFFER_SCORE = 5000.0
# Below any overnight buffer score, above any plain buffer score.
DAY_OFF_SCORE = 1000.0
BUFFER_SCORE = 100.0


@dataclass(frozen=True)
class MatchDecision:
    punch: PunchEvent
    window_key: tuple[date, str]
    score: float


@dataclass
class MatchResult:
    assigned: dict[date, list[PunchEvent]] = field(default_factory=dict)
    unmatched: list[PunchEvent] = field(default_factory=list)
    decisions: list[MatchDecision] = field(default_factory=list)

    def wins_by_window(self) -> dict[tuple[date, str], int]:
        counts: dict[tuple[date, str], int] = {}
        for decision in self.decisions:
            counts[decision.window_key] = counts.get(decision.window_key, 0) + 1
        return counts


class PunchMatcher:
    """Assigns each punch to the best-scoring shift window.

    Containment in the real window beats buffer proximity, and the post-midnight
    part of an overnight window beats everything, so a 02:00 punch lands on the
    shift that started the previous evening. A day-off window only wins a punch
    that no overnight shift can still claim, so a 05:05 punch-out before a
    weekend stays with Friday's night shift. Ties go to the window whose start
    is closest to the punch.
    """

    def __init__(self, policy: WorkingDayPolicy):
        self._policy = policy

    def match(self, punches: Sequence[PunchEvent], windows: Mapping[tuple[date, str], ShiftWindow]) -> MatchResult:
        result = MatchResult()

        for punch in sorted(punches):
            best_key: Optional[tuple[date, str]] = None
            best_window: Optional[ShiftWindow] = None
            best_score = float("-inf")
            best_distance: Optional[timedelta] = None

            for key, window in windows.items():
                score = self.score(punch.timestamp, window)
                if score is None:
                    continue
                distance = abs(punch.timestamp - window.utc_start)
                if score > best_score or (score == best_score and best_distance is not None and distance < best_distance):
                    best_key, best_window, best_score, best_distance = key, window, score, distance

            if best_window is None:
                result.unmatched.append(punch)
                logger.debug("punch %s matches no shift (%d checked)", punch.timestamp.isoformat(), len(windows))
                continue

            result.assigned.setdefault(best_window.grouping_date, []).append(punch)
            result.decisions.append(MatchDecision(punch=punch, window_key=best_key, score=best_score))
            logger.debug("punch %s -> shift %s (score %.2f)", punch.timestamp.isoformat(), best_key, best_score)

        return result

    def buffer_end(self, window: ShiftWindow) -> datetime:
        if self._policy.enabled:
            return self._policy.start_of(window.grouping_date + ONE_DAY)
        return window.utc_end + timedelta(minutes=MATCH_BUFFER_AFTER_MINUTES)

    def score(self, instant: datetime, window: ShiftWindow) -> Optional[float]:
        """Score of ``instant`` against ``window``; ``None`` when outside its buffer."""

        start, end = window.utc_start, window.utc_end
        if not (start - timedelta(minutes=MATCH_BUFFER_BEFORE_MINUTES) <= instant <= self.buffer_end(window)):
            return None

        if start <= instant <= end:
            if window.crosses_midnight and instant < end:
                return AFTER_MIDNIGHT_SCORE
            return DAY_OFF_SCORE if window.is_day_off else INSIDE_WINDOW_SCORE

        hours_from_start = abs(hours_between(start, instant))
        if window.crosses_midnight and instant >= start:
            return OVERNIGHT_BUFFER_SCORE - hours_from_start
        return max(0.0, BUFFER_SCORE - hours_from_start)
