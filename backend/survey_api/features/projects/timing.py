"""
Time accounting for projects.

Pure functions over the timing fields of a project. Nothing here touches
the database; the state machine calls these and persists the result.

Elapsed time = banked seconds + whole seconds of the open segment (if any).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from survey_api.shared.constants import ProjectStatus
from survey_api.shared.timeutils import whole_seconds_between


@dataclass(frozen=True)
class TimingState:
    """Timing fields of a project, detached from the ORM row."""

    status: str
    started_at: Optional[datetime]
    elapsed_seconds: int
    last_activity: Optional[datetime] = None

    @classmethod
    def of(cls, project) -> "TimingState":
        return cls(
            status=project.status,
            started_at=project.started_at,
            elapsed_seconds=project.elapsed_seconds or 0,
            last_activity=project.last_activity,
        )

    def as_expected(self) -> dict:
        """Field values a compare-and-set update must still find."""
        return {
            "status": self.status,
            "started_at": self.started_at,
            "elapsed_seconds": self.elapsed_seconds,
        }


def open_segment_seconds(started_at: Optional[datetime], now: datetime) -> int:
    """Whole seconds of the currently open segment, 0 when none is open."""
    if started_at is None:
        return 0
    return whole_seconds_between(started_at, now)


def elapsed_seconds(state: TimingState, now: datetime) -> int:
    """
    Total active seconds at `now`.

    Args:
        state: Project timing fields
        now: Evaluation time

    Returns:
        Banked seconds plus the floored length of the open segment
    """
    return state.elapsed_seconds + open_segment_seconds(state.started_at, now)


def last_sign_of_life(state: TimingState) -> Optional[datetime]:
    """
    Reference time for inactivity checks.

    The later of last_activity and started_at, so a project resumed after
    a long pause is measured from the resume rather than a stale activity.
    """
    candidates = [t for t in (state.last_activity, state.started_at) if t is not None]
    return max(candidates) if candidates else None


def is_inactive(state: TimingState, now: datetime, threshold: timedelta) -> bool:
    """
    Check auto-pause eligibility.

    Args:
        state: Project timing fields
        now: Evaluation time
        threshold: Allowed inactivity

    Returns:
        True if the project is playing and silent for longer than threshold
    """
    if state.status != ProjectStatus.PLAYING.value:
        return False
    reference = last_sign_of_life(state)
    if reference is None:
        return False
    return now - reference > threshold


def inactivity_cutoff(now: datetime, threshold: timedelta) -> datetime:
    """Activity older than this timestamp counts as inactive."""
    return now - threshold
