"""
Segment-aware track statistics.

Distance is summed between temporally consecutive points WITHIN one
recording session. Sessions are never bridged: the gap between the last
point of one session and the first point of the next is not walked
distance.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Protocol, Sequence

from survey_api.shared.geo import path_distance_m
from survey_api.shared.timeutils import whole_seconds_between


class LocatedPoint(Protocol):
    latitude: float
    longitude: float
    recorded_at: datetime


@dataclass(frozen=True)
class SegmentStats:
    """Statistics of one recording session."""

    distance_m: float
    duration_s: int
    point_count: int


def segment_distance(points: Sequence[LocatedPoint]) -> float:
    """
    Walked distance of one session in meters.

    Args:
        points: Points of ONE session, ordered by recorded_at

    Returns:
        Sum of great-circle distances between consecutive points
    """
    return path_distance_m((p.latitude, p.longitude) for p in points)


def segment_duration(points: Sequence[LocatedPoint]) -> int:
    """Whole seconds between the first and last fix; 0 below two points."""
    if len(points) < 2:
        return 0
    times = [p.recorded_at for p in points]
    return whole_seconds_between(min(times), max(times))


def segment_stats(points: Sequence[LocatedPoint]) -> SegmentStats:
    """Distance, duration and size of one session."""
    return SegmentStats(
        distance_m=segment_distance(points),
        duration_s=segment_duration(points),
        point_count=len(points),
    )


def project_distance(segments: Mapping[str, Sequence[LocatedPoint]]) -> float:
    """
    Total walked distance over several sessions.

    Each session is measured on its own and the results are added,
    so jumps between sessions never count.

    Args:
        segments: Track summary ID -> its ordered points

    Returns:
        Distance in meters
    """
    return sum(segment_distance(points) for points in segments.values())


def rounded_distance(distance_m: float) -> float:
    """Distance as stored on a summary (centimeter precision)."""
    return round(distance_m, 2)
