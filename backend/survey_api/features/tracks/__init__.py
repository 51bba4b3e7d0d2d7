"""
GPS track recording module.

Usage:
    from survey_api.features.tracks import TrackService, TrackSummary
    from survey_api.features.tracks import GPXExportService

Components:
- TrackSummary, TrackPoint: SQLAlchemy models for sessions and fixes
- distance: Segment-isolated distance and duration
- TrackService: Start / append batch / end, queries, GPX export
- GPXExportService: Build GPX 1.1 documents with gpxpy
"""

from .models import TrackSummary, TrackPoint
from .schemas import (
    TrackStartRequest,
    TrackPointIn,
    AppendPointsRequest,
    AppendPointsResponse,
    TrackEndRequest,
    TrackSummaryResponse,
    TrackPointResponse,
)
from .repository import TrackSummaryRepository, TrackPointRepository
from .distance import SegmentStats, segment_distance, segment_duration, project_distance
from .gpx_export import GPXExportService, GPX_CONTENT_TYPE
from .service import TrackService

__all__ = [
    # Models
    "TrackSummary",
    "TrackPoint",
    # Schemas
    "TrackStartRequest",
    "TrackPointIn",
    "AppendPointsRequest",
    "AppendPointsResponse",
    "TrackEndRequest",
    "TrackSummaryResponse",
    "TrackPointResponse",
    # Repositories
    "TrackSummaryRepository",
    "TrackPointRepository",
    # Distance
    "SegmentStats",
    "segment_distance",
    "segment_duration",
    "project_distance",
    # Services
    "GPXExportService",
    "GPX_CONTENT_TYPE",
    "TrackService",
]
