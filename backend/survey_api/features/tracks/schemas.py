"""
Track schemas.

Pydantic models for track recording operations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from survey_api.shared.timeutils import to_naive_utc


class TrackStartRequest(BaseModel):
    """Start a recording session for a project."""

    project_id: str


class TrackPointIn(BaseModel):
    """
    Single GPS fix sent by the client.

    Points within one batch are expected in acquisition order.
    recorded_at defaults to the server time of the batch.
    """

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(default=None, ge=0)
    elevation: Optional[float] = None
    recorded_at: Optional[datetime] = None

    @field_validator("recorded_at")
    @classmethod
    def normalize_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else None


class AppendPointsRequest(BaseModel):
    """Batch of points for the project's active session."""

    project_id: str
    points: list[TrackPointIn]


class AppendPointsResponse(BaseModel):
    """Result of a point batch."""

    saved_count: int
    track_id: str
    point_count: int  # total points in the session


class TrackEndRequest(BaseModel):
    """End the project's active session."""

    project_id: str


class TrackSummaryResponse(BaseModel):
    """Recording session response."""

    id: str
    project_id: str
    user_id: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    is_active: bool
    total_distance: float  # meters
    total_duration: int  # seconds
    point_count: int

    class Config:
        from_attributes = True


class TrackPointResponse(BaseModel):
    """Stored GPS fix."""

    id: int
    track_id: str
    lat: float
    lng: float
    accuracy: Optional[float] = None
    elevation: Optional[float] = None
    recorded_at: datetime

    @classmethod
    def from_point(cls, point) -> "TrackPointResponse":
        return cls(
            id=point.id,
            track_id=point.track_id,
            lat=point.latitude,
            lng=point.longitude,
            accuracy=point.accuracy,
            elevation=point.elevation,
            recorded_at=point.recorded_at,
        )
