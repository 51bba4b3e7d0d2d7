"""
Project schemas.

Pydantic models for project operations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ProjectCreate(BaseModel):
    """Create project request."""

    name: str = Field(..., max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class ProjectStatusUpdate(BaseModel):
    """Status change request: 'playing' | 'paused' | 'ended'."""

    status: str


class ProjectResponse(BaseModel):
    """Project response."""

    id: str
    user_id: str
    name: str
    status: str
    started_at: Optional[datetime] = None
    elapsed_seconds: int
    current_elapsed_seconds: int = 0  # banked + open segment at response time
    last_activity: Optional[datetime] = None
    auto_paused: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActiveProjectResponse(BaseModel):
    """Active project lookup; project is None when nothing is playing."""

    project: Optional[ProjectResponse] = None


class ProjectDistanceResponse(BaseModel):
    """Segment-isolated distance of all tracks in a project."""

    project_id: str
    total_distance: float  # meters
    track_count: int
