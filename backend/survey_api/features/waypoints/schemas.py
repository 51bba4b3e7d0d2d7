"""
Waypoint schemas.

Pydantic models for waypoint operations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class WaypointImage(BaseModel):
    """Image stored in the external blob store."""

    url: str
    public_id: Optional[str] = None
    uploaded_at: Optional[datetime] = None


class WaypointCreate(BaseModel):
    """Create waypoint request."""

    name: str = Field(..., max_length=255)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    notes: Optional[str] = None
    images: list[WaypointImage] = Field(default_factory=list)
    project_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class WaypointUpdate(BaseModel):
    """Update waypoint request; omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, max_length=255)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    notes: Optional[str] = None
    images: Optional[list[WaypointImage]] = None
    project_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None


class WaypointResponse(BaseModel):
    """Waypoint response."""

    id: str
    user_id: str
    name: str
    latitude: float
    longitude: float
    notes: Optional[str] = None
    images: list[WaypointImage] = Field(default_factory=list)
    project_id: Optional[str] = None
    project_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
