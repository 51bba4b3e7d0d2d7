"""
Waypoint model.

A named location captured during a survey, optionally part of a project.
"""

from sqlalchemy import Column, String, DateTime, Float, Text, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
import uuid

from survey_api.models.base import Base
from survey_api.shared.timeutils import utc_now


class Waypoint(Base):
    """
    Surveyed location.

    images holds a list of {"url", "public_id", "uploaded_at"} records;
    the blobs live in an external store.
    """

    __tablename__ = "waypoints"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    images = Column(JSON, nullable=False, default=list)

    # Project membership
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    project_name = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    # Relationships
    project = relationship("Project", back_populates="waypoints")

    __table_args__ = (
        Index("idx_waypoints_coordinates", "latitude", "longitude"),
    )

    def __repr__(self):
        return f"<Waypoint {self.id} ({self.name})>"
