"""
GPS track models.

Models:
- TrackSummary: One recording session (segment) of a project
- TrackPoint: One GPS fix inside a recording session
"""

from sqlalchemy import (
    Column, String, DateTime, Float, Integer, Boolean, BigInteger, ForeignKey, Index, text,
)
from sqlalchemy.orm import relationship
import uuid

from survey_api.models.base import Base
from survey_api.shared.timeutils import utc_now


class TrackSummary(Base):
    """
    One recording session of GPS points.

    At most one summary per (project, user) is active at a time.
    Distance and duration are filled in when the session ends.
    """

    __tablename__ = "track_summaries"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(36), nullable=False, index=True)

    # Session
    started_at = Column(DateTime, nullable=False, default=utc_now)
    ended_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # Statistics
    total_distance = Column(Float, nullable=False, default=0.0)  # meters
    total_duration = Column(Integer, nullable=False, default=0)  # seconds
    point_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    project = relationship("Project", back_populates="tracks")

    points = relationship(
        "TrackPoint",
        back_populates="track",
        cascade="all, delete-orphan",
        order_by="TrackPoint.recorded_at",
    )

    __table_args__ = (
        Index("idx_track_summaries_active", "project_id", "user_id", "is_active"),
        # At most one active session per (project, user)
        Index(
            "uq_track_summaries_one_active",
            "project_id",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    def __repr__(self):
        return (
            f"<TrackSummary {self.id} project={self.project_id} "
            f"active={self.is_active} points={self.point_count}>"
        )


class TrackPoint(Base):
    """
    Single GPS fix.

    Immutable once written. Ordered by recorded_at within its summary;
    the autoincrement id breaks ties inside one batch.
    """

    __tablename__ = "track_points"

    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    track_id = Column(
        String(36),
        ForeignKey("track_summaries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String(36), nullable=False)

    # Location (WGS84)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=True)  # meters
    elevation = Column(Float, nullable=True)  # meters

    recorded_at = Column(DateTime, nullable=False, default=utc_now)
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    track = relationship("TrackSummary", back_populates="points")

    __table_args__ = (
        Index("idx_track_points_track_time", "track_id", "recorded_at"),
        Index("idx_track_points_project_user", "project_id", "user_id", "recorded_at"),
    )

    def __repr__(self):
        return f"<TrackPoint {self.id} ({self.latitude}, {self.longitude}) at {self.recorded_at}>"
