"""
Project model.

A project groups waypoints and GPS tracks and carries the play/pause/end
timing state.
"""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, Index, text
from sqlalchemy.orm import relationship
import uuid

from survey_api.models.base import Base
from survey_api.shared.constants import ProjectStatus
from survey_api.shared.timeutils import utc_now


class Project(Base):
    """
    Survey project owned by one user.

    Timing state:
    - status: paused | playing | ended
    - started_at: start of the current active segment, set iff playing
    - elapsed_seconds: banked time of all closed active segments
    - last_activity: most recent sign of life while playing
    - auto_paused: last pause was system-initiated (inactivity)
    """

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)

    name = Column(String(255), nullable=False)

    # Timing
    status = Column(String(20), nullable=False, default=ProjectStatus.PAUSED.value)
    started_at = Column(DateTime, nullable=True)
    elapsed_seconds = Column(Integer, nullable=False, default=0)
    last_activity = Column(DateTime, nullable=True)
    auto_paused = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime, default=utc_now)

    # Relationships
    waypoints = relationship(
        "Waypoint",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Waypoint.created_at",
    )

    tracks = relationship(
        "TrackSummary",
        back_populates="project",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_projects_user_status", "user_id", "status"),
        # At most one playing project per user
        Index(
            "uq_projects_one_playing",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'playing'"),
            sqlite_where=text("status = 'playing'"),
        ),
    )

    def __repr__(self):
        return f"<Project {self.id} ({self.name}) status={self.status}>"

    @property
    def is_playing(self) -> bool:
        return self.status == ProjectStatus.PLAYING.value

    @property
    def is_ended(self) -> bool:
        return self.status == ProjectStatus.ENDED.value
