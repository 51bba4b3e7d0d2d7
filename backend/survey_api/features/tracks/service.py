"""
TrackService - GPS recording sessions of a project.

One session (TrackSummary) is active per (project, user). Points arrive in
batches and are stored all-or-nothing. Ending a session computes its
walked distance and duration from its own points only.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.config import settings
from survey_api.features.projects.models import Project
from survey_api.shared.errors import (
    AuthorizationError,
    ConflictError,
    NoActiveTrackError,
    NotFoundError,
    ValidationError,
)
from survey_api.shared.timeutils import Clock, utc_now

from .distance import project_distance, rounded_distance, segment_stats
from .gpx_export import GPXExportService
from .models import TrackSummary, TrackPoint
from .repository import TrackSummaryRepository, TrackPointRepository
from .schemas import TrackPointIn

logger = logging.getLogger(__name__)


class TrackService:
    """Track segment tracker and GPX export."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = utc_now,
        max_points_per_batch: Optional[int] = None,
    ):
        self.db = db
        self.summaries = TrackSummaryRepository(db)
        self.points = TrackPointRepository(db)
        self.clock = clock
        self.max_points_per_batch = max_points_per_batch or settings.max_points_per_batch

    # =========================================================================
    # Recording
    # =========================================================================

    async def start_track(self, user_id: str, project_id: str) -> TrackSummary:
        """
        Open a new session, closing any active one first.

        Raises:
            AuthorizationError: Project missing or owned by another user
            ConflictError: Another session was started at the same time
        """
        now = self.clock()

        try:
            # The project row lock serializes starts when nothing is active yet
            await self._require_owned_project(user_id, project_id, for_update=True)
            for previous in await self.summaries.list_active(project_id, user_id):
                await self._finalize(previous, now)
                logger.info(f"Closed previous track {previous.id} of project {project_id}")

            track = await self.summaries.create(
                project_id=project_id,
                user_id=user_id,
                started_at=now,
                is_active=True,
                total_distance=0.0,
                total_duration=0,
                point_count=0,
                created_at=now,
            )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Concurrent track start for project {project_id}: {e.orig}")
            raise ConflictError("Another track was started at the same time, try again")
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Started track {track.id} for project {project_id} (user {user_id})")
        return track

    async def append_points(
        self,
        user_id: str,
        project_id: str,
        points: list[TrackPointIn],
    ) -> tuple[TrackSummary, int]:
        """
        Store a batch of points in the active session.

        Points without recorded_at are stamped with the server time; the
        batch order is kept for equal timestamps.

        Returns:
            (active summary, number of points saved)

        Raises:
            ValidationError: Empty or oversized batch
            NoActiveTrackError: No active session for the project
        """
        if not points:
            raise ValidationError("At least one point is required")
        if len(points) > self.max_points_per_batch:
            raise ValidationError(
                f"Too many points in one batch (max {self.max_points_per_batch})"
            )

        now = self.clock()
        try:
            track = await self.summaries.get_active(project_id, user_id, for_update=True)
            if track is None:
                raise NoActiveTrackError("No active track for this project")

            rows = [
                TrackPointRepository.make_row(
                    track_id=track.id,
                    project_id=project_id,
                    user_id=user_id,
                    lat=point.lat,
                    lng=point.lng,
                    accuracy=point.accuracy,
                    elevation=point.elevation,
                    recorded_at=point.recorded_at or now,
                    created_at=now,
                )
                for point in points
            ]
            saved = await self.points.bulk_insert(rows)
            await self.summaries.add_points_count(track.id, saved)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(track)
        logger.debug(f"Saved {saved} points to track {track.id} ({track.point_count} total)")
        return track, saved

    async def end_track(self, user_id: str, project_id: str) -> TrackSummary:
        """
        Close the active session and compute its statistics.

        Raises:
            NoActiveTrackError: No active session for the project
        """
        now = self.clock()
        try:
            track = await self.summaries.get_active(project_id, user_id, for_update=True)
            if track is None:
                raise NoActiveTrackError("No active track for this project")
            await self._finalize(track, now)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(track)
        logger.info(
            f"Ended track {track.id}: {track.point_count} points, "
            f"{track.total_distance:.2f} m, {track.total_duration}s"
        )
        return track

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_active_track(self, user_id: str, project_id: str) -> TrackSummary:
        """Active session of a project; NoActiveTrackError if none."""
        track = await self.summaries.get_active(project_id, user_id)
        if track is None:
            raise NoActiveTrackError("No active track for this project")
        return track

    async def list_tracks(self, user_id: str, project_id: str) -> list[TrackSummary]:
        """All sessions of a project, newest first."""
        await self._get_visible_project(user_id, project_id)
        return await self.summaries.list_for_project(project_id, user_id)

    async def get_points(
        self,
        user_id: str,
        project_id: str,
        track_id: Optional[str] = None,
    ) -> list[TrackPoint]:
        """Points of a project (or one of its sessions) in time order."""
        await self._get_visible_project(user_id, project_id)
        return await self.points.list_for_project(project_id, user_id, track_id)

    async def project_distance(self, user_id: str, project_id: str) -> tuple[float, int]:
        """
        Walked distance over all sessions of a project.

        Returns:
            (meters, number of sessions with points)
        """
        await self._get_visible_project(user_id, project_id)
        segments = await self.points.group_by_track(project_id, user_id)
        return rounded_distance(project_distance(segments)), len(segments)

    async def export_gpx(
        self,
        user_id: str,
        project_id: str,
        track_id: Optional[str] = None,
    ) -> str:
        """
        Export recorded points as GPX 1.1.

        Raises:
            NotFoundError: Project (or session) not found for the user
        """
        project = await self._get_visible_project(user_id, project_id)
        if track_id is not None:
            track = await self.summaries.get_by_id(track_id)
            if track is None or track.project_id != project_id or track.user_id != user_id:
                raise NotFoundError("Track not found")

        points = await self.points.list_for_project(project_id, user_id, track_id)
        return GPXExportService.to_xml(project.name, points, exported_at=self.clock())

    # =========================================================================
    # Internals
    # =========================================================================

    async def _finalize(self, track: TrackSummary, now) -> None:
        """Compute statistics of a session and deactivate it."""
        stats = segment_stats(await self.points.list_for_track(track.id))
        track.total_distance = rounded_distance(stats.distance_m)
        track.total_duration = stats.duration_s
        track.point_count = stats.point_count
        track.is_active = False
        track.ended_at = now
        await self.db.flush()

    async def _require_owned_project(
        self, user_id: str, project_id: str, for_update: bool = False
    ) -> Project:
        project = await self.db.get(
            Project, project_id, with_for_update=for_update, populate_existing=for_update
        )
        if project is None or project.user_id != user_id:
            raise AuthorizationError("Project not found or access denied")
        return project

    async def _get_visible_project(self, user_id: str, project_id: str) -> Project:
        project = await self.db.get(Project, project_id)
        if project is None or project.user_id != user_id:
            raise NotFoundError("Project not found")
        return project
