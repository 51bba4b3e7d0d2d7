"""
Track repositories.

Data access layer for TrackSummary and TrackPoint models.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.shared.repository import BaseRepository
from .models import TrackSummary, TrackPoint


class TrackSummaryRepository(BaseRepository[TrackSummary]):
    """Repository for TrackSummary operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TrackSummary)

    async def get_active(
        self,
        project_id: str,
        user_id: str,
        for_update: bool = False,
    ) -> TrackSummary | None:
        """
        Get the active session of a project for a user.

        Args:
            project_id: Project ID
            user_id: Recording user ID
            for_update: Lock the row until the transaction ends

        Returns:
            Newest active summary or None
        """
        query = (
            select(TrackSummary)
            .where(TrackSummary.project_id == project_id)
            .where(TrackSummary.user_id == user_id)
            .where(TrackSummary.is_active == True)  # noqa: E712
            .order_by(TrackSummary.started_at.desc())
            .limit(1)
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_active(self, project_id: str, user_id: str) -> list[TrackSummary]:
        """Active sessions of a project, locked until the transaction ends."""
        result = await self.db.execute(
            select(TrackSummary)
            .where(TrackSummary.project_id == project_id)
            .where(TrackSummary.user_id == user_id)
            .where(TrackSummary.is_active == True)  # noqa: E712
            .with_for_update()
        )
        return list(result.scalars().all())

    async def list_for_project(self, project_id: str, user_id: str) -> list[TrackSummary]:
        """
        Get all sessions of a project for a user.

        Returns:
            Summaries ordered by start time (newest first)
        """
        result = await self.db.execute(
            select(TrackSummary)
            .where(TrackSummary.project_id == project_id)
            .where(TrackSummary.user_id == user_id)
            .order_by(TrackSummary.started_at.desc())
        )
        return list(result.scalars().all())

    async def add_points_count(self, track_id: str, count: int) -> None:
        """Atomically increment point_count."""
        await self.db.execute(
            update(TrackSummary)
            .where(TrackSummary.id == track_id)
            .values(point_count=TrackSummary.point_count + count)
            .execution_options(synchronize_session=False)
        )


class TrackPointRepository(BaseRepository[TrackPoint]):
    """Repository for TrackPoint operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TrackPoint)

    async def bulk_insert(self, rows: list[dict[str, Any]]) -> int:
        """
        Insert many points with one parameterized statement.

        Args:
            rows: Column name-value dicts

        Returns:
            Number of rows inserted
        """
        if not rows:
            return 0
        await self.db.execute(insert(TrackPoint), rows)
        return len(rows)

    async def list_for_track(self, track_id: str) -> list[TrackPoint]:
        """Points of one session ordered by acquisition time."""
        result = await self.db.execute(
            select(TrackPoint)
            .where(TrackPoint.track_id == track_id)
            .order_by(TrackPoint.recorded_at, TrackPoint.id)
        )
        return list(result.scalars().all())

    async def list_for_project(
        self,
        project_id: str,
        user_id: str,
        track_id: str | None = None,
    ) -> list[TrackPoint]:
        """
        Points of a project ordered by acquisition time.

        Args:
            project_id: Project ID
            user_id: Recording user ID
            track_id: Restrict to one session (optional)
        """
        query = (
            select(TrackPoint)
            .where(TrackPoint.project_id == project_id)
            .where(TrackPoint.user_id == user_id)
        )
        if track_id is not None:
            query = query.where(TrackPoint.track_id == track_id)
        result = await self.db.execute(
            query.order_by(TrackPoint.recorded_at, TrackPoint.id)
        )
        return list(result.scalars().all())

    async def group_by_track(self, project_id: str, user_id: str) -> dict[str, list[TrackPoint]]:
        """Points of a project split per session, each list in time order."""
        segments: dict[str, list[TrackPoint]] = {}
        for point in await self.list_for_project(project_id, user_id):
            segments.setdefault(point.track_id, []).append(point)
        return segments

    @staticmethod
    def make_row(
        track_id: str,
        project_id: str,
        user_id: str,
        lat: float,
        lng: float,
        recorded_at: datetime,
        created_at: datetime,
        accuracy: float | None = None,
        elevation: float | None = None,
    ) -> dict[str, Any]:
        """Row dict for bulk_insert."""
        return {
            "track_id": track_id,
            "project_id": project_id,
            "user_id": user_id,
            "latitude": lat,
            "longitude": lng,
            "accuracy": accuracy,
            "elevation": elevation,
            "recorded_at": recorded_at,
            "created_at": created_at,
        }
