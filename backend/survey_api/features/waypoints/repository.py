"""
Waypoint repository.

Data access layer for Waypoint model.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.shared.repository import BaseRepository
from .models import Waypoint


class WaypointRepository(BaseRepository[Waypoint]):
    """Repository for Waypoint operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Waypoint)

    async def list_for_user(
        self,
        user_id: str,
        project_id: str | None = None,
    ) -> list[Waypoint]:
        """
        Get waypoints of a user.

        Args:
            user_id: Owner ID
            project_id: Restrict to one project (optional)

        Returns:
            Waypoints ordered by creation time (newest first)
        """
        query = select(Waypoint).where(Waypoint.user_id == user_id)
        if project_id is not None:
            query = query.where(Waypoint.project_id == project_id)
        result = await self.db.execute(query.order_by(Waypoint.created_at.desc()))
        return list(result.scalars().all())

    async def list_for_project(self, project_id: str) -> list[Waypoint]:
        """Waypoints of a project in creation order."""
        result = await self.db.execute(
            select(Waypoint)
            .where(Waypoint.project_id == project_id)
            .order_by(Waypoint.created_at)
        )
        return list(result.scalars().all())

    async def name_taken(
        self,
        project_id: str,
        user_id: str,
        name: str,
        exclude_id: str | None = None,
    ) -> bool:
        """
        Check whether a waypoint name is used within a project.

        Comparison ignores case.
        """
        query = (
            select(Waypoint.id)
            .where(Waypoint.project_id == project_id)
            .where(Waypoint.user_id == user_id)
            .where(func.lower(Waypoint.name) == name.lower())
        )
        if exclude_id is not None:
            query = query.where(Waypoint.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None
