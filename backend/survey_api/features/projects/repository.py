"""
Project repository.

Data access layer for Project rows.
"""

from datetime import datetime

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.shared.constants import ProjectStatus
from survey_api.shared.repository import BaseRepository
from .models import Project


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Project)

    async def list_for_user(self, user_id: str) -> list[Project]:
        """
        Get all projects of a user.

        Args:
            user_id: Owner ID

        Returns:
            Projects ordered by creation time (newest first)
        """
        result = await self.db.execute(
            select(Project)
            .where(Project.user_id == user_id)
            .order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def find_by_name(self, user_id: str, name: str) -> Project | None:
        """
        Find a user's project by name, ignoring case.

        Args:
            user_id: Owner ID
            name: Trimmed project name

        Returns:
            Matching project or None
        """
        result = await self.db.execute(
            select(Project)
            .where(Project.user_id == user_id)
            .where(func.lower(Project.name) == name.lower())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def lock_for_user(self, user_id: str) -> list[str]:
        """
        Lock every project row of a user until the transaction ends.

        Rows are locked in id order so concurrent callers queue on the
        same first row instead of deadlocking.

        Args:
            user_id: Owner ID

        Returns:
            IDs of the locked projects
        """
        result = await self.db.execute(
            select(Project.id)
            .where(Project.user_id == user_id)
            .order_by(Project.id)
            .with_for_update()
        )
        return list(result.scalars().all())

    async def list_playing_for_user(
        self,
        user_id: str,
        exclude_id: str | None = None,
        for_update: bool = False,
    ) -> list[Project]:
        """
        Get a user's playing projects.

        Args:
            user_id: Owner ID
            exclude_id: Project ID to leave out
            for_update: Lock the rows until the transaction ends

        Returns:
            Playing projects (normally at most one)
        """
        query = (
            select(Project)
            .where(Project.user_id == user_id)
            .where(Project.status == ProjectStatus.PLAYING.value)
            .order_by(Project.started_at.desc())
        )
        if exclude_id is not None:
            query = query.where(Project.id != exclude_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_stale_playing(self, cutoff: datetime) -> list[Project]:
        """
        Get playing projects with no sign of life since cutoff.

        Both started_at and last_activity (when set) must be older than
        the cutoff.

        Args:
            cutoff: Inactivity cutoff timestamp

        Returns:
            Projects eligible for auto-pause
        """
        result = await self.db.execute(
            select(Project)
            .where(Project.status == ProjectStatus.PLAYING.value)
            .where(Project.started_at.is_not(None))
            .where(Project.started_at < cutoff)
            .where(or_(Project.last_activity.is_(None), Project.last_activity < cutoff))
            .order_by(Project.started_at)
        )
        return list(result.scalars().all())

    async def touch_activity(self, project_id: str, now: datetime) -> bool:
        """
        Record a sign of life on a project.

        Refreshes last_activity and clears the auto-pause flag. Does not
        change the status.

        Args:
            project_id: Project ID
            now: Activity timestamp

        Returns:
            True if the project exists
        """
        result = await self.db.execute(
            update(Project)
            .where(Project.id == project_id)
            .values(last_activity=now, auto_paused=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
