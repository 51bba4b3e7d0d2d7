"""
WaypointService - waypoint CRUD.

Creating a waypoint inside a project is a sign of life for that project:
it refreshes last_activity and clears auto_paused in the same transaction.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.features.projects.models import Project
from survey_api.features.projects.service import ProjectService
from survey_api.shared.errors import (
    AuthorizationError,
    DuplicateNameError,
    NotFoundError,
    ValidationError,
)
from survey_api.shared.timeutils import Clock, utc_now

from .models import Waypoint
from .repository import WaypointRepository
from .schemas import WaypointCreate, WaypointUpdate

logger = logging.getLogger(__name__)


class WaypointService:
    """Waypoint CRUD and project activity."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.repo = WaypointRepository(db)
        self.projects = ProjectService(db, clock=clock)
        self.clock = clock

    async def list_waypoints(
        self,
        user_id: str,
        project_id: Optional[str] = None,
    ) -> list[Waypoint]:
        """Waypoints of a user, optionally for one project."""
        return await self.repo.list_for_user(user_id, project_id)

    async def list_project_waypoints(self, user_id: str, project_id: str) -> list[Waypoint]:
        """Waypoints of a visible project in creation order."""
        await self.projects.get_project(user_id, project_id)
        return await self.repo.list_for_project(project_id)

    async def get_waypoint(self, user_id: str, waypoint_id: str) -> Waypoint:
        """Get a waypoint; someone else's waypoint is reported as missing."""
        waypoint = await self.repo.get_by_id(waypoint_id)
        if waypoint is None or waypoint.user_id != user_id:
            raise NotFoundError("Waypoint not found")
        return waypoint

    async def create_waypoint(self, user_id: str, request: WaypointCreate) -> Waypoint:
        """
        Create a waypoint.

        Raises:
            ValidationError: Blank name
            NotFoundError: Project not found for the user
            DuplicateNameError: Name already used in the project
        """
        if not request.name:
            raise ValidationError("Waypoint name is required")

        now = self.clock()
        project: Optional[Project] = None

        try:
            if request.project_id:
                project = await self.projects.get_project(user_id, request.project_id)
                if await self.repo.name_taken(project.id, user_id, request.name):
                    raise DuplicateNameError(
                        "A waypoint with this name already exists in the project"
                    )

            waypoint = await self.repo.create(
                user_id=user_id,
                name=request.name,
                latitude=request.latitude,
                longitude=request.longitude,
                notes=request.notes,
                images=[image.model_dump(mode="json") for image in request.images],
                project_id=project.id if project else None,
                project_name=project.name if project else None,
                created_at=now,
                updated_at=now,
            )

            if project is not None:
                await self.projects.record_activity(project)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Created waypoint {waypoint.id} (project {waypoint.project_id})")
        return waypoint

    async def update_waypoint(
        self,
        user_id: str,
        waypoint_id: str,
        request: WaypointUpdate,
    ) -> Waypoint:
        """
        Update a waypoint owned by the user.

        Raises:
            NotFoundError: Waypoint (or target project) not found
            AuthorizationError: Waypoint belongs to another user
            DuplicateNameError: Name already used in the project
        """
        waypoint = await self.repo.get_by_id(waypoint_id)
        if waypoint is None:
            raise NotFoundError("Waypoint not found")
        if waypoint.user_id != user_id:
            raise AuthorizationError("Not authorized to update this waypoint")

        changes = request.model_dump(exclude_unset=True)
        if "name" in changes and not changes["name"]:
            raise ValidationError("Waypoint name is required")

        try:
            if "project_id" in changes:
                project_id = changes["project_id"]
                if project_id:
                    project = await self.projects.get_project(user_id, project_id)
                    changes["project_name"] = project.name
                else:
                    changes["project_name"] = None

            target_project = changes.get("project_id", waypoint.project_id)
            target_name = changes.get("name", waypoint.name)
            if target_project and await self.repo.name_taken(
                target_project, user_id, target_name, exclude_id=waypoint.id
            ):
                raise DuplicateNameError(
                    "A waypoint with this name already exists in the project"
                )

            if "images" in changes:
                changes["images"] = [
                    image.model_dump(mode="json") for image in request.images or []
                ]
            changes["updated_at"] = self.clock()

            waypoint = await self.repo.update(waypoint, **changes)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        return waypoint

    async def delete_waypoint(self, user_id: str, waypoint_id: str) -> Waypoint:
        """
        Delete a waypoint owned by the user.

        Raises:
            NotFoundError: Waypoint does not exist
            AuthorizationError: Waypoint belongs to another user
        """
        waypoint = await self.repo.get_by_id(waypoint_id)
        if waypoint is None:
            raise NotFoundError("Waypoint not found")
        if waypoint.user_id != user_id:
            raise AuthorizationError("Not authorized to delete this waypoint")

        try:
            await self.repo.delete(waypoint)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Deleted waypoint {waypoint_id}")
        return waypoint
