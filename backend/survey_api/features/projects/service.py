"""
ProjectService - project lifecycle and play/pause/end timing.

Status transitions:
    -> playing   pause every other playing project of the user (banking
                 their time), then open a new segment on this one
    playing -> paused   bank the open segment (explicit or auto-pause)
    heartbeat           bank the open segment and open a new one at once
    any -> ended        bank if playing; terminal

Every transition reads the row and writes it back with a compare-and-set
update inside one transaction. If the row changed in between, the
transaction is rolled back and the transition is recomputed from fresh
state. Starting a project locks all of the user's rows first, and a
partial unique index keeps a second playing project from being committed.
"""

import logging
from datetime import timedelta
from typing import Awaitable, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from survey_api.config import settings
from survey_api.shared.constants import ProjectStatus, MAX_TRANSITION_ATTEMPTS
from survey_api.shared.errors import (
    AuthorizationError,
    ConflictError,
    DuplicateNameError,
    InvalidStatusError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from survey_api.shared.timeutils import Clock, utc_now

from .models import Project
from .repository import ProjectRepository
from .schemas import ProjectResponse
from .timing import TimingState, elapsed_seconds, inactivity_cutoff, is_inactive

logger = logging.getLogger(__name__)


class _StaleRow(Exception):
    """Row changed between read and compare-and-set update."""


class ProjectService:
    """Project state machine and CRUD."""

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = utc_now,
        inactivity_threshold: Optional[timedelta] = None,
    ):
        self.db = db
        self.repo = ProjectRepository(db)
        self.clock = clock
        self.inactivity_threshold = inactivity_threshold or settings.inactivity_threshold

    # =========================================================================
    # CRUD
    # =========================================================================

    async def create_project(self, user_id: str, name: str) -> Project:
        """
        Create a project in paused state with no elapsed time.

        Raises:
            ValidationError: Blank name
            DuplicateNameError: User already has a project with this name
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Project name is required")

        try:
            if await self.repo.find_by_name(user_id, name):
                raise DuplicateNameError("Project with this name already exists")
            project = await self.repo.create(
                user_id=user_id,
                name=name,
                status=ProjectStatus.PAUSED.value,
                elapsed_seconds=0,
                auto_paused=False,
                created_at=self.clock(),
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Created project {project.id} for user {user_id}")
        return project

    async def list_projects(self, user_id: str) -> list[Project]:
        """Get all projects of a user, newest first."""
        return await self.repo.list_for_user(user_id)

    async def get_project(self, user_id: str, project_id: str) -> Project:
        """
        Get a project visible to the user.

        A project owned by someone else is reported as missing.
        """
        project = await self.repo.get_by_id(project_id)
        if project is None or project.user_id != user_id:
            raise NotFoundError("Project not found")
        return project

    async def delete_project(self, user_id: str, project_id: str) -> None:
        """Delete a project with its waypoints, tracks and points."""
        project = await self.get_project(user_id, project_id)
        try:
            await self.repo.delete(project)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(f"Deleted project {project_id} (user {user_id})")

    # =========================================================================
    # State machine
    # =========================================================================

    async def set_status(self, user_id: str, project_id: str, target_status: str) -> Project:
        """
        Move a project to 'playing', 'paused' or 'ended'.

        Raises:
            InvalidStatusError: Unknown status value
            NotFoundError: Project does not exist
            AuthorizationError: Project belongs to another user
            InvalidTransitionError: Project has already ended
        """
        status = self._parse_status(target_status)
        paused_others: list[str] = []

        async def operation() -> Project:
            paused_others.clear()
            if status is ProjectStatus.PLAYING:
                # Serialize concurrent starts of the same user's projects
                await self.repo.lock_for_user(user_id)
            now = self.clock()
            project = await self._get_owned(user_id, project_id, for_update=True)

            if project.is_ended:
                if status is ProjectStatus.ENDED:
                    return project
                raise InvalidTransitionError("Project has ended")

            state = TimingState.of(project)
            banked = elapsed_seconds(state, now)

            if status is ProjectStatus.PLAYING:
                # At most one playing project per user
                others = await self.repo.list_playing_for_user(
                    user_id, exclude_id=project.id, for_update=True
                )
                for other in others:
                    other_state = TimingState.of(other)
                    await self._apply(other, other_state, {
                        "status": ProjectStatus.PAUSED.value,
                        "elapsed_seconds": elapsed_seconds(other_state, now),
                        "started_at": None,
                        "auto_paused": False,
                    })
                    paused_others.append(other.id)

                await self._apply(project, state, {
                    "status": ProjectStatus.PLAYING.value,
                    "elapsed_seconds": banked,
                    "started_at": now,
                    "auto_paused": False,
                })

            elif status is ProjectStatus.PAUSED:
                await self._apply(project, state, {
                    "status": ProjectStatus.PAUSED.value,
                    "elapsed_seconds": banked,
                    "started_at": None,
                    "auto_paused": False,
                })

            else:
                await self._apply(project, state, {
                    "status": ProjectStatus.ENDED.value,
                    "elapsed_seconds": banked,
                    "started_at": None,
                })

            return project

        project = await self._transition(operation)

        for other_id in paused_others:
            logger.info(f"Paused project {other_id} (user {user_id}): another project started")
        logger.info(
            f"Project {project.id} -> {project.status} "
            f"(elapsed {project.elapsed_seconds}s, user {user_id})"
        )
        return project

    async def heartbeat(self, user_id: str, project_id: str) -> Project:
        """
        Checkpoint a playing project.

        Banks the open segment, opens a new one now and refreshes
        last_activity. A project that is not playing is returned unchanged.

        Raises:
            NotFoundError: Project does not exist
            AuthorizationError: Project belongs to another user
        """
        async def operation() -> Project:
            now = self.clock()
            project = await self._get_owned(user_id, project_id, for_update=True)
            if not project.is_playing:
                return project

            state = TimingState.of(project)
            await self._apply(project, state, {
                "elapsed_seconds": elapsed_seconds(state, now),
                "started_at": now,
                "last_activity": now,
            })
            return project

        project = await self._transition(operation)
        logger.debug(f"Heartbeat for project {project.id}: elapsed {project.elapsed_seconds}s")
        return project

    async def get_active_project(self, user_id: str) -> Optional[Project]:
        """
        Get the user's playing project, auto-pausing it inline if stale.

        Returns:
            The playing project (or the project just auto-paused), None if
            nothing is playing
        """
        playing = await self.repo.list_playing_for_user(user_id)
        if not playing:
            return None

        project = playing[0]
        if is_inactive(TimingState.of(project), self.clock(), self.inactivity_threshold):
            await self.auto_pause(project.id)
            await self.db.refresh(project)
        return project

    async def auto_pause(self, project_id: str) -> bool:
        """
        Pause a project for inactivity if it is still eligible.

        Eligibility is re-checked on fresh state, so calling this for a
        project that was already paused (by anyone) is a no-op.

        Returns:
            True if this call paused the project
        """
        paused = False

        async def operation() -> Project:
            nonlocal paused
            paused = False
            now = self.clock()
            project = await self.repo.get_by_id(project_id, for_update=True)
            if project is None:
                raise NotFoundError("Project not found")

            state = TimingState.of(project)
            if not is_inactive(state, now, self.inactivity_threshold):
                return project

            await self._apply(project, state, {
                "status": ProjectStatus.PAUSED.value,
                "elapsed_seconds": elapsed_seconds(state, now),
                "started_at": None,
                "auto_paused": True,
            })
            paused = True
            return project

        project = await self._transition(operation)
        if paused:
            logger.info(
                f"Auto-paused project {project.id} (user {project.user_id}) "
                f"after inactivity, elapsed {project.elapsed_seconds}s"
            )
        return paused

    async def list_stale_project_ids(self) -> list[str]:
        """IDs of playing projects past the inactivity threshold."""
        cutoff = inactivity_cutoff(self.clock(), self.inactivity_threshold)
        projects = await self.repo.list_stale_playing(cutoff)
        # End the read transaction before per-project updates
        await self.db.commit()
        return [project.id for project in projects]

    async def record_activity(self, project: Project) -> bool:
        """
        Refresh last_activity and clear auto_paused within the caller's
        transaction. The status is left as is.
        """
        now = self.clock()
        if not await self.repo.touch_activity(project.id, now):
            return False
        set_committed_value(project, "last_activity", now)
        set_committed_value(project, "auto_paused", False)
        return True

    # =========================================================================
    # Presentation
    # =========================================================================

    def current_elapsed(self, project: Project) -> int:
        """Banked time plus the open segment, evaluated now."""
        return elapsed_seconds(TimingState.of(project), self.clock())

    def to_response(self, project: Project) -> ProjectResponse:
        response = ProjectResponse.model_validate(project)
        response.current_elapsed_seconds = self.current_elapsed(project)
        return response

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _parse_status(value: str) -> ProjectStatus:
        try:
            return ProjectStatus(value)
        except ValueError:
            raise InvalidStatusError(f"Invalid status: {value!r}")

    async def _get_owned(self, user_id: str, project_id: str, for_update: bool = False) -> Project:
        project = await self.repo.get_by_id(project_id, for_update=for_update)
        if project is None:
            raise NotFoundError("Project not found")
        if project.user_id != user_id:
            raise AuthorizationError("Project belongs to another user")
        return project

    async def _apply(self, project: Project, state: TimingState, values: dict) -> None:
        """Write values if the row still holds the timing state that was read."""
        if not await self.repo.compare_and_set(project.id, state.as_expected(), values):
            raise _StaleRow(project.id)
        # Keep the loaded instance in step with the row
        for key, value in values.items():
            set_committed_value(project, key, value)

    async def _transition(self, operation: Callable[[], Awaitable[Project]]) -> Project:
        """
        Run a transition as one transaction, retrying on concurrent changes.

        Raises:
            ConflictError: Row kept changing for MAX_TRANSITION_ATTEMPTS
        """
        for attempt in range(1, MAX_TRANSITION_ATTEMPTS + 1):
            try:
                project = await operation()
                await self.db.commit()
            except _StaleRow as e:
                await self.db.rollback()
                logger.warning(f"Project {e} changed concurrently (attempt {attempt})")
                continue
            except IntegrityError as e:
                # Lost the race for the single playing slot
                await self.db.rollback()
                logger.warning(f"Transition rejected by constraint (attempt {attempt}): {e.orig}")
                continue
            except Exception:
                await self.db.rollback()
                raise

            await self.db.refresh(project)
            return project

        raise ConflictError("Project was modified concurrently, try again")
