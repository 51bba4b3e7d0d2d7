"""
Project lifecycle module.

Usage:
    from survey_api.features.projects import Project, ProjectService
    from survey_api.features.projects import AutoPauseMonitor

Components:
- Project: SQLAlchemy model with play/pause/end timing state
- timing: Pure time accounting (elapsed seconds, inactivity policy)
- ProjectService: Status transitions, heartbeat, active project lookup
- AutoPauseMonitor: Background inactivity sweep
"""

from .models import Project
from .schemas import (
    ProjectCreate,
    ProjectStatusUpdate,
    ProjectResponse,
    ActiveProjectResponse,
    ProjectDistanceResponse,
)
from .repository import ProjectRepository
from .timing import TimingState, elapsed_seconds, is_inactive
from .service import ProjectService
from .auto_pause import AutoPauseMonitor, SweepResult

__all__ = [
    # Model
    "Project",
    # Schemas
    "ProjectCreate",
    "ProjectStatusUpdate",
    "ProjectResponse",
    "ActiveProjectResponse",
    "ProjectDistanceResponse",
    # Repository
    "ProjectRepository",
    # Timing
    "TimingState",
    "elapsed_seconds",
    "is_inactive",
    # Services
    "ProjectService",
    "AutoPauseMonitor",
    "SweepResult",
]
