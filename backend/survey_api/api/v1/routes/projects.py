"""
Project Routes

Endpoints for project lifecycle and play/pause/end timing.
"""

from fastapi import APIRouter, Depends, status
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.api.deps import get_current_user_id
from survey_api.db.session import get_async_db
from survey_api.features.projects import (
    ProjectService,
    ProjectCreate,
    ProjectStatusUpdate,
    ProjectResponse,
    ActiveProjectResponse,
    ProjectDistanceResponse,
)
from survey_api.features.tracks import TrackService
from survey_api.features.waypoints import WaypointService, WaypointResponse

router = APIRouter()


# === Schemas ===

class ProjectDetailResponse(ProjectResponse):
    """Project with its waypoints."""
    waypoints: list[WaypointResponse] = Field(default_factory=list)


# === Endpoints ===

@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Get all projects of the current user, newest first."""
    service = ProjectService(db)
    return [service.to_response(p) for p in await service.list_projects(user_id)]


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a project (paused, no elapsed time)."""
    service = ProjectService(db)
    project = await service.create_project(user_id, request.name)
    return service.to_response(project)


@router.get("/active", response_model=ActiveProjectResponse)
async def get_active_project(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Get the currently playing project.

    A project idle past the inactivity threshold is auto-paused first.
    """
    service = ProjectService(db)
    project = await service.get_active_project(user_id)
    return ActiveProjectResponse(project=service.to_response(project) if project else None)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Get a project with its waypoints."""
    service = ProjectService(db)
    project = await service.get_project(user_id, project_id)
    waypoints = await WaypointService(db).list_project_waypoints(user_id, project_id)

    response = ProjectDetailResponse(**service.to_response(project).model_dump())
    response.waypoints = [WaypointResponse.model_validate(w) for w in waypoints]
    return response


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a project with its waypoints and tracks."""
    await ProjectService(db).delete_project(user_id, project_id)


@router.put("/{project_id}/status", response_model=ProjectResponse)
async def set_project_status(
    project_id: str,
    request: ProjectStatusUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Change project status: 'playing', 'paused' or 'ended'.

    Starting a project pauses any other playing project of the user.
    """
    service = ProjectService(db)
    project = await service.set_status(user_id, project_id, request.status)
    return service.to_response(project)


@router.post("/{project_id}/heartbeat", response_model=ProjectResponse)
async def heartbeat(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Checkpoint elapsed time of a playing project."""
    service = ProjectService(db)
    project = await service.heartbeat(user_id, project_id)
    return service.to_response(project)


@router.get("/{project_id}/distance", response_model=ProjectDistanceResponse)
async def get_project_distance(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Walked distance over all recording sessions (meters)."""
    total, track_count = await TrackService(db).project_distance(user_id, project_id)
    return ProjectDistanceResponse(
        project_id=project_id,
        total_distance=total,
        track_count=track_count,
    )
