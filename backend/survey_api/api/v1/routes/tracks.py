"""
Track Routes

Endpoints for GPS recording sessions and GPX export.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.api.deps import get_current_user_id
from survey_api.db.session import get_async_db
from survey_api.features.projects import ProjectService
from survey_api.features.tracks import (
    TrackService,
    GPXExportService,
    GPX_CONTENT_TYPE,
    TrackStartRequest,
    AppendPointsRequest,
    AppendPointsResponse,
    TrackEndRequest,
    TrackSummaryResponse,
    TrackPointResponse,
)

router = APIRouter()


# === Recording ===

@router.post("", response_model=TrackSummaryResponse, status_code=status.HTTP_201_CREATED)
async def start_track(
    request: TrackStartRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Start a recording session; an active one is closed first."""
    return await TrackService(db).start_track(user_id, request.project_id)


@router.post("/points", response_model=AppendPointsResponse)
async def append_points(
    request: AppendPointsRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Store a batch of GPS points in the active session (all or nothing)."""
    track, saved = await TrackService(db).append_points(
        user_id, request.project_id, request.points
    )
    return AppendPointsResponse(
        saved_count=saved,
        track_id=track.id,
        point_count=track.point_count,
    )


@router.put("/end", response_model=TrackSummaryResponse)
async def end_track(
    request: TrackEndRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """End the active session and compute distance and duration."""
    return await TrackService(db).end_track(user_id, request.project_id)


# === Queries ===

@router.get("/project/{project_id}", response_model=list[TrackSummaryResponse])
async def list_tracks(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """All sessions of a project, newest first."""
    return await TrackService(db).list_tracks(user_id, project_id)


@router.get("/project/{project_id}/active", response_model=TrackSummaryResponse)
async def get_active_track(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Active session of a project."""
    return await TrackService(db).get_active_track(user_id, project_id)


@router.get("/project/{project_id}/points", response_model=list[TrackPointResponse])
async def get_track_points(
    project_id: str,
    track_id: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Recorded points in time order, optionally for one session."""
    points = await TrackService(db).get_points(user_id, project_id, track_id)
    return [TrackPointResponse.from_point(p) for p in points]


@router.get("/project/{project_id}/gpx")
async def export_gpx(
    project_id: str,
    track_id: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Download recorded points as a GPX 1.1 file."""
    xml = await TrackService(db).export_gpx(user_id, project_id, track_id)
    project = await ProjectService(db).get_project(user_id, project_id)
    filename = GPXExportService.filename(project.name, track_id)

    return Response(
        content=xml,
        media_type=GPX_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
