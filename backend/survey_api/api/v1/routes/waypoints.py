"""
Waypoint Routes

Endpoints for waypoint CRUD.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from survey_api.api.deps import get_current_user_id
from survey_api.db.session import get_async_db
from survey_api.features.waypoints import (
    WaypointService,
    WaypointCreate,
    WaypointUpdate,
    WaypointResponse,
)

router = APIRouter()


@router.get("", response_model=list[WaypointResponse])
async def list_waypoints(
    project_id: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Get waypoints of the current user, optionally for one project."""
    return await WaypointService(db).list_waypoints(user_id, project_id)


@router.post("", response_model=WaypointResponse, status_code=status.HTTP_201_CREATED)
async def create_waypoint(
    request: WaypointCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Create a waypoint.

    A waypoint inside a project counts as activity for that project.
    """
    return await WaypointService(db).create_waypoint(user_id, request)


@router.get("/{waypoint_id}", response_model=WaypointResponse)
async def get_waypoint(
    waypoint_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    return await WaypointService(db).get_waypoint(user_id, waypoint_id)


@router.put("/{waypoint_id}", response_model=WaypointResponse)
async def update_waypoint(
    waypoint_id: str,
    request: WaypointUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Update fields of a waypoint; omitted fields are kept."""
    return await WaypointService(db).update_waypoint(user_id, waypoint_id, request)


@router.delete("/{waypoint_id}", response_model=WaypointResponse)
async def delete_waypoint(
    waypoint_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a waypoint and return it."""
    return await WaypointService(db).delete_waypoint(user_id, waypoint_id)
