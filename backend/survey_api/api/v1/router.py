"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from survey_api.api.v1.routes import projects, tracks, waypoints

api_router = APIRouter()

api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(tracks.router, prefix="/tracks", tags=["Tracks"])
api_router.include_router(waypoints.router, prefix="/waypoints", tags=["Waypoints"])
