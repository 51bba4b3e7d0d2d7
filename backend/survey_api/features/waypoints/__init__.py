"""
Waypoint module.

Usage:
    from survey_api.features.waypoints import Waypoint, WaypointService

Components:
- Waypoint: SQLAlchemy model for surveyed locations
- WaypointRepository: Data access for waypoints
- WaypointService: CRUD; refreshes project activity on creation
"""

from .models import Waypoint
from .schemas import WaypointImage, WaypointCreate, WaypointUpdate, WaypointResponse
from .repository import WaypointRepository
from .service import WaypointService

__all__ = [
    # Model
    "Waypoint",
    # Schemas
    "WaypointImage",
    "WaypointCreate",
    "WaypointUpdate",
    "WaypointResponse",
    # Repository
    "WaypointRepository",
    # Service
    "WaypointService",
]
