"""
Shared utilities (NOT business logic).

Usage:
    from survey_api.shared import haversine_m, path_distance_m
    from survey_api.shared.errors import NotFoundError
"""
from .geo import (
    haversine,
    haversine_m,
    path_distance_m,
    EARTH_RADIUS_KM,
)
from .constants import (
    ProjectStatus,
    MAX_TRANSITION_ATTEMPTS,
)
from .errors import (
    SurveyError,
    ValidationError,
    InvalidStatusError,
    AuthorizationError,
    NotFoundError,
    ConflictError,
    DuplicateNameError,
    InvalidTransitionError,
    NoActiveSessionError,
    NoActiveTrackError,
)
from .timeutils import Clock, utc_now, to_naive_utc, as_utc, whole_seconds_between
from .repository import BaseRepository

__all__ = [
    # geo
    "haversine",
    "haversine_m",
    "path_distance_m",
    "EARTH_RADIUS_KM",
    # constants
    "ProjectStatus",
    "MAX_TRANSITION_ATTEMPTS",
    # errors
    "SurveyError",
    "ValidationError",
    "InvalidStatusError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "DuplicateNameError",
    "InvalidTransitionError",
    "NoActiveSessionError",
    "NoActiveTrackError",
    # time
    "Clock",
    "utc_now",
    "to_naive_utc",
    "as_utc",
    "whole_seconds_between",
    # repository
    "BaseRepository",
]
