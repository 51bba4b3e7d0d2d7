"""
Database Models

Feature models live in their features/ modules. Call register_models()
before creating tables or configuring mappers so every model is attached
to Base.metadata.

Note: Feature models are imported lazily to avoid circular imports.
Use direct imports from features/ modules when possible.
"""

from survey_api.models.base import Base


def register_models():
    """Import all feature models; returns Base for convenience."""
    from survey_api.features.projects.models import Project  # noqa
    from survey_api.features.tracks.models import TrackSummary, TrackPoint  # noqa
    from survey_api.features.waypoints.models import Waypoint  # noqa
    return Base


def _get_model(name):
    """Lazy import of a feature model by name."""
    if name == "Project":
        from survey_api.features.projects.models import Project
        return Project
    if name in ("TrackSummary", "TrackPoint"):
        from survey_api.features.tracks import models
        return getattr(models, name)
    if name == "Waypoint":
        from survey_api.features.waypoints.models import Waypoint
        return Waypoint
    return None


# Expose as module-level attributes for convenience
def __getattr__(name):
    model = _get_model(name)
    if model is not None:
        return model
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Base",
    "register_models",
    "Project",
    "TrackSummary",
    "TrackPoint",
    "Waypoint",
]
