"""
Unified constants for project status.

This module provides a single source of truth for status naming
across the entire application.
"""

from enum import Enum


class ProjectStatus(str, Enum):
    """
    Project lifecycle status.

    Transitions:
    - paused  -> playing (explicit user action)
    - playing -> paused  (explicit pause or auto-pause)
    - any     -> ended   (terminal)
    """
    PAUSED = "paused"
    PLAYING = "playing"
    ENDED = "ended"


# Maximum compare-and-set attempts for one project transition
MAX_TRANSITION_ATTEMPTS = 3
