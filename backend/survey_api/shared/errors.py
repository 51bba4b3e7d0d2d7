"""
Error taxonomy shared by all features.

Services raise these; the API layer maps them to status codes
(see survey_api.api.errors). Each error carries a stable `code`
and a human-readable `message`.
"""


class SurveyError(Exception):
    """Base error for survey operations."""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {"error": self.code, "detail": self.message}


# =============================================================================
# Validation
# =============================================================================

class ValidationError(SurveyError):
    """Malformed input (empty batch, blank name, ...)."""

    code = "validation_error"


class InvalidStatusError(ValidationError):
    """Unknown project status value."""

    code = "invalid_status"


# =============================================================================
# Access
# =============================================================================

class AuthorizationError(SurveyError):
    """Resource exists but is not owned by the caller."""

    code = "forbidden"


class NotFoundError(SurveyError):
    """Resource does not exist."""

    code = "not_found"


# =============================================================================
# State
# =============================================================================

class ConflictError(SurveyError):
    """Request conflicts with the current state of a resource."""

    code = "conflict"


class DuplicateNameError(ConflictError):
    """Name already used within its scope."""

    code = "duplicate_name"


class InvalidTransitionError(ConflictError):
    """Status transition not allowed from the current status."""

    code = "invalid_transition"


class NoActiveSessionError(SurveyError):
    """Operation needs an active recording session."""

    code = "no_active_session"


class NoActiveTrackError(NoActiveSessionError):
    """No active Track Summary for the project."""

    code = "no_active_track"
