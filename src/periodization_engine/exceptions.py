"""
Custom exceptions for the periodization engine.

This module defines a hierarchy of exceptions that provide clear error
handling throughout the application. Each exception includes:
- A descriptive message
- An error code for API responses
- HTTP status code mapping
- Optional details (entity type + id, or field name) for rendering upstream
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent API error responses."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    STATE_ERROR = "STATE_ERROR"

    # Volume landmark errors
    INVALID_MUSCLE_GROUP = "INVALID_MUSCLE_GROUP"
    NEGATIVE_VOLUME = "NEGATIVE_VOLUME"
    INVALID_LANDMARKS = "INVALID_LANDMARKS"
    ALREADY_SEEDED = "ALREADY_SEEDED"
    LANDMARK_NOT_FOUND = "LANDMARK_NOT_FOUND"
    NO_LANDMARKS_FOUND = "NO_LANDMARKS_FOUND"

    # Hierarchy errors
    INVALID_FREQUENCY = "INVALID_FREQUENCY"
    DUPLICATE_POSITION = "DUPLICATE_POSITION"
    DUPLICATE_WEEK = "DUPLICATE_WEEK"
    DUPLICATE_DAY = "DUPLICATE_DAY"
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"

    # Objective errors
    UNKNOWN_ENTITY_TYPE = "UNKNOWN_ENTITY_TYPE"

    # Template errors
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    INCOMPATIBLE_STRUCTURE = "INCOMPATIBLE_STRUCTURE"

    # Data/Database errors
    DATABASE_ERROR = "DATABASE_ERROR"


class PeriodizationError(Exception):
    """
    Base exception for all periodization engine errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        status_code: HTTP status code for API responses
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors (400)
# ============================================================================

class ValidationError(PeriodizationError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=error_details,
        )


class InvalidMuscleGroupError(ValidationError):
    """Raised when a muscle group is not one of the enumerated groups."""

    def __init__(self, muscle_group: str, details: Optional[Dict[str, Any]] = None) -> None:
        error_details = details or {}
        error_details["muscle_group"] = muscle_group
        super().__init__(
            message=f"Unknown muscle group '{muscle_group}'",
            field="muscle_group",
            details=error_details,
        )
        self.code = ErrorCode.INVALID_MUSCLE_GROUP


class NegativeVolumeError(ValidationError):
    """Raised when a logged training volume is negative."""

    def __init__(self, volume: float, details: Optional[Dict[str, Any]] = None) -> None:
        error_details = details or {}
        error_details["volume"] = volume
        super().__init__(
            message=f"Training volume must be >= 0, got {volume}",
            field="volume",
            details=error_details,
        )
        self.code = ErrorCode.NEGATIVE_VOLUME


class InvalidLandmarksError(ValidationError):
    """Raised when landmarks violate 0 <= mev <= mav <= mrv."""

    def __init__(
        self,
        mev: float,
        mav: float,
        mrv: float,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details.update({"mev": mev, "mav": mav, "mrv": mrv})
        super().__init__(
            message=f"Landmarks must satisfy 0 <= mev <= mav <= mrv (got {mev}/{mav}/{mrv})",
            field="landmarks",
            details=error_details,
        )
        self.code = ErrorCode.INVALID_LANDMARKS


class InvalidFrequencyError(ValidationError):
    """Raised when a program's weekly training frequency is not positive."""

    def __init__(self, frequency: int, details: Optional[Dict[str, Any]] = None) -> None:
        error_details = details or {}
        error_details["frequency"] = frequency
        super().__init__(
            message=f"Training frequency must be > 0, got {frequency}",
            field="frequency",
            details=error_details,
        )
        self.code = ErrorCode.INVALID_FREQUENCY


class UnknownEntityTypeError(ValidationError):
    """Raised when an objective is associated to an unsupported entity type."""

    def __init__(
        self,
        entity_type: str,
        allowed: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details["entity_type"] = entity_type
        if allowed:
            error_details["allowed"] = allowed
        super().__init__(
            message=f"Unknown entity type '{entity_type}'",
            field="entity_type",
            details=error_details,
        )
        self.code = ErrorCode.UNKNOWN_ENTITY_TYPE


# ============================================================================
# Not Found Errors (404)
# ============================================================================

class NotFoundError(PeriodizationError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} with ID '{resource_id}' not found"
        error_details = details or {}
        error_details["entity_type"] = resource_type
        error_details["entity_id"] = resource_id
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            status_code=404,
            details=error_details,
        )


class EntityNotFoundError(NotFoundError):
    """Raised when a hierarchy node or objective does not resolve."""

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            resource_type=entity_type,
            resource_id=entity_id,
            details=details,
        )
        self.code = ErrorCode.ENTITY_NOT_FOUND


class LandmarkNotFoundError(NotFoundError):
    """Raised when a user has no landmark record for a muscle group."""

    def __init__(
        self,
        user_id: str,
        muscle_group: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details["user_id"] = user_id
        super().__init__(
            resource_type="VolumeLandmark",
            resource_id=muscle_group,
            details=error_details,
        )
        self.code = ErrorCode.LANDMARK_NOT_FOUND


class TemplateNotFoundError(NotFoundError):
    """Raised when a periodization template is not in the catalog."""

    def __init__(self, template_id: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            resource_type="PeriodizationTemplate",
            resource_id=template_id,
            details=details,
        )
        self.code = ErrorCode.TEMPLATE_NOT_FOUND


# ============================================================================
# Conflict Errors (409)
# ============================================================================

class ConflictError(PeriodizationError):
    """Raised when there's a resource conflict."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.CONFLICT,
            status_code=409,
            details=details,
        )


class AlreadySeededError(ConflictError):
    """Raised when default landmarks are seeded for a user who already has some."""

    def __init__(self, user_id: str, details: Optional[Dict[str, Any]] = None) -> None:
        error_details = details or {}
        error_details.update({"entity_type": "user", "entity_id": user_id, "user_id": user_id})
        super().__init__(
            message=f"Volume landmarks already exist for user '{user_id}'",
            details=error_details,
        )
        self.code = ErrorCode.ALREADY_SEEDED


class DuplicatePositionError(ConflictError):
    """Raised when a mesocycle position is already taken within a program."""

    def __init__(
        self,
        program_id: str,
        position: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details.update({"entity_type": "program", "entity_id": program_id, "position": position})
        super().__init__(
            message=f"Program '{program_id}' already has a mesocycle at position {position}",
            details=error_details,
        )
        self.code = ErrorCode.DUPLICATE_POSITION


class DuplicateWeekError(ConflictError):
    """Raised when a microcycle week number is already taken within a mesocycle."""

    def __init__(
        self,
        mesocycle_id: str,
        week_number: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details.update(
            {"entity_type": "mesocycle", "entity_id": mesocycle_id, "week_number": week_number}
        )
        super().__init__(
            message=f"Mesocycle '{mesocycle_id}' already has a microcycle for week {week_number}",
            details=error_details,
        )
        self.code = ErrorCode.DUPLICATE_WEEK


class DuplicateDayError(ConflictError):
    """Raised when a session day is already taken within a microcycle."""

    def __init__(
        self,
        microcycle_id: str,
        day_of_week: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details.update(
            {"entity_type": "microcycle", "entity_id": microcycle_id, "day_of_week": day_of_week}
        )
        super().__init__(
            message=f"Microcycle '{microcycle_id}' already has a session on day {day_of_week}",
            details=error_details,
        )
        self.code = ErrorCode.DUPLICATE_DAY


# ============================================================================
# State Errors (422)
# ============================================================================

class StateError(PeriodizationError):
    """Raised when an operation is attempted on an incompatible state."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.STATE_ERROR,
            status_code=422,
            details=details,
        )


class NoLandmarksFoundError(StateError):
    """Raised when planning for muscle groups that have no seeded landmarks."""

    def __init__(
        self,
        user_id: str,
        muscle_groups: List[str],
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details.update({
            "entity_type": "user",
            "entity_id": user_id,
            "user_id": user_id,
            "muscle_groups": muscle_groups,
        })
        super().__init__(
            message=(
                f"No volume landmarks for user '{user_id}': {', '.join(muscle_groups)}. "
                "Seed defaults first."
            ),
            details=error_details,
        )
        self.code = ErrorCode.NO_LANDMARKS_FOUND


class IncompatibleStructureError(StateError):
    """Raised when a template structure cannot be expanded into a program."""

    def __init__(
        self,
        template_id: str,
        reason: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        error_details.update({"entity_type": "template", "entity_id": template_id, "template_id": template_id})
        if field:
            error_details["field"] = field
        super().__init__(
            message=f"Template '{template_id}' has an incompatible structure: {reason}",
            details=error_details,
        )
        self.code = ErrorCode.INCOMPATIBLE_STRUCTURE


# ============================================================================
# Database Errors
# ============================================================================

class DatabaseError(PeriodizationError):
    """Raised when a database operation fails."""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if operation:
            error_details["operation"] = operation
        super().__init__(
            message=message,
            code=ErrorCode.DATABASE_ERROR,
            status_code=500,
            details=error_details,
        )
