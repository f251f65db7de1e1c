"""
Domain errors for workload planning.

Each error carries a type discriminator so the API layer can map it to a
status code without inspecting messages.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    """Error type enumeration."""

    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    INVALID_INPUT = "invalid_input"


class WorkloadPlanningError(Exception):
    """Base class for all workload planning errors."""

    def __init__(self,
                 message: str,
                 error_type: ErrorType,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            'type': self.error_type.value,
            'message': self.message,
            'details': self.details,
        }


class NotFoundError(WorkloadPlanningError):
    """Raised when a forecast or plan identifier is unknown."""

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"{entity} not found: {identifier}",
            ErrorType.NOT_FOUND,
            {'entity': entity, 'id': identifier},
        )


class InvalidTransitionError(WorkloadPlanningError):
    """Raised when a plan status change is not allowed from its current status."""

    def __init__(self, current_status: str, action: str, message: str):
        self.current_status = current_status
        self.action = action
        super().__init__(
            message,
            ErrorType.INVALID_TRANSITION,
            {'current_status': current_status, 'action': action},
        )


class InvalidInputError(WorkloadPlanningError):
    """Raised when an argument is rejected before any mutation happens."""

    def __init__(self, field_name: str, value: Any, message: str):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Invalid value for '{field_name}': {message}",
            ErrorType.INVALID_INPUT,
            {'field': field_name, 'value': str(value) if value is not None else None},
        )
