# TaskTime - Errors
# Typed error taxonomy for the time-tracking core

from typing import Optional


class TimeTrackingError(Exception):
    """Base class for all time-tracking errors."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(TimeTrackingError):
    """Malformed or logically inconsistent request data."""

    kind = "invalid_input"
    status_code = 400


class InvalidRangeError(InvalidInputError):
    """An end instant that falls before its start instant."""
    pass


class NotFoundError(TimeTrackingError):
    """A referenced or targeted entity does not exist."""

    kind = "not_found"
    status_code = 404

    def __init__(self, entity: str, identifier: Optional[str] = None):
        self.entity = entity
        self.identifier = identifier
        if identifier is None:
            message = f"{entity.capitalize()} not found"
        else:
            message = f"{entity.capitalize()} with ID {identifier} does not exist"
        super().__init__(message)


class ConflictError(TimeTrackingError):
    """An operation would violate the single-active-session invariant."""

    kind = "conflict"
    status_code = 409


class InternalError(TimeTrackingError):
    """Storage or transport failure."""

    kind = "internal"
    status_code = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Failed to {operation}")
