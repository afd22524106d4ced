"""
Custom exception classes for the availability core.
Provides specific error types instead of generic exceptions.
"""


class AvailabilityError(Exception):
    """Base exception for availability computations."""

    pass


class ValidationError(AvailabilityError):
    """Raised when input validation fails."""

    pass


class ScheduleValidationError(ValidationError):
    """Raised when a weekly schedule row holds an unusable time string."""

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid schedule {field} {value!r}: {reason}")


class InvalidDurationError(ValidationError):
    """Raised when a service duration or slot interval is not positive."""

    pass


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass
