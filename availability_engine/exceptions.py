"""
Custom exceptions for availability and scheduling operations.

Every error carries a human-readable message and a retryable flag so
callers can surface a typed rejection instead of coercing bad input.
"""


class SchedulingError(Exception):
    """Base exception for availability and scheduling operations."""

    retryable: bool = False
    error_type: str = "scheduling_error"

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidTimeRange(SchedulingError):
    """
    A time window does not end after it starts.

    Causes:
    - Slot or date window with startTime >= endTime
    - Meeting with end <= start
    """

    error_type = "invalid_time_range"


class InvalidDateRange(SchedulingError):
    """
    Date input could not be used.

    Causes:
    - Malformed or unparseable date string
    - Range longer than the configured maximum
    """

    error_type = "invalid_date_range"


class InvalidMeetingRequest(SchedulingError):
    """
    Meeting request is missing required data.

    Causes:
    - Empty title
    - No invitees selected, or only the organizer
    - Missing start or end
    """

    error_type = "invalid_meeting_request"


class AvailabilityStorageError(SchedulingError):
    """
    The key-value store failed to read or write a record.

    Retryable: the engine never issues partial writes, so repeating the
    whole operation is safe.
    """

    retryable = True
    error_type = "storage_error"
