from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DomainError"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "ValidationError"


class InvalidDateError(ValidationError):
    """Raised when a calendar date is malformed or unparseable."""

    code = "InvalidDate"


class InvalidWeekdayError(ValidationError):
    code = "InvalidWeekday"


class MissingFieldError(ValidationError):
    code = "MissingField"

    def __init__(self, field_name: str, message: str | None = None):
        super().__init__(message or f"Missing required field: {field_name}")
        self.field_name = field_name


class InvalidTimeWindowError(ValidationError):
    """Raised when a lesson's start time does not precede its end time."""

    code = "InvalidTimeWindow"


class InvalidSubjectError(ValidationError):
    """Raised when an attendance names both or neither of student/teacher."""

    code = "InvalidSubject"


class DayMismatchError(ValidationError):
    """Raised when the attendance date does not fall on one of the lesson's weekdays."""

    code = "DayMismatch"


class DuplicateAttendanceError(ValidationError):
    code = "DuplicateAttendance"


class MismatchedLessonError(ValidationError):
    code = "MismatchedLesson"


class NotFoundError(ValidationError):
    code = "NotFound"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "Forbidden"


class StorageError(DomainError):
    """Opaque storage-boundary failure (connection loss, unclassified constraint)."""

    code = "InternalError"
