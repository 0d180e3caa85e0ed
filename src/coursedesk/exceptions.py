"""CourseDesk exception hierarchy.

All CourseDesk-specific exceptions inherit from CourseDeskError.
"""


class CourseDeskError(Exception):
    """Base exception for all CourseDesk errors."""


class ConfigError(CourseDeskError):
    """Missing or invalid client configuration (e.g., no API URL or token)."""


class ContextError(CourseDeskError):
    """Raised when a (course, division) selection is not one of the assignments."""

    def __init__(self, course_id: str, division: str | None = None) -> None:
        self.course_id = course_id
        self.division = division
        if division is None:
            message = f"Unknown course: {course_id}"
        else:
            message = f"Division {division} is not assigned for course {course_id}"
        super().__init__(message)


class NoActiveContextError(CourseDeskError):
    """Raised when an operation needs a fully selected course and division."""

    def __init__(self) -> None:
        super().__init__(
            "No active session context. Select a course and division first."
        )


class MailValidationError(CourseDeskError):
    """Raised when a mail request fails local validation.

    Named MailValidationError (not ValidationError) to avoid
    collision with pydantic.ValidationError.
    """
