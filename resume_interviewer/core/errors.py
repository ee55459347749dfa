"""
Error taxonomy for the Resume Interviewer platform.

Every domain error carries the HTTP status the API layer answers with, so the
server can translate any of them with a single exception handler.
"""


class InterviewError(Exception):
    """Base class for all Resume Interviewer errors."""

    http_status = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message or self.__class__.__name__


class ValidationError(InterviewError):
    """A required request field is missing or invalid."""

    http_status = 400


class NotFound(InterviewError):
    """Unknown session or question."""

    http_status = 404


class StorageUnavailable(InterviewError):
    """The session store medium cannot be reached, read or written."""

    http_status = 503


class ServiceUnavailable(InterviewError):
    """The external generation service failed or could not be reached."""

    http_status = 502


class ServiceResponseMalformed(InterviewError):
    """The external generation service answered without usable text."""

    http_status = 502


class QuestionGenerationFailed(InterviewError):
    """Questions could not be produced from the resume."""

    http_status = 502


class EvaluationFailed(InterviewError):
    """The final score and summary could not be produced."""

    http_status = 502
