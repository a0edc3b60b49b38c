"""Exception types raised by the proctoring core and its service client."""


class ProctoringError(Exception):
    """Base class for proctoring errors."""


class InvalidSessionError(ProctoringError):
    """Raised when a session cannot be started for the given exam."""


class ExamNotFoundError(ProctoringError):
    """Raised when the exam service does not know the requested exam."""

    def __init__(self, exam_id: str) -> None:
        super().__init__(f"Exam not found: {exam_id}")
        self.exam_id = exam_id


class ExamServiceError(ProctoringError):
    """Raised when the exam service is unreachable or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SubmissionError(ExamServiceError):
    """Raised when an attempt could not be durably recorded."""


class FullscreenUnavailable(ProctoringError):
    """Raised by a signal source that cannot enter fullscreen mode."""
