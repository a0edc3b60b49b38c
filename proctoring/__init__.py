"""Proctoring and session-integrity core."""
from proctoring.environment import (
    InMemorySignalSource,
    SignalEvent,
    SignalSource,
    TerminalSignalSource,
)
from proctoring.errors import (
    ExamNotFoundError,
    ExamServiceError,
    FullscreenUnavailable,
    InvalidSessionError,
    ProctoringError,
    SubmissionError,
)
from proctoring.grading import grade_answers, normalize_answers
from proctoring.models import (
    AttemptRecord,
    AttemptResult,
    FinalizedSession,
    PublicExamView,
    PublicQuestion,
    SessionStatus,
    StudentIdentity,
)
from proctoring.monitor import (
    EXITED_FULLSCREEN,
    RIGHT_CLICK,
    TAB_SWITCH,
    ViolationMonitor,
)
from proctoring.policy import (
    TERMINATION_THRESHOLD,
    ViolationTally,
    should_terminate,
    violation_score,
    violation_weight,
)
from proctoring.runner import ExamRunner
from proctoring.session import ExamSession, SessionSnapshot
from proctoring.submission import AttemptRecorder, SubmissionOutcome, submit_attempt

__all__ = [
    "AttemptRecord",
    "AttemptRecorder",
    "AttemptResult",
    "EXITED_FULLSCREEN",
    "ExamNotFoundError",
    "ExamRunner",
    "ExamServiceError",
    "ExamSession",
    "FinalizedSession",
    "FullscreenUnavailable",
    "InMemorySignalSource",
    "InvalidSessionError",
    "ProctoringError",
    "PublicExamView",
    "PublicQuestion",
    "RIGHT_CLICK",
    "SessionSnapshot",
    "SessionStatus",
    "SignalEvent",
    "SignalSource",
    "StudentIdentity",
    "SubmissionError",
    "TerminalSignalSource",
    "SubmissionOutcome",
    "TAB_SWITCH",
    "TERMINATION_THRESHOLD",
    "ViolationMonitor",
    "ViolationTally",
    "grade_answers",
    "normalize_answers",
    "should_terminate",
    "submit_attempt",
    "violation_score",
    "violation_weight",
]
