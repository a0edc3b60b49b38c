"""
Host wiring for one proctored exam.

ExamRunner owns the session, the monitor registration and the countdown for
as long as the exam view is active. Every entry point (user actions, monitor
callbacks, countdown ticks) goes through one lock, so the session only ever
sees one event at a time.
"""

from __future__ import annotations

import logging
import threading

from proctoring.countdown import Countdown
from proctoring.environment import SignalSource
from proctoring.models import FinalizedSession, PublicExamView, StudentIdentity
from proctoring.monitor import StopMonitoring, ViolationMonitor
from proctoring.session import ExamSession, SessionSnapshot
from proctoring.submission import AttemptRecorder, SubmissionOutcome, submit_attempt

logger = logging.getLogger(__name__)


class ExamRunner:
    """Runs a timed, monitored exam session and submits it once it ends."""

    def __init__(
        self,
        exam: PublicExamView,
        student: StudentIdentity,
        recorder: AttemptRecorder,
        source: SignalSource,
        *,
        duration_seconds: int | None = None,
        tick_interval: float = 1.0,
        background_submit: bool = True,
    ) -> None:
        self.exam = exam
        self.student = student
        self._recorder = recorder
        self._monitor = ViolationMonitor(source)
        self._duration_seconds = (
            duration_seconds if duration_seconds is not None else exam.duration_seconds
        )
        self._background_submit = background_submit
        self._lock = threading.RLock()
        self._countdown = Countdown(self.tick, tick_interval)
        self._stop_monitoring: StopMonitoring | None = None
        self._session: ExamSession | None = None
        self._outcome: SubmissionOutcome | None = None
        self._outcome_ready = threading.Event()
        self._submit_thread: threading.Thread | None = None
        self._closed = False

    def __enter__(self) -> ExamRunner:
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def session(self) -> ExamSession:
        if self._session is None:
            raise RuntimeError("Exam has not been started")
        return self._session

    @property
    def monitoring(self) -> bool:
        return self._stop_monitoring is not None

    @property
    def countdown(self) -> Countdown:
        return self._countdown

    @property
    def outcome(self) -> SubmissionOutcome | None:
        return self._outcome

    def begin(self) -> SessionSnapshot:
        """Start the session, the monitor and the countdown."""
        with self._lock:
            if self._session is not None:
                raise RuntimeError("Exam already started")
            if self._closed:
                raise RuntimeError("Exam runner is closed")
            self._session = ExamSession.start(
                self.exam, self._duration_seconds, on_finalize=self._handle_finalize
            )
            self._stop_monitoring = self._monitor.start_monitoring(self.record_violation)
            self._monitor.enter_fullscreen_mode()
            self._countdown.start()
            return self._session.snapshot()

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self.session.snapshot()

    def select_answer(self, question_index: int, option_index: int) -> bool:
        return self._dispatch("select_answer", question_index, option_index)

    def navigate(self, to_index: int) -> bool:
        return self._dispatch("navigate", to_index)

    def next_question(self) -> bool:
        return self._dispatch("next_question")

    def previous_question(self) -> bool:
        return self._dispatch("previous_question")

    def submit(self) -> bool:
        return self._dispatch("submit")

    def record_violation(self, tag: str) -> bool:
        return self._dispatch("record_violation", tag)

    def tick(self) -> bool:
        return self._dispatch("tick")

    def wait_for_outcome(self, timeout: float | None = None) -> SubmissionOutcome | None:
        """Block until the submission outcome is known or the timeout passes."""
        self._outcome_ready.wait(timeout)
        return self._outcome

    def close(self, timeout: float | None = 2.0) -> None:
        """Leave the exam view. Releases the countdown and all listeners."""
        with self._lock:
            self._closed = True
            self._release()
            if self._session is not None and self._session.is_active:
                logger.info("Exam %s left while in progress; nothing submitted", self.exam.id)
        self._countdown.join(timeout)

    def _dispatch(self, operation: str, *args: object) -> bool:
        # Events that arrive after the view was left are dropped.
        with self._lock:
            if self._session is None or self._closed:
                return False
            return getattr(self._session, operation)(*args)

    def _release(self) -> None:
        self._countdown.cancel()
        if self._stop_monitoring is not None:
            stop, self._stop_monitoring = self._stop_monitoring, None
            stop()

    def _handle_finalize(self, finalized: FinalizedSession) -> None:
        self._release()
        if self._background_submit:
            # The countdown thread must not wait on the network.
            self._submit_thread = threading.Thread(
                target=self._submit,
                args=(finalized,),
                name="exam_submission",
                daemon=True,
            )
            self._submit_thread.start()
        else:
            self._submit(finalized)

    def _submit(self, finalized: FinalizedSession) -> None:
        self._outcome = submit_attempt(self._recorder, self.student, finalized)
        self._outcome_ready.set()
