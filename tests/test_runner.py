import threading
import time

import pytest

from proctoring.environment import InMemorySignalSource
from proctoring.errors import SubmissionError
from proctoring.models import (
    AttemptResult,
    PublicExamView,
    PublicQuestion,
    SessionStatus,
    StudentIdentity,
)
from proctoring.runner import ExamRunner

STUDENT = StudentIdentity(name="Ada", student_id="s-1")


def _exam() -> PublicExamView:
    return PublicExamView(
        id="exam-1",
        title="Algebra",
        duration=1,
        questions=(
            PublicQuestion(text="2+2", options=("3", "4")),
            PublicQuestion(text="3*3", options=("9", "6")),
        ),
    )


class FakeRecorder:
    def __init__(self, correct: list[int] | None = None, error: Exception | None = None):
        self.correct = correct or [1, 0]
        self.error = error
        self.calls: list[dict[str, object]] = []

    def record_attempt(self, exam_id, student_name, student_id, answers, violations, status):
        self.calls.append(
            {
                "exam_id": exam_id,
                "student_name": student_name,
                "student_id": student_id,
                "answers": dict(answers),
                "violations": list(violations),
                "status": status,
            }
        )
        if self.error is not None:
            raise self.error
        score = sum(1 for i, c in enumerate(self.correct) if answers.get(i) == c)
        return AttemptResult(attempt_id=f"a-{len(self.calls)}", score=score, total=len(self.correct))


def _runner(recorder: FakeRecorder, source: InMemorySignalSource, **kwargs) -> ExamRunner:
    kwargs.setdefault("tick_interval", 3600)
    kwargs.setdefault("background_submit", False)
    return ExamRunner(_exam(), STUDENT, recorder, source, **kwargs)


def test_submit_records_attempt_and_releases_resources() -> None:
    recorder = FakeRecorder()
    source = InMemorySignalSource()
    runner = _runner(recorder, source)
    runner.begin()
    assert source.fullscreen_active is True
    assert source.listener_count() == 4

    runner.select_answer(0, 1)
    runner.next_question()
    runner.select_answer(1, 1)
    runner.submit()

    outcome = runner.wait_for_outcome(timeout=1)
    assert outcome is not None and outcome.ok
    assert outcome.result.score == 1
    assert outcome.session.status is SessionStatus.COMPLETED
    assert recorder.calls == [
        {
            "exam_id": "exam-1",
            "student_name": "Ada",
            "student_id": "s-1",
            "answers": {0: 1, 1: 1},
            "violations": [],
            "status": "Completed",
        }
    ]
    assert source.listener_count() == 0
    assert runner.countdown.cancelled
    runner.close()


def test_monitor_signals_terminate_session() -> None:
    recorder = FakeRecorder()
    source = InMemorySignalSource()
    runner = _runner(recorder, source)
    runner.begin()

    source.switch_tab()
    source.right_click()
    assert runner.snapshot().status is SessionStatus.IN_PROGRESS
    source.exit_fullscreen()

    assert runner.session.status is SessionStatus.TERMINATED
    assert recorder.calls[0]["status"] == "Terminated"
    assert recorder.calls[0]["violations"] == [
        "Tab switch detected",
        "Right click attempt",
        "Exited fullscreen",
    ]
    assert source.listener_count() == 0

    # Late signals after termination reach nobody.
    source.switch_tab()
    assert len(runner.session.violations) == 3
    runner.close()


def test_timer_expiry_submits_completed() -> None:
    recorder = FakeRecorder()
    source = InMemorySignalSource()
    runner = _runner(recorder, source, duration_seconds=2)
    runner.begin()

    runner.tick()
    assert recorder.calls == []
    runner.tick()

    assert runner.session.time_remaining == 0
    assert [call["status"] for call in recorder.calls] == ["Completed"]
    # Racing termination after expiry changes nothing.
    assert runner.record_violation("Exited fullscreen") is False
    assert len(recorder.calls) == 1
    runner.close()


def test_submission_failure_is_reported() -> None:
    recorder = FakeRecorder(error=SubmissionError("service unreachable"))
    source = InMemorySignalSource()
    runner = _runner(recorder, source)
    runner.begin()
    runner.submit()

    outcome = runner.wait_for_outcome(timeout=1)
    assert outcome is not None
    assert outcome.ok is False
    assert "service unreachable" in outcome.error
    assert runner.session.status is SessionStatus.COMPLETED
    runner.close()


def test_close_while_in_progress_releases_everything() -> None:
    recorder = FakeRecorder()
    source = InMemorySignalSource()
    with _runner(recorder, source) as runner:
        assert runner.monitoring
    assert source.listener_count() == 0
    assert runner.countdown.cancelled
    assert runner.monitoring is False
    assert recorder.calls == []
    assert runner.tick() is False
    assert runner.session.is_active
    assert runner.outcome is None
    with pytest.raises(RuntimeError):
        runner.begin()


def test_unsupported_fullscreen_does_not_stop_exam() -> None:
    source = InMemorySignalSource(fullscreen_supported=False)
    runner = _runner(FakeRecorder(), source)
    snapshot = runner.begin()
    assert snapshot.status is SessionStatus.IN_PROGRESS
    assert snapshot.violations == ()
    runner.close()


def test_countdown_thread_drives_expiry_and_submits_in_background() -> None:
    recorder = FakeRecorder()
    source = InMemorySignalSource()
    runner = _runner(
        recorder, source, duration_seconds=2, tick_interval=0.01, background_submit=True
    )
    runner.begin()

    outcome = runner.wait_for_outcome(timeout=5)
    assert outcome is not None and outcome.ok
    assert outcome.session.status is SessionStatus.COMPLETED
    assert outcome.session.time_remaining == 0
    runner.close()
    assert len(recorder.calls) == 1


def test_expiry_and_termination_from_two_threads_submit_once() -> None:
    recorder = FakeRecorder()
    source = InMemorySignalSource()
    runner = _runner(recorder, source, duration_seconds=1)
    runner.begin()
    runner.record_violation("Tab switch detected")

    start = threading.Event()

    def expire() -> None:
        start.wait()
        runner.tick()

    def terminate() -> None:
        start.wait()
        runner.record_violation("Exited fullscreen")

    threads = [threading.Thread(target=expire), threading.Thread(target=terminate)]
    for thread in threads:
        thread.start()
    start.set()
    for thread in threads:
        thread.join(timeout=5)

    assert len(recorder.calls) == 1
    assert recorder.calls[0]["status"] == runner.session.status.value
    runner.close()


def test_cancelled_countdown_stops_ticking() -> None:
    source = InMemorySignalSource()
    runner = _runner(FakeRecorder(), source, duration_seconds=600, tick_interval=0.01)
    runner.begin()
    time.sleep(0.2)
    runner.close()
    remaining = runner.session.time_remaining
    time.sleep(0.05)
    assert runner.session.time_remaining == remaining
    assert remaining < 600
