import pytest
import requests

from proctoring.client import ExamServiceClient
from proctoring.errors import ExamNotFoundError, ExamServiceError, SubmissionError


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.headers = {}
        self.calls = []
        self.responses = list(responses or [])
        self.error = error

    def request(self, method, url, timeout=None, json=None):
        self.calls.append((method, url, json, dict(self.headers)))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def test_get_public_exam_parses_questions() -> None:
    session = FakeSession(
        [
            FakeResponse(
                payload={
                    "id": "e1",
                    "title": "Physics",
                    "duration": 15,
                    "total_marks": 1,
                    "questions": [{"id": "q1", "text": "g?", "options": ["9.8", "3"]}],
                }
            )
        ]
    )
    client = ExamServiceClient("http://exam.test/", session=session)
    exam = client.get_public_exam("e1")

    assert session.calls[0][:2] == ("get", "http://exam.test/api/exam/public/e1")
    assert exam.title == "Physics"
    assert exam.duration_seconds == 900
    assert exam.questions[0].options == ("9.8", "3")


def test_get_public_exam_not_found() -> None:
    session = FakeSession([FakeResponse(404, {"detail": "Exam not found"})])
    client = ExamServiceClient("http://exam.test", session=session)
    with pytest.raises(ExamNotFoundError):
        client.get_public_exam("missing")


def test_record_attempt_sends_camel_case_payload() -> None:
    session = FakeSession([FakeResponse(payload={"attemptId": "a1", "score": 1, "total": 2})])
    client = ExamServiceClient("http://exam.test", session=session)
    result = client.record_attempt(
        "e1", "Ada", "s-1", {0: 1, 1: 0}, ["Right click attempt"], "Completed"
    )

    method, url, body, _ = session.calls[0]
    assert (method, url) == ("post", "http://exam.test/api/exam/submit")
    assert body == {
        "examId": "e1",
        "studentName": "Ada",
        "studentId": "s-1",
        "answers": {"0": 1, "1": 0},
        "violations": ["Right click attempt"],
        "status": "Completed",
    }
    assert (result.attempt_id, result.score, result.total) == ("a1", 1, 2)


def test_record_attempt_unreachable_raises_submission_error() -> None:
    session = FakeSession(error=requests.ConnectionError("refused"))
    client = ExamServiceClient("http://exam.test", session=session)
    with pytest.raises(SubmissionError):
        client.record_attempt("e1", "Ada", "s-1", {}, [], "Completed")


def test_record_attempt_server_error_raises_submission_error() -> None:
    session = FakeSession([FakeResponse(500, None, text="Internal Server Error")])
    client = ExamServiceClient("http://exam.test", session=session)
    with pytest.raises(SubmissionError) as excinfo:
        client.record_attempt("e1", "Ada", "s-1", {}, [], "Terminated")
    assert excinfo.value.status_code == 500


def test_login_stores_bearer_token_for_examiner_calls() -> None:
    session = FakeSession(
        [
            FakeResponse(payload={"access_token": "tok", "token_type": "bearer", "expires_in": 60}),
            FakeResponse(
                payload=[
                    {
                        "id": "a1",
                        "exam_id": "e1",
                        "student_name": "Ada",
                        "student_id": "s-1",
                        "answers": {"0": 1},
                        "score": 1,
                        "total": 1,
                        "status": "Completed",
                        "violations": [],
                        "submitted_at": "2026-01-01T10:00:00",
                    }
                ]
            ),
        ]
    )
    client = ExamServiceClient("http://exam.test", session=session)
    assert client.login("ada@example.com", "secret") == "tok"
    attempts = client.list_attempts("e1")

    assert session.calls[1][3]["Authorization"] == "Bearer tok"
    assert attempts[0].answers == {0: 1}
    assert attempts[0].total == 1


def test_error_detail_is_exposed() -> None:
    session = FakeSession([FakeResponse(401, {"detail": "Invalid credentials"})])
    client = ExamServiceClient("http://exam.test", session=session)
    with pytest.raises(ExamServiceError) as excinfo:
        client.login("ada@example.com", "wrong")
    assert str(excinfo.value) == "Invalid credentials"
    assert excinfo.value.status_code == 401
    assert client.token is None


def test_register_posts_examiner_details() -> None:
    session = FakeSession([FakeResponse(201, {"message": "Examiner registered"})])
    client = ExamServiceClient("http://exam.test", session=session)
    client.register("Ada", "ada@example.com", "secret")

    method, url, body, headers = session.calls[0]
    assert (method, url) == ("post", "http://exam.test/api/examiner/register")
    assert body == {"name": "Ada", "email": "ada@example.com", "password": "secret"}
    assert "Authorization" not in headers


def test_create_and_list_exams_use_examiner_token() -> None:
    questions = [{"text": "2+2?", "options": ["3", "4"], "correct": 1}]
    session = FakeSession(
        [
            FakeResponse(payload={"access_token": "tok", "token_type": "bearer", "expires_in": 60}),
            FakeResponse(201, {"examId": "e1"}),
            FakeResponse(
                payload=[
                    {
                        "id": "e1",
                        "title": "Maths",
                        "duration": 10,
                        "total_marks": 1,
                        "created_at": "2026-01-01T10:00:00",
                    }
                ]
            ),
        ]
    )
    client = ExamServiceClient("http://exam.test", session=session)
    client.login("ada@example.com", "secret")

    assert client.create_exam("Maths", 10, questions) == "e1"
    exams = client.list_exams()

    method, url, body, headers = session.calls[1]
    assert (method, url) == ("post", "http://exam.test/api/exam/create")
    assert body == {"title": "Maths", "duration": 10, "questions": questions}
    assert headers["Authorization"] == "Bearer tok"
    assert session.calls[2][:2] == ("get", "http://exam.test/api/exams")
    assert exams[0]["title"] == "Maths"


def test_logout_clears_token() -> None:
    session = FakeSession([FakeResponse(payload={"message": "Logged out"})])
    client = ExamServiceClient("http://exam.test", token="tok", session=session)
    client.logout()

    assert session.calls[0][:2] == ("post", "http://exam.test/api/examiner/logout")
    assert session.calls[0][3]["Authorization"] == "Bearer tok"
    assert client.token is None
    assert "Authorization" not in session.headers


def test_logout_without_token_skips_request() -> None:
    session = FakeSession()
    client = ExamServiceClient("http://exam.test", session=session)
    client.logout()
    assert session.calls == []


def test_logout_failure_still_clears_token() -> None:
    session = FakeSession([FakeResponse(401, {"detail": "Session expired"})])
    client = ExamServiceClient("http://exam.test", token="tok", session=session)
    with pytest.raises(ExamServiceError):
        client.logout()
    assert client.token is None
