"""HTTP client for the exam service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import requests

from proctoring.config import EXAM_SERVER_URL, REQUEST_TIMEOUT_SECONDS
from proctoring.errors import ExamNotFoundError, ExamServiceError, SubmissionError
from proctoring.models import AttemptRecord, AttemptResult, PublicExamView

log = logging.getLogger(__name__)


class ExamServiceClient:
    """
    Talks to the exam service over JSON/HTTP.

    Student calls (get_public_exam, record_attempt) need no token. Examiner
    calls need a token from login().
    """

    def __init__(
        self,
        base_url: str = EXAM_SERVER_URL,
        token: str | None = None,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.token = token

    @property
    def token(self) -> str | None:
        return self._token

    @token.setter
    def token(self, value: str | None) -> None:
        self._token = value
        if value:
            self.session.headers.update({"Authorization": f"Bearer {value}"})
        else:
            self.session.headers.pop("Authorization", None)

    def register(self, name: str, email: str, password: str) -> None:
        self._request(
            "post",
            "/api/examiner/register",
            json={"name": name, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> str:
        """Log in as an examiner and keep the token for later calls."""
        data = self._request(
            "post", "/api/examiner/login", json={"email": email, "password": password}
        )
        self.token = data["access_token"]
        return self.token

    def logout(self) -> None:
        if not self.token:
            return
        try:
            self._request("post", "/api/examiner/logout")
        finally:
            self.token = None

    def create_exam(
        self, title: str, duration: int, questions: Sequence[Mapping[str, Any]]
    ) -> str:
        data = self._request(
            "post",
            "/api/exam/create",
            json={"title": title, "duration": duration, "questions": list(questions)},
        )
        return str(data["examId"])

    def list_exams(self) -> list[dict[str, Any]]:
        return self._request("get", "/api/exams")

    def get_public_exam(self, exam_id: str) -> PublicExamView:
        """Fetch the student view of an exam.

        Raises:
            ExamNotFoundError: if the service does not know the exam.
        """
        try:
            data = self._request("get", f"/api/exam/public/{exam_id}")
        except ExamServiceError as exc:
            if exc.status_code == 404:
                raise ExamNotFoundError(exam_id) from exc
            raise
        return PublicExamView.from_dict(data)

    def record_attempt(
        self,
        exam_id: str,
        student_name: str,
        student_id: str,
        answers: Mapping[int, int],
        violations: Sequence[str],
        status: str,
    ) -> AttemptResult:
        """Submit a finished session. The service grades it.

        Raises:
            SubmissionError: if the attempt was not recorded.
        """
        payload = {
            "examId": exam_id,
            "studentName": student_name,
            "studentId": student_id,
            "answers": {str(index): option for index, option in answers.items()},
            "violations": list(violations),
            "status": status,
        }
        try:
            data = self._request("post", "/api/exam/submit", json=payload)
        except ExamServiceError as exc:
            raise SubmissionError(str(exc), exc.status_code) from exc
        return AttemptResult.from_dict(data)

    def list_attempts(self, exam_id: str) -> list[AttemptRecord]:
        data = self._request("get", f"/api/exam/{exam_id}/results")
        return [AttemptRecord.from_dict(item) for item in data]

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            log.warning("Exam service unreachable (%s %s): %s", method.upper(), path, exc)
            raise ExamServiceError(f"Exam service unreachable: {exc}") from exc

        if response.status_code >= 400:
            detail = _error_detail(response)
            log.warning("%s %s failed with %s: %s", method.upper(), path, response.status_code, detail)
            raise ExamServiceError(detail, response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise ExamServiceError(f"Invalid response from {path}") from exc


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return f"HTTP {response.status_code}"
