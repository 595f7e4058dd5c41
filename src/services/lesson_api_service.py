"""
Lesson API client: load a lesson's quiz and submit answers for grading.

The client never handles tokens itself; it is handed a request function that
already attaches credentials (see build_authenticated_request).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import requests

from config import API_BASE_URL, GRADE_QUIZ_PATH, LESSON_PATH, NO_TOKEN_MESSAGE, REQUEST_TIMEOUT_S
from services.errors import GradingTransportFailure, LessonFetchFailure
from services.grading_request import build_grading_body, build_grading_request
from services.quiz_parser import Question, parse_quiz

LOGGER = logging.getLogger("lesson_quiz.api")

RequestFn = Callable[..., requests.Response]


@dataclass
class QuestionResult:
    question: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    explanation: str = ""


@dataclass
class GradingResult:
    """Grading service response, normalized to neutral defaults where fields are missing."""

    score: int = 0
    total_questions: int = 0
    percentage: float = 0.0
    feedback: str = ""
    question_results: list[QuestionResult] = field(default_factory=list)


def _safe_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _normalize_result(obj: Any) -> GradingResult:
    """Map the grading response onto GradingResult; never raises."""
    if not isinstance(obj, dict):
        return GradingResult()
    raw_results = obj.get("questionResults")
    if not isinstance(raw_results, list):
        raw_results = []
    results: list[QuestionResult] = []
    for item in raw_results:
        if not isinstance(item, dict):
            continue
        results.append(
            QuestionResult(
                question=str(item.get("question") or ""),
                user_answer=str(item.get("userAnswer") or ""),
                correct_answer=str(item.get("correctAnswer") or ""),
                is_correct=bool(item.get("isCorrect")),
                explanation=str(item.get("explanation") or ""),
            )
        )
    return GradingResult(
        score=_safe_int(obj.get("score")),
        total_questions=_safe_int(obj.get("totalQuestions"), len(results)),
        percentage=_safe_float(obj.get("percentage")),
        feedback=str(obj.get("feedback") or ""),
        question_results=results,
    )


def build_authenticated_request(access_token: str, session: requests.Session) -> RequestFn:
    """
    Create a request function that sends a bearer token with every call.

    Args:
        access_token: Current access token.
        session: Session to send through. The caller owns it and closes it,
            e.g. `with requests.Session() as session: ...`.

    Returns:
        Callable with the signature of requests.Session.request.

    Raises:
        ValueError: If no access token is given.
    """
    if not (access_token and access_token.strip()):
        raise ValueError(NO_TOKEN_MESSAGE)
    token = access_token.strip()

    def request(method: str, url: str, **kwargs: Any) -> requests.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {token}"
        return session.request(method, url, headers=headers, **kwargs)

    return request


class LessonApiClient:
    """Fetches lesson quizzes and submits them to the grading endpoint."""

    def __init__(
        self,
        request_fn: RequestFn,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT_S,
    ) -> None:
        self._request = request_fn
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path_template: str, lesson_id: int | str) -> str:
        return self.base_url + path_template.format(lesson_id=lesson_id)

    def fetch_lesson(self, lesson_id: int | str) -> dict[str, Any]:
        """
        Load one lesson record.

        Raises:
            LessonFetchFailure: On network error, non-success status or a non-JSON body.
        """
        url = self._url(LESSON_PATH, lesson_id)
        try:
            response = self._request(
                "GET",
                url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            LOGGER.warning("lesson.fetch(id=%s) failed: %s", lesson_id, e)
            raise LessonFetchFailure() from e
        if not response.ok:
            LOGGER.warning("lesson.fetch(id=%s) status=%s", lesson_id, response.status_code)
            raise LessonFetchFailure(response.status_code)
        try:
            data = response.json()
        except ValueError as e:
            raise LessonFetchFailure(response.status_code) from e
        if not isinstance(data, dict):
            raise LessonFetchFailure(response.status_code)
        return data

    def load_quiz(self, lesson_id: int | str) -> list[Question]:
        """
        Fetch a lesson and parse its quiz text.

        Returns:
            Parsed questions; [] when the lesson carries no quiz.

        Raises:
            LessonFetchFailure: If the lesson cannot be loaded.
            ParseFailure: If the quiz text cannot be parsed.
        """
        lesson = self.fetch_lesson(lesson_id)
        quiz_text = lesson.get("quiz")
        if not isinstance(quiz_text, str) or not quiz_text.strip():
            LOGGER.info("lesson.quiz(id=%s) has no quiz", lesson_id)
            return []
        return parse_quiz(quiz_text)

    def grade_quiz(
        self,
        lesson_id: int | str,
        questions: list[Question],
        answers: Mapping[int, str],
    ) -> GradingResult:
        """
        Submit answers for grading.

        The request is built before any I/O, so an incomplete answer set
        never reaches the network.

        Raises:
            IncompleteAnswers: If not every question has an answer.
            GradingTransportFailure: On network error, non-success status or a non-JSON body.
        """
        body = build_grading_body(build_grading_request(questions, answers))
        url = self._url(GRADE_QUIZ_PATH, lesson_id)
        LOGGER.info("quiz.grade(id=%s,questions=%s)", lesson_id, len(questions))
        try:
            response = self._request(
                "POST",
                url,
                headers={"Content-Type": "application/json"},
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            LOGGER.warning("quiz.grade(id=%s) failed: %s", lesson_id, e)
            raise GradingTransportFailure() from e
        if not response.ok:
            LOGGER.warning("quiz.grade(id=%s) status=%s", lesson_id, response.status_code)
            raise GradingTransportFailure(response.status_code)
        try:
            payload = response.json()
        except ValueError as e:
            raise GradingTransportFailure(response.status_code) from e
        return _normalize_result(payload)
