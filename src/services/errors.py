"""Error types raised by the quiz parsing and grading services."""

from __future__ import annotations

from config import (
    GRADING_FAILURE_MESSAGE,
    INCOMPLETE_ANSWERS_MESSAGE,
    LESSON_FAILURE_MESSAGE,
    PARSE_FAILURE_MESSAGE,
)


class QuizCoreError(ValueError):
    """Base class; the message is safe to show to the user."""


class ParseFailure(QuizCoreError):
    """Quiz text could not be decomposed into questions."""

    def __init__(self, message: str = PARSE_FAILURE_MESSAGE) -> None:
        super().__init__(message)


class IncompleteAnswers(QuizCoreError):
    """Grading was requested before every question had an answer."""

    def __init__(self, missing: list[int], message: str = INCOMPLETE_ANSWERS_MESSAGE) -> None:
        super().__init__(message)
        self.missing = list(missing)


class ApiTransportFailure(QuizCoreError):
    """HTTP call failed or returned a non-success status (retryable)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LessonFetchFailure(ApiTransportFailure):
    def __init__(self, status_code: int | None = None) -> None:
        suffix = f" ({status_code})" if status_code is not None else ""
        super().__init__(f"{LESSON_FAILURE_MESSAGE}{suffix}", status_code)


class GradingTransportFailure(ApiTransportFailure):
    def __init__(self, status_code: int | None = None, message: str = GRADING_FAILURE_MESSAGE) -> None:
        super().__init__(message, status_code)
