"""Grading request assembly: user answers + parsed questions -> grading service payload."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from services.errors import IncompleteAnswers
from services.quiz_parser import Question
from utils.letter_utils import normalize_letter, upper_letter


def _missing_indices(answers: Mapping[int, str], question_count: int) -> list[int]:
    return [i for i in range(question_count) if i not in answers]


class UserAnswerSet(Mapping):
    """Zero-based question index -> chosen letter, filled as the user answers."""

    def __init__(self, answers: Mapping[int, str] | None = None) -> None:
        self._answers: dict[int, str] = {}
        for index, letter in (answers or {}).items():
            self.record(index, letter)

    def record(self, index: int, letter: str) -> None:
        """Store (or replace) the answer for question *index*."""
        index = int(index)
        if index < 0:
            raise ValueError(f"Question index must be non-negative: {index}")
        self._answers[index] = normalize_letter(letter)

    def missing(self, question_count: int) -> list[int]:
        return _missing_indices(self._answers, question_count)

    def is_complete(self, question_count: int) -> bool:
        return len(self._answers) == question_count and not self.missing(question_count)

    def __getitem__(self, index: int) -> str:
        return self._answers[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._answers)

    def __len__(self) -> int:
        return len(self._answers)

    def __repr__(self) -> str:
        return f"UserAnswerSet({self._answers!r})"


def build_grading_request(questions: list[Question], answers: Mapping[int, str]) -> list[dict[str, Any]]:
    """
    Build the ordered grading payload.

    Args:
        questions: Parsed questions, in quiz order.
        answers: Zero-based index -> letter; must cover every question.

    Returns:
        One {question, options, correctAnswer, userAnswer} dict per question,
        every letter uppercased.

    Raises:
        IncompleteAnswers: If the answers do not cover exactly the question indices.
    """
    missing = _missing_indices(answers, len(questions))
    if missing or len(answers) != len(questions):
        raise IncompleteAnswers(missing)

    request: list[dict[str, Any]] = []
    for index, question in enumerate(questions):
        request.append(
            {
                "question": question.stem,
                "options": {upper_letter(k): v for k, v in question.options.items()},
                "correctAnswer": upper_letter(question.correct_answer),
                "userAnswer": upper_letter(answers[index]),
            }
        )
    return request


def build_grading_body(request: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap the request list the way the grade endpoint expects it."""
    return {"questions": request}
