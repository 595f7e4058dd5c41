"""Minimal stability self-check for quiz parsing and grading request assembly."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from services.errors import IncompleteAnswers
from services.grading_request import UserAnswerSet, build_grading_request
from services.quiz_parser import find_quiz_issues, parse_quiz

SAMPLE_QUIZ = """1. What is 2+2?
A) 3
B) 4
C) 5
D) 6
Answer: B

2. Which planet is largest?
A) Mars
B) Jupiter (correct)
C) Venus
D) Earth

3. What colour is the sky?
A) Green
B) Red
C) Blue
D) Yellow

Answers: 1. A 2. C 3. C
"""


def check_parse_deterministic() -> None:
    first = parse_quiz(SAMPLE_QUIZ)
    second = parse_quiz(SAMPLE_QUIZ)
    assert first == second, "parse_quiz not deterministic"
    assert len(first) == 3, f"expected 3 questions, got {len(first)}"


def check_precedence() -> None:
    questions = parse_quiz(SAMPLE_QUIZ)
    got = [q.correct_answer for q in questions]
    assert got == ["B", "B", "C"], f"unexpected resolution order: {got}"


def check_default_fallback() -> None:
    questions = parse_quiz("1. A question without options")
    assert questions[0].options == {}
    assert questions[0].correct_answer == "A"
    issues = {item["issue"] for item in find_quiz_issues(questions)}
    assert issues == {"no_options", "defaulted_answer"}, f"unexpected issues: {issues}"


def check_grading_request() -> None:
    questions = parse_quiz(SAMPLE_QUIZ)
    answers = UserAnswerSet({0: "b"})
    try:
        build_grading_request(questions, answers)
    except IncompleteAnswers as e:
        assert e.missing == [1, 2], f"unexpected missing indices: {e.missing}"
    else:
        raise AssertionError("incomplete answers were accepted")
    answers.record(1, "a")
    answers.record(2, "c")
    request = build_grading_request(questions, answers)
    assert [item["userAnswer"] for item in request] == ["B", "A", "C"]


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    check_parse_deterministic()
    check_precedence()
    check_default_fallback()
    check_grading_request()
    print("self-check ok")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
