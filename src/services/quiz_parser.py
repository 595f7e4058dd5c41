"""
Quiz logic: turn the semi-structured quiz text of a lesson into gradable questions.

Accepted shape (numbering, option separators and markers are all lenient):

    1. What is 2+2?
    A) 3
    B) 4 (correct)
    C) 5
    D) 6

    Question 2: Which planet is largest?
    A. Mars
    B. Jupiter
    Answer: B

    Answers: 1. B 2. B
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from config import DEFAULT_CORRECT_ANSWER
from services.errors import ParseFailure
from utils.letter_utils import upper_letter

LOGGER = logging.getLogger("lesson_quiz.parser")

SOURCE_INLINE = "inline"
SOURCE_ANSWER_KEY = "answer_key"
SOURCE_DEFAULT = "default"

_ANSWER_KEY_RE = re.compile(r"answers?:\s*((?:\d+\s*[.\-]?\s*[A-D]\s*)+)", re.IGNORECASE)
_ANSWER_PAIR_RE = re.compile(r"(\d+)\s*[.\-]?\s*([A-D])", re.IGNORECASE)

_BLOCK_BOUNDARY_RE = re.compile(r"\n(?=\d+\.\s|question\s*\d+)", re.IGNORECASE)
_BLOCK_START_RE = re.compile(r"^(?:\d+\.|question\s*\d+)", re.IGNORECASE)

_QUESTION_PREFIX_RE = re.compile(r"^question\s*\d+\s*[:.\-]?\s*", re.IGNORECASE)
_NUMBER_PREFIX_RE = re.compile(r"^\d+\.\s*")

_OPTION_RE = re.compile(r"^([A-D])[).\-:]\s+(.+)$")
_CORRECT_TAG_RE = re.compile(r"\b(correct|answer)\b", re.IGNORECASE)
_EXPLICIT_ANSWER_RE = re.compile(r"(correct answer|answer)\s*[:\-]\s*([A-D])", re.IGNORECASE)
_BRACKETED_TAG_RE = re.compile(
    r"[(\[{]\s*(?:correct|answer)(?:\s+(?:correct|answer))?\s*[)\]}]", re.IGNORECASE
)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Question:
    """One quiz item. `options` keeps source order; `correct_answer` is always set."""

    stem: str
    options: Mapping[str, str] = field(default_factory=dict)
    correct_answer: str = DEFAULT_CORRECT_ANSWER
    answer_source: str = SOURCE_DEFAULT

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def __hash__(self) -> int:
        return hash((self.stem, tuple(self.options.items()), self.correct_answer, self.answer_source))

    @property
    def is_answerable(self) -> bool:
        return bool(self.options)

    @property
    def has_consistent_answer(self) -> bool:
        return self.correct_answer in self.options

    def to_dict(self) -> dict[str, Any]:
        return {
            "question": self.stem,
            "options": dict(self.options),
            "correctAnswer": self.correct_answer,
        }


@dataclass
class _ParsedBlock:
    stem: str
    options: dict[str, str]
    inline_correct: str | None = None


def _normalize_text(raw: str) -> str:
    """Drop carriage returns and surrounding whitespace."""
    return raw.replace("\r", "").strip()


def _find_answer_key(text: str) -> re.Match[str] | None:
    """Return the last answer-key section in *text*, if any."""
    last = None
    for match in _ANSWER_KEY_RE.finditer(text):
        last = match
    return last


def _extract_answer_key(text: str) -> dict[int, str]:
    """
    Build a zero-based index -> letter map from a trailing key like
    "Answers: 1. C 2. A 3. D". Returns {} when there is no usable key.
    """
    match = _find_answer_key(text)
    if match is None:
        return {}
    answer_map: dict[int, str] = {}
    for number, letter in _ANSWER_PAIR_RE.findall(match.group(1)):
        index = int(number) - 1
        if index >= 0:
            answer_map[index] = letter.upper()
    return answer_map


def _strip_trailing_answer_key(text: str) -> str:
    """Cut the answer key out when nothing but whitespace follows it."""
    match = _find_answer_key(text)
    if match is None or text[match.end():].strip():
        return text
    return text[: match.start()].rstrip()


def _split_blocks(text: str) -> list[str]:
    """Split at numbered question lines; keep only chunks that start with a number."""
    chunks = _BLOCK_BOUNDARY_RE.split(text)
    return [chunk for chunk in chunks if _BLOCK_START_RE.match(chunk.strip())]


def _strip_question_prefix(line: str) -> str:
    line = _QUESTION_PREFIX_RE.sub("", line)
    line = _NUMBER_PREFIX_RE.sub("", line)
    return line.strip()


def _clean_option_text(text: str) -> tuple[str, bool]:
    """
    Remove "correct"/"answer" tags from option text.

    Returns:
        (cleaned text, whether a tag was present).
    """
    text = text.strip()
    if not _CORRECT_TAG_RE.search(text):
        return text, False
    cleaned = _BRACKETED_TAG_RE.sub("", text)
    cleaned = _CORRECT_TAG_RE.sub("", cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    cleaned = cleaned.rstrip(" -:*").lstrip(" :")
    return cleaned.strip(), True


def _parse_block(block: str) -> _ParsedBlock:
    lines = [line.strip() for line in block.split("\n")]
    lines = [line for line in lines if line]
    if not lines:
        return _ParsedBlock(stem="", options={})

    stem = _strip_question_prefix(lines[0])
    options: dict[str, str] = {}
    tagged: str | None = None
    explicit: str | None = None

    for line in lines[1:]:
        option_match = _OPTION_RE.match(line)
        if option_match:
            letter = option_match.group(1).upper()
            text, has_tag = _clean_option_text(option_match.group(2))
            options[letter] = text
            if has_tag and tagged is None:
                tagged = letter
            continue

        explicit_match = _EXPLICIT_ANSWER_RE.search(line)
        if explicit_match:
            explicit = explicit_match.group(2).upper()

    return _ParsedBlock(stem=stem, options=options, inline_correct=explicit or tagged)


def _resolve_correct_answer(
    inline_correct: str | None, answer_map: dict[int, str], index: int
) -> tuple[str, str]:
    """Inline marker, then answer key, then the default letter."""
    if inline_correct:
        return upper_letter(inline_correct), SOURCE_INLINE
    if answer_map.get(index):
        return upper_letter(answer_map[index]), SOURCE_ANSWER_KEY
    return DEFAULT_CORRECT_ANSWER, SOURCE_DEFAULT


def _assemble(quiz_text: str) -> list[Question]:
    raw = _normalize_text(quiz_text)
    answer_map = _extract_answer_key(raw)
    blocks = _split_blocks(_strip_trailing_answer_key(raw))

    questions: list[Question] = []
    for index, block in enumerate(blocks):
        parsed = _parse_block(block)
        correct, source = _resolve_correct_answer(parsed.inline_correct, answer_map, index)
        questions.append(
            Question(
                stem=parsed.stem,
                options=parsed.options,
                correct_answer=correct,
                answer_source=source,
            )
        )
    return questions


def parse_quiz(quiz_text: str) -> list[Question]:
    """
    Parse lesson quiz text into questions.

    Args:
        quiz_text: The "quiz" field of a lesson record.

    Returns:
        Questions in source order; index i joins to answer-key entry i + 1.

    Raises:
        ParseFailure: If the text holds no question blocks or cannot be parsed.
    """
    try:
        questions = _assemble(quiz_text)
    except Exception as e:  # noqa: BLE001
        LOGGER.exception("Failed to parse quiz")
        raise ParseFailure() from e
    if not questions:
        LOGGER.warning("Quiz text contained no numbered question blocks")
        raise ParseFailure()
    LOGGER.debug("Parsed quiz: %d questions", len(questions))
    return questions


def find_quiz_issues(questions: list[Question]) -> list[dict[str, Any]]:
    """
    List problems a consumer may want to flag. Questions are not modified.

    Issues: "no_options", "answer_not_in_options", "defaulted_answer".
    """
    issues: list[dict[str, Any]] = []
    for index, question in enumerate(questions):
        if not question.is_answerable:
            issues.append({"index": index, "issue": "no_options"})
        elif not question.has_consistent_answer:
            issues.append({"index": index, "issue": "answer_not_in_options"})
        if question.answer_source == SOURCE_DEFAULT:
            issues.append({"index": index, "issue": "defaulted_answer"})
    return issues
