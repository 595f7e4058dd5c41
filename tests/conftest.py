"""Shared pytest fixtures for the lesson quiz test suite."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Ensure src/ is on the path so all service imports resolve.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


class FakeResponse:
    """Just enough of requests.Response for the lesson API client."""

    def __init__(self, status_code: int = 200, payload: Any = None, raise_on_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._raise_on_json = raise_on_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._raise_on_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class RecordingRequest:
    """Request function double: records calls, replays queued responses or errors."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def __call__(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def well_formed_quiz() -> str:
    return (
        "1. What is 2+2?\n"
        "A) 3\n"
        "B) 4\n"
        "C) 5\n"
        "D) 6\n"
        "Answer: B\n"
        "\n"
        "2. What is the capital of France?\n"
        "A) Berlin\n"
        "B) Madrid\n"
        "C) Paris\n"
        "D) Rome\n"
        "Answer: C\n"
    )


@pytest.fixture
def answer_key_quiz() -> str:
    return (
        "1. First question?\n"
        "A) one\n"
        "B) two\n"
        "C) three\n"
        "D) four\n"
        "\n"
        "2. Second question?\n"
        "A) one\n"
        "B) two\n"
        "C) three\n"
        "D) four\n"
        "\n"
        "3. Third question?\n"
        "A) one\n"
        "B) two\n"
        "C) three\n"
        "D) four\n"
        "\n"
        "Answers: 1. C 2. A 3. D"
    )


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def recording_request():
    return RecordingRequest
