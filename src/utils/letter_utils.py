"""
Option letter helpers.
"""

from typing import Any

from config import OPTION_LETTERS


def normalize_letter(value: Any) -> str:
    """
    Canonicalize an option letter to uppercase.

    Args:
        value: Letter as stored upstream (any case, surrounding whitespace allowed).

    Returns:
        Uppercase letter, one of A-D.

    Raises:
        ValueError: If the value is not a single option letter.
    """
    letter = str(value or "").strip().upper()
    if letter not in OPTION_LETTERS:
        raise ValueError(f"Invalid option letter: {value!r}")
    return letter


def upper_letter(value: Any) -> str:
    """Uppercase without validating; used where malformed source letters must pass through."""
    return str(value or "").strip().upper()
