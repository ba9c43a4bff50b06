"""Error classification for agent failures.

Classifies exceptions raised inside an agent by category to enable:
- Structured logging (bad input vs. agent bug vs. slow agent)
- Failure metadata on the AnalysisResult returned in its place
"""

from __future__ import annotations

import asyncio
from enum import Enum

from pydantic import ValidationError


class ErrorClass(Enum):
    TIMEOUT = "timeout"  # agent exceeded a deadline
    INPUT = "input"  # agent read a malformed or unexpected context
    INTERNAL = "internal"  # agent bug or unimplemented path
    UNKNOWN = "unknown"  # unclassified


_INPUT_ERRORS = (
    ValidationError,
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
    IndexError,
)
_INTERNAL_ERRORS = (RuntimeError, NotImplementedError, AssertionError)


def classify_error(error: BaseException) -> ErrorClass:
    """Classify an agent failure.

    Checks exception types first, falls back to string matching for
    untyped exceptions.
    """
    # 1. Timeout types
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT

    # 2. Typed categories (ValidationError subclasses ValueError)
    if isinstance(error, _INPUT_ERRORS):
        return ErrorClass.INPUT
    if isinstance(error, _INTERNAL_ERRORS):
        return ErrorClass.INTERNAL

    # 3. Fall back to string matching
    msg = str(error).lower()
    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT

    return ErrorClass.UNKNOWN


def describe_error(error: BaseException) -> str:
    """Exception message, or its type name when the message is empty."""
    return str(error) or type(error).__name__
