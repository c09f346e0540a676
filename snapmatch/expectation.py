"""Minimal expectation plumbing on top of pytest.

``expect(subject).to(matcher)`` evaluates a matcher against the subject and
turns a negative answer into ``pytest.fail`` with the matcher's message.
Configuration errors end the whole session instead of failing one test.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

import pytest

from snapmatch.exceptions import SnapshotConfigurationError
from snapmatch.models.snapshot import ExampleMetadata

logger = logging.getLogger(__name__)

_current_example: Optional[ExampleMetadata] = None


def set_current_example(example: Optional[ExampleMetadata]) -> None:
    global _current_example
    _current_example = example


def current_example() -> Optional[ExampleMetadata]:
    return _current_example


@dataclass
class SourceLocation:
    file: str
    line: int = 0


class Expression:
    """A lazily evaluated subject plus where the expectation was written."""

    def __init__(
        self,
        value: Any,
        location: SourceLocation,
        example: Optional[ExampleMetadata] = None,
        is_closure: bool = False,
    ):
        self._value = value
        self.location = location
        self.example = example
        self.is_closure = is_closure

    def evaluate(self) -> Any:
        if self.is_closure:
            return self._value()
        return self._value


@dataclass
class FailureMessage:
    expected: str = "expected"
    to: str = "to"
    postfix_message: str = ""
    actual_value: str = ""

    def clear(self) -> None:
        self.expected = ""
        self.to = ""
        self.postfix_message = ""
        self.actual_value = ""

    def stringify(self) -> str:
        head = " ".join(p for p in (self.expected, self.to, self.postfix_message) if p)
        if head and self.actual_value:
            return f"{head}, got {self.actual_value}"
        return head or self.actual_value


class Matcher(Protocol):
    def matches(self, expression: Expression, failure_message: FailureMessage) -> bool: ...


class Expectation:
    def __init__(self, expression: Expression):
        self.expression = expression

    def to(self, matcher: Matcher, description: Optional[str] = None) -> None:
        message = FailureMessage()
        try:
            passed = matcher.matches(self.expression, message)
        except SnapshotConfigurationError as e:
            logger.error("Snapshot configuration error: %s", e)
            pytest.exit(str(e), returncode=pytest.ExitCode.USAGE_ERROR)
        if not passed:
            text = message.stringify()
            if description:
                text = f"{description}\n{text}"
            pytest.fail(text, pytrace=False)


def expect(value: Any = None, closure: Optional[Callable[[], Any]] = None) -> Expectation:
    """Start an expectation on ``value`` (or on the result of ``closure``)."""
    caller = inspect.currentframe().f_back
    location = SourceLocation(file=caller.f_code.co_filename, line=caller.f_lineno)
    if closure is not None:
        expression = Expression(closure, location, current_example(), is_closure=True)
    else:
        expression = Expression(value, location, current_example())
    return Expectation(expression)
