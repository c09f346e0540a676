"""Snapshot matchers for use with ``expect(...).to(...)``."""

from __future__ import annotations

from typing import Optional

from snapmatch.comparator import SnapshotComparator
from snapmatch.expectation import Expression, FailureMessage
from snapmatch.models.config import SnapshotConfig
from snapmatch.models.snapshot import CheckContext


class SnapshotMatcher:
    def __init__(
        self,
        name: Optional[str] = None,
        is_device_agnostic: bool = False,
        uses_alternate_render_path: bool = False,
        tolerance: Optional[float] = None,
        record: Optional[bool] = None,
        comparator: SnapshotComparator | None = None,
        config: SnapshotConfig | None = None,
    ):
        self.name = name
        self.is_device_agnostic = is_device_agnostic
        self.uses_alternate_render_path = uses_alternate_render_path
        self.tolerance = tolerance
        # None defers to the configured record mode
        self.record = record
        self.comparator = comparator or SnapshotComparator()
        self.config = config

    def matches(self, expression: Expression, failure_message: FailureMessage) -> bool:
        subject = expression.evaluate()
        if subject is None:
            failure_message.clear()
            failure_message.actual_value = "expected a view or controller to snapshot, got None"
            return False

        context = CheckContext(example=expression.example, source_file=expression.location.file)
        result = self.comparator.check(
            subject,
            context,
            name=self.name,
            is_device_agnostic=self.is_device_agnostic,
            uses_alternate_render_path=self.uses_alternate_render_path,
            tolerance=self.tolerance,
            record=self.record,
            config=self.config,
        )
        if not result.passed:
            failure_message.clear()
            failure_message.actual_value = result.message
        return result.passed


def have_valid_snapshot(
    name: Optional[str] = None, uses_alternate_render_path: bool = False, tolerance: Optional[float] = None
) -> SnapshotMatcher:
    return SnapshotMatcher(name, False, uses_alternate_render_path, tolerance)


def have_valid_device_agnostic_snapshot(
    name: Optional[str] = None, uses_alternate_render_path: bool = False, tolerance: Optional[float] = None
) -> SnapshotMatcher:
    return SnapshotMatcher(name, True, uses_alternate_render_path, tolerance)


def record_snapshot(
    name: Optional[str] = None, uses_alternate_render_path: bool = False, tolerance: Optional[float] = None
) -> SnapshotMatcher:
    """Always record, whatever the configured mode. The check then fails as a reminder."""
    return SnapshotMatcher(name, False, uses_alternate_render_path, tolerance, record=True)


def record_device_agnostic_snapshot(
    name: Optional[str] = None, uses_alternate_render_path: bool = False, tolerance: Optional[float] = None
) -> SnapshotMatcher:
    return SnapshotMatcher(name, True, uses_alternate_render_path, tolerance, record=True)
