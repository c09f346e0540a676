"""Snapshot comparator — resolves identity and location, then records or verifies."""

from __future__ import annotations

import logging
from typing import Optional

from snapmatch.diff.image_diff import DiffFailed, DiffOutcome, ImageDiffer, Matched, Recorded
from snapmatch.exceptions import RenderFailed, SnapshotDiffError
from snapmatch.mode import mode_controller
from snapmatch.models.config import SnapshotConfig
from snapmatch.models.snapshot import (
    CheckContext,
    ComparisonConfig,
    ComparisonResult,
    Mode,
    ReferenceLocation,
    SnapshotIdentity,
)
from snapmatch.rendering.surfaces import HasVisualRoot
from snapmatch.resolver.naming import snapshot_identity
from snapmatch.resolver.paths import reference_group, resolve_reference_directory

logger = logging.getLogger(__name__)


class SnapshotComparator:
    """Runs one snapshot check per :meth:`check` call.

    Configuration errors (no reference directory, no name) propagate. Anything
    that goes wrong while rendering or diffing becomes a failed result.
    """

    def __init__(self, differ: ImageDiffer | None = None):
        self.differ = differ or ImageDiffer()

    def check(
        self,
        subject: HasVisualRoot,
        context: CheckContext,
        name: Optional[str] = None,
        is_device_agnostic: bool = False,
        uses_alternate_render_path: bool = False,
        tolerance: Optional[float] = None,
        record: Optional[bool] = None,
        config: SnapshotConfig | None = None,
    ) -> ComparisonResult:
        config = config or mode_controller.config
        identity = snapshot_identity(name, context.example)
        location = ReferenceLocation(
            directory_path=resolve_reference_directory(context.source_file, config)
        )

        recording = config.record_mode if record is None else record
        options = ComparisonConfig(
            # Recording always uses the configured default
            tolerance=config.tolerance if recording or tolerance is None else tolerance,
            is_device_agnostic=is_device_agnostic,
            uses_alternate_render_path=uses_alternate_render_path,
            mode=Mode.RECORD if recording else Mode.VERIFY,
        )

        outcome = self._run_differ(subject, identity, location, context, options, config)

        if options.mode is Mode.RECORD:
            return self._record_result(identity, outcome)
        return self._verify_result(identity, outcome)

    def _run_differ(
        self,
        subject: HasVisualRoot,
        identity: SnapshotIdentity,
        location: ReferenceLocation,
        context: CheckContext,
        options: ComparisonConfig,
        config: SnapshotConfig,
    ) -> DiffOutcome:
        try:
            surface = subject.get_visual_root()
        except Exception as e:
            return DiffFailed(RenderFailed(f"Could not obtain a view to snapshot: {e}"))

        try:
            return self.differ.compare(
                surface,
                identity.sanitized_name,
                location.directory_path,
                reference_group(context.source_file),
                tolerance=options.tolerance,
                device_agnostic=options.is_device_agnostic,
                uses_alternate_render_path=options.uses_alternate_render_path,
                record=options.mode is Mode.RECORD,
                device=config.device,
                failure_directory=config.failure_directory,
            )
        except SnapshotDiffError as e:
            return DiffFailed(e)
        except Exception as e:
            return DiffFailed(SnapshotDiffError(f"Image differ raised {type(e).__name__}: {e}"))

    def _verify_result(self, identity: SnapshotIdentity, outcome: DiffOutcome) -> ComparisonResult:
        match outcome:
            case Matched():
                return ComparisonResult(True)
            case DiffFailed(error=error):
                logger.warning("Snapshot %s did not match: %s", identity.sanitized_name, error)
            case _:
                logger.warning("Unexpected differ outcome for %s: %r", identity.sanitized_name, outcome)
        return ComparisonResult(False, f"expected a matching snapshot in {identity.sanitized_name}")

    def _record_result(self, identity: SnapshotIdentity, outcome: DiffOutcome) -> ComparisonResult:
        # Recording never passes
        shown = identity.raw_name if identity.raw_name is not None else identity.sanitized_name
        match outcome:
            case Recorded():
                return ComparisonResult(
                    False, f"snapshot {shown} successfully recorded, replace record_snapshot with a check"
                )
            case DiffFailed(error=error):
                logger.warning("Could not record snapshot %s: %s", identity.sanitized_name, error)
        return ComparisonResult(False, f"expected to record a snapshot in {shown}")
