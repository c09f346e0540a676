"""Process-wide snapshot mode and defaults.

The controller owns one immutable :class:`SnapshotConfig`. Setters replace it
with an updated copy, so a config handed to a check never changes under it.
Nothing here is locked; tests are expected to configure during setup and only
read afterwards.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from snapmatch.models.config import SnapshotConfig
from snapmatch.models.snapshot import Mode

logger = logging.getLogger(__name__)


class ModeController:
    def __init__(self, config: SnapshotConfig | None = None):
        self._config = config or SnapshotConfig()

    @property
    def config(self) -> SnapshotConfig:
        return self._config

    @property
    def mode(self) -> Mode:
        return Mode.RECORD if self._config.record_mode else Mode.VERIFY

    def configure(self, **changes) -> SnapshotConfig:
        """Replace several fields at once, validating the result."""
        data = self._config.model_dump(exclude_unset=True)
        data.update(changes)
        self._config = SnapshotConfig(**data)
        logger.debug("Snapshot config updated: %s", ", ".join(sorted(changes)))
        return self._config

    def use(self, config: SnapshotConfig) -> None:
        self._config = config

    def reset(self) -> None:
        self._config = SnapshotConfig()

    def set_reference_images_directory(self, directory: str | Path | None) -> None:
        self.configure(reference_images_directory=directory)

    def set_tolerance(self, tolerance: float) -> None:
        self.configure(tolerance=tolerance)

    def set_record_mode(self, record: bool) -> None:
        if record:
            logger.info("Snapshot record mode enabled; checks will overwrite reference images")
        self.configure(record_mode=record)

    def set_test_folder(self, test_folder: str) -> None:
        """Replace the folder suffix list with a single custom suffix."""
        self.configure(folder_suffixes=(test_folder.lower(),))


mode_controller = ModeController()


def set_reference_images_directory(directory: str | Path | None) -> None:
    mode_controller.set_reference_images_directory(directory)


def set_tolerance(tolerance: float) -> None:
    mode_controller.set_tolerance(tolerance)


def set_record_mode(record: bool) -> None:
    mode_controller.set_record_mode(record)


def set_test_folder(test_folder: str) -> None:
    mode_controller.set_test_folder(test_folder)


def current_config() -> SnapshotConfig:
    return mode_controller.config


def reset(config: Optional[SnapshotConfig] = None) -> None:
    if config is None:
        mode_controller.reset()
    else:
        mode_controller.use(config)
