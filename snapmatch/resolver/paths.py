"""Reference image directory resolution."""

from __future__ import annotations

import logging
from pathlib import Path, PurePath

from snapmatch.exceptions import ReferenceDirectoryError
from snapmatch.models.config import SnapshotConfig

logger = logging.getLogger(__name__)

REFERENCE_IMAGES_FOLDER = "ReferenceImages"


def resolve_reference_directory(source_file: str | PurePath, config: SnapshotConfig) -> Path:
    """Return the directory holding reference images for ``source_file``.

    A configured ``reference_images_directory`` always wins. Otherwise the
    first path component ending in one of ``config.folder_suffixes`` marks the
    test suite root, and images live in ``<root>/ReferenceImages``.
    """
    if config.reference_images_directory is not None:
        return Path(config.reference_images_directory)

    parts = PurePath(source_file).parts
    for index, component in enumerate(parts):
        lowered = component.lower()
        if any(lowered.endswith(suffix) for suffix in config.folder_suffixes):
            directory = Path(*parts[: index + 1]) / REFERENCE_IMAGES_FOLDER
            logger.debug("Inferred reference directory %s from %s", directory, source_file)
            return directory

    raise ReferenceDirectoryError(str(source_file), config.folder_suffixes)


def reference_group(source_file: str | PurePath) -> str:
    """Subfolder for one test file's images: its base name without extension."""
    return PurePath(source_file).stem
