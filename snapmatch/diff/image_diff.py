"""Pillow-based image differ: renders a view, then records or verifies it."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageChops

from snapmatch.exceptions import (
    ImageSizeMismatch,
    ImagesDiffer,
    RecordFailed,
    ReferenceImageMissing,
    RenderFailed,
    SnapshotDiffError,
)
from snapmatch.models.config import DeviceProfile
from snapmatch.rendering.surfaces import View

logger = logging.getLogger(__name__)


@dataclass
class Matched:
    reference_path: Path
    diff_ratio: float = 0.0


@dataclass
class Recorded:
    reference_path: Path


@dataclass
class DiffFailed:
    error: SnapshotDiffError
    reference_path: Optional[Path] = None


DiffOutcome = Union[Matched, Recorded, DiffFailed]

_UNSAFE_FILE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def pixel_diff_ratio(reference: Image.Image, current: Image.Image) -> float:
    """Fraction of pixels where any channel differs. Images must be the same size and mode."""
    total = reference.width * reference.height
    if total == 0:
        return 0.0
    diff = ImageChops.difference(reference, current)
    channels = diff.split()
    combined = channels[0]
    for channel in channels[1:]:
        combined = ImageChops.lighter(combined, channel)
    unchanged = combined.histogram()[0]
    return (total - unchanged) / total


class ImageDiffer:
    """Stores reference PNGs under ``<directory>/<group>/`` and compares against them."""

    def file_suffix(self, device: DeviceProfile, device_agnostic: bool) -> str:
        if device_agnostic:
            parts = [_UNSAFE_FILE_CHARS.sub("_", p) for p in (device.model, device.os_name, device.os_version)]
            return "_" + "_".join(parts) + f"_{device.screen_width}x{device.screen_height}"
        if device.scale > 1:
            return f"@{device.scale:g}x"
        return ""

    def reference_path(
        self,
        directory: Path,
        group: str,
        identifier: str,
        device: DeviceProfile,
        device_agnostic: bool = False,
    ) -> Path:
        suffix = self.file_suffix(device, device_agnostic)
        return Path(directory) / group / f"{identifier}{suffix}.png"

    def compare(
        self,
        surface: View,
        identifier: str,
        directory: Path,
        group: str,
        tolerance: float = 0.0,
        device_agnostic: bool = False,
        uses_alternate_render_path: bool = False,
        record: bool = False,
        device: DeviceProfile | None = None,
        failure_directory: Path | None = None,
    ) -> DiffOutcome:
        device = device or DeviceProfile()
        try:
            image = surface.render(uses_alternate_render_path).convert("RGBA")
        except Exception as e:
            return DiffFailed(RenderFailed(f"Could not render {identifier}: {e}"))

        path = self.reference_path(directory, group, identifier, device, device_agnostic)
        if record:
            return self._record(image, path)
        return self._verify(image, path, tolerance, failure_directory, group, identifier)

    def _record(self, image: Image.Image, path: Path) -> DiffOutcome:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            image.save(path, format="PNG")
        except OSError as e:
            return DiffFailed(RecordFailed(f"Could not write {path}: {e}"), path)
        logger.info("Recorded reference image %s (%dx%d)", path, image.width, image.height)
        return Recorded(path)

    def _verify(
        self,
        image: Image.Image,
        path: Path,
        tolerance: float,
        failure_directory: Path | None,
        group: str,
        identifier: str,
    ) -> DiffOutcome:
        if not path.exists():
            return DiffFailed(ReferenceImageMissing(path), path)

        with Image.open(path) as stored:
            stored.load()
            reference = stored.convert("RGBA")

        if reference.size != image.size:
            error: SnapshotDiffError = ImageSizeMismatch(reference.size, image.size)
        else:
            ratio = pixel_diff_ratio(reference, image)
            if ratio <= tolerance:
                logger.debug("Snapshot %s matched (diff %.4f)", identifier, ratio)
                return Matched(path, ratio)
            error = ImagesDiffer(ratio, tolerance)

        if failure_directory is not None:
            self.write_failure_images(Path(failure_directory) / group, identifier, reference, image)
        return DiffFailed(error, path)

    def write_failure_images(
        self, directory: Path, identifier: str, reference: Image.Image, current: Image.Image
    ) -> None:
        """Save reference, failed and (when sizes agree) diff images for inspection."""
        try:
            directory.mkdir(parents=True, exist_ok=True)
            reference.save(directory / f"reference_{identifier}.png")
            current.save(directory / f"failed_{identifier}.png")
            if reference.size == current.size:
                diff = ImageChops.difference(reference.convert("RGB"), current.convert("RGB"))
                diff.save(directory / f"diff_{identifier}.png")
        except OSError as e:
            logger.warning("Could not write failure images for %s: %s", identifier, e)
            return
        logger.info("Wrote failure images for %s to %s", identifier, directory)
