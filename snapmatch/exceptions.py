"""Error types raised by the snapshot engine."""

from __future__ import annotations


class SnapshotError(Exception):
    """Base class for every snapmatch error."""


class SnapshotConfigurationError(SnapshotError):
    """The harness is misconfigured. These stop the test session."""


class ReferenceDirectoryError(SnapshotConfigurationError):
    def __init__(self, source_file: str, suffixes: tuple[str, ...]):
        self.source_file = source_file
        self.suffixes = suffixes
        super().__init__(
            "Could not infer reference image folder for "
            f"{source_file} (looked for a folder ending in {', '.join(suffixes)}). "
            "Provide a reference dir using snapmatch.mode.set_reference_images_directory()"
        )


class MissingExampleError(SnapshotConfigurationError):
    def __init__(self):
        super().__init__(
            "No snapshot name given and no test example is running; "
            "pass name= or run the check inside a pytest test"
        )


class SnapshotDiffError(SnapshotError):
    """Raised by the image differ. Always downgraded to a failed check."""


class RenderFailed(SnapshotDiffError):
    pass


class ReferenceImageMissing(SnapshotDiffError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Reference image not found: {path}")


class ImageSizeMismatch(SnapshotDiffError):
    def __init__(self, expected: tuple[int, int], actual: tuple[int, int]):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Image size {actual[0]}x{actual[1]} does not match reference {expected[0]}x{expected[1]}"
        )


class ImagesDiffer(SnapshotDiffError):
    def __init__(self, diff_ratio: float, tolerance: float):
        self.diff_ratio = diff_ratio
        self.tolerance = tolerance
        super().__init__(f"Pixel diff: {diff_ratio:.2%} (tolerance: {tolerance:.2%})")


class RecordFailed(SnapshotDiffError):
    pass
