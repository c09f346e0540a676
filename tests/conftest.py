"""Pytest configuration and shared fixtures."""

import io
from pathlib import Path

import pytest
from PIL import Image

from snapmatch.comparator import SnapshotComparator
from snapmatch.mode import mode_controller
from snapmatch.models.config import SnapshotConfig
from snapmatch.models.snapshot import CheckContext, ExampleMetadata
from snapmatch.rendering.surfaces import ImageView, View, ViewController


# ============================================================================
# Global State
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_mode_controller():
    """Give every test default snapshot settings and restore the session's afterwards."""
    saved = mode_controller.config
    mode_controller.reset()
    yield mode_controller
    mode_controller.use(saved)


# ============================================================================
# Image Fixtures
# ============================================================================


def _new_image(color=(255, 0, 0, 255), size=(10, 10)) -> Image.Image:
    return Image.new("RGBA", size, color)


def _encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_image():
    """Factory for solid RGBA images: make_image(color, size)."""
    return _new_image


@pytest.fixture
def png_bytes():
    """Encode a Pillow image as PNG bytes."""
    return _encode_png


@pytest.fixture
def red_image() -> Image.Image:
    """A 10x10 opaque red image."""
    return _new_image()


@pytest.fixture
def red_view(red_image: Image.Image) -> ImageView:
    return ImageView(red_image)


@pytest.fixture
def blue_view() -> ImageView:
    return ImageView(_new_image((0, 0, 255, 255)))


class RecordingController(ViewController):
    """Controller that remembers its lifecycle calls."""

    def __init__(self, view: View):
        self._view = view
        self.calls: list[tuple[str, bool]] = []

    @property
    def view(self) -> View:
        self.calls.append(("view", False))
        return self._view

    def will_appear(self, animated: bool = False) -> None:
        self.calls.append(("will_appear", animated))

    def did_appear(self, animated: bool = False) -> None:
        self.calls.append(("did_appear", animated))


class BrokenView(View):
    def render(self, uses_alternate_render_path: bool = False) -> Image.Image:
        raise RuntimeError("layer has no backing store")


# ============================================================================
# Check Fixtures
# ============================================================================


@pytest.fixture
def reference_dir(tmp_path: Path) -> Path:
    return tmp_path / "ReferenceImages"


@pytest.fixture
def reference_config(reference_dir: Path) -> SnapshotConfig:
    """Config pinned to a temporary reference directory."""
    return SnapshotConfig(reference_images_directory=reference_dir)


@pytest.fixture
def example() -> ExampleMetadata:
    return ExampleMetadata(
        name="root example group, Login screen, renders",
        file="/repo/AppTests/test_login.py",
        line=12,
    )


@pytest.fixture
def check_context(example: ExampleMetadata) -> CheckContext:
    return CheckContext(example=example, source_file="/repo/AppTests/test_login.py")


@pytest.fixture
def comparator() -> SnapshotComparator:
    return SnapshotComparator()


# ============================================================================
# Subject Fixtures
# ============================================================================


@pytest.fixture
def broken_view() -> View:
    """A view whose rendering always raises."""
    return BrokenView()


@pytest.fixture
def recording_controller(red_view: ImageView) -> RecordingController:
    """Controller around the red view that logs its lifecycle calls."""
    return RecordingController(red_view)
