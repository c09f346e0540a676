"""Things that can be snapshotted.

A subject either is a leaf :class:`View` that renders itself, or a
:class:`ViewController` that owns a view and needs its appearance lifecycle
run before the view is laid out.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol, runtime_checkable

from PIL import Image


@runtime_checkable
class HasVisualRoot(Protocol):
    def get_visual_root(self) -> "View": ...


class View(ABC):
    """A leaf visual element."""

    def get_visual_root(self) -> "View":
        return self

    @abstractmethod
    def render(self, uses_alternate_render_path: bool = False) -> Image.Image:
        """Draw the view into a bitmap.

        ``uses_alternate_render_path`` selects the renderer's secondary capture
        path (e.g. the full scrollable area instead of the visible viewport).
        """


class ViewController(ABC):
    """Owns a view and drives its appearance lifecycle."""

    def will_appear(self, animated: bool = False) -> None:
        pass

    def did_appear(self, animated: bool = False) -> None:
        pass

    @property
    @abstractmethod
    def view(self) -> View: ...

    def get_visual_root(self) -> View:
        # Running the lifecycle forces layout before capture
        self.will_appear(animated=False)
        self.did_appear(animated=False)
        return self.view


class ImageView(View):
    """A view backed by an already rendered Pillow image."""

    def __init__(self, image: Image.Image):
        self.image = image

    @classmethod
    def open(cls, path: str | Path) -> "ImageView":
        with Image.open(path) as img:
            img.load()
            return cls(img.copy())

    def render(self, uses_alternate_render_path: bool = False) -> Image.Image:
        return self.image
