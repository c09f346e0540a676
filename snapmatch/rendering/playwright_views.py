"""Playwright adapters: pages and locators as snapshot subjects."""

from __future__ import annotations

import io
import logging

from PIL import Image
from playwright.sync_api import Locator, Page

from snapmatch.rendering.surfaces import View, ViewController

logger = logging.getLogger(__name__)


def _to_image(png_bytes: bytes) -> Image.Image:
    with Image.open(io.BytesIO(png_bytes)) as img:
        img.load()
        return img.convert("RGBA")


class PageView(View):
    """The visible viewport of a page; the alternate path captures the full page."""

    def __init__(self, page: Page):
        self.page = page

    def render(self, uses_alternate_render_path: bool = False) -> Image.Image:
        png = self.page.screenshot(full_page=uses_alternate_render_path, animations="disabled")
        return _to_image(png)


class LocatorView(View):
    """A single element. The alternate path skips Playwright's scroll-into-view."""

    def __init__(self, locator: Locator):
        self.locator = locator

    def render(self, uses_alternate_render_path: bool = False) -> Image.Image:
        if uses_alternate_render_path:
            box = self.locator.bounding_box()
            if box is None:
                raise ValueError("Element is not visible, nothing to capture")
            png = self.locator.page.screenshot(clip=box, animations="disabled")
        else:
            png = self.locator.screenshot(animations="disabled")
        return _to_image(png)


class PageController(ViewController):
    """Wraps a page so it settles before capture.

    ``will_appear`` turns off motion and waits for the network to go idle;
    ``did_appear`` gives fonts and late layout a moment to finish.
    """

    def __init__(self, page: Page, settle_ms: int = 500, idle_timeout_ms: int = 3000):
        self.page = page
        self.settle_ms = settle_ms
        self.idle_timeout_ms = idle_timeout_ms

    @property
    def view(self) -> PageView:
        return PageView(self.page)

    def will_appear(self, animated: bool = False) -> None:
        if not animated:
            self.page.emulate_media(reduced_motion="reduce")
        try:
            self.page.wait_for_load_state("networkidle", timeout=self.idle_timeout_ms)
        except Exception as e:
            # Pages that poll never go idle; capture what is there
            logger.debug("Page did not reach network idle: %s", e)

    def did_appear(self, animated: bool = False) -> None:
        if self.settle_ms:
            self.page.wait_for_timeout(self.settle_ms)
