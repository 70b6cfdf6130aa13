"""Headless page rendering using Playwright."""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from careerwatch.renderer.config import RendererConfig, get_renderer_config

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """Raised when a page cannot be launched, loaded or read."""


@dataclass
class RenderedPage:
    """DOM snapshot of a page after it finished rendering.

    Attributes:
        url: The URL that was requested.
        final_url: The URL the browser ended on after redirects.
        html: Serialized DOM of the rendered page.
    """

    url: str
    final_url: str
    html: str


class PageRenderer:
    """Loads a URL in a fresh Chromium instance and returns its rendered DOM.

    Every call to :meth:`render` launches its own browser and closes it
    before returning, whatever the outcome.
    """

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config = config or get_renderer_config()

    async def render(self, url: str) -> RenderedPage:
        """Render a page and return its HTML.

        Args:
            url: The page to load.

        Returns:
            The rendered page.

        Raises:
            RenderError: If the browser cannot start, navigation fails or
                the navigation timeout is exceeded.
        """
        logger.info(f"Rendering {url}")
        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(
                    headless=self.config.headless,
                    args=self.config.launch_args,
                )
                try:
                    return await self._load(browser, url)
                finally:
                    with contextlib.suppress(Exception):
                        await browser.close()
        except PlaywrightTimeoutError as e:
            raise RenderError(
                f"Timed out after {self.config.navigation_timeout_ms}ms loading {url}"
            ) from e
        except PlaywrightError as e:
            raise RenderError(f"Failed to render {url}: {e}") from e

    async def _load(self, browser, url: str) -> RenderedPage:
        context = await browser.new_context(
            user_agent=self.config.user_agent,
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
        )
        page = await context.new_page()
        await page.goto(
            url,
            wait_until=self.config.wait_until,
            timeout=self.config.navigation_timeout_ms,
        )
        if self.config.settle_delay_seconds:
            await page.wait_for_timeout(self.config.settle_delay_seconds * 1000)

        html = await page.content()
        logger.debug(f"Rendered {url} ({len(html)} bytes)")
        return RenderedPage(url=url, final_url=page.url or url, html=html)
