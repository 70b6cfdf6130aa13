"""Tests for the Playwright page renderer.

Playwright is replaced with mocks so no browser is launched.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


def _fake_playwright(html="<html><body>ok</body></html>", final_url=None):
    """Build an async_playwright() replacement and return it with its browser."""
    page = MagicMock()
    page.goto = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.content = AsyncMock(return_value=html)
    page.url = final_url

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)

    manager = MagicMock()
    manager.__aenter__ = AsyncMock(return_value=playwright)
    manager.__aexit__ = AsyncMock(return_value=False)

    factory = MagicMock(return_value=manager)
    return factory, playwright, browser, context, page


@pytest.fixture
def config():
    from careerwatch.renderer.config import RendererConfig

    return RendererConfig(_env_file=None, settle_delay_seconds=2.0)


class TestPageRenderer:
    """Test PageRenderer.render."""

    async def test_render_returns_page_html(self, config):
        from careerwatch.renderer.service import PageRenderer

        factory, _, _, _, _ = _fake_playwright(
            html="<html><body><h1>Jobs</h1></body></html>",
            final_url="https://example.com/careers/",
        )
        with patch("careerwatch.renderer.service.async_playwright", factory):
            page = await PageRenderer(config).render("https://example.com/careers")

        assert page.url == "https://example.com/careers"
        assert page.final_url == "https://example.com/careers/"
        assert "<h1>Jobs</h1>" in page.html

    async def test_render_sets_user_agent_and_waits_for_network_idle(self, config):
        from careerwatch.renderer.service import PageRenderer

        factory, playwright, browser, _, page = _fake_playwright()
        with patch("careerwatch.renderer.service.async_playwright", factory):
            await PageRenderer(config).render("https://example.com/careers")

        playwright.chromium.launch.assert_awaited_once_with(
            headless=True, args=config.launch_args
        )
        assert browser.new_context.await_args.kwargs["user_agent"] == config.user_agent
        page.goto.assert_awaited_once_with(
            "https://example.com/careers",
            wait_until="networkidle",
            timeout=30_000,
        )
        page.wait_for_timeout.assert_awaited_once_with(2000.0)

    async def test_render_skips_settle_wait_when_disabled(self):
        from careerwatch.renderer.config import RendererConfig
        from careerwatch.renderer.service import PageRenderer

        factory, _, _, _, page = _fake_playwright()
        config = RendererConfig(_env_file=None, settle_delay_seconds=0)
        with patch("careerwatch.renderer.service.async_playwright", factory):
            await PageRenderer(config).render("https://example.com/careers")

        page.wait_for_timeout.assert_not_awaited()

    async def test_render_falls_back_to_requested_url(self, config):
        from careerwatch.renderer.service import PageRenderer

        factory, _, _, _, _ = _fake_playwright(final_url="")
        with patch("careerwatch.renderer.service.async_playwright", factory):
            page = await PageRenderer(config).render("https://example.com/careers")

        assert page.final_url == "https://example.com/careers"

    async def test_render_closes_browser_on_success(self, config):
        from careerwatch.renderer.service import PageRenderer

        factory, _, browser, _, _ = _fake_playwright()
        with patch("careerwatch.renderer.service.async_playwright", factory):
            await PageRenderer(config).render("https://example.com/careers")

        browser.close.assert_awaited_once()

    async def test_render_timeout_raises_render_error_and_closes_browser(self, config):
        from careerwatch.renderer.service import PageRenderer, RenderError

        factory, _, browser, _, page = _fake_playwright()
        page.goto.side_effect = PlaywrightTimeoutError("Timeout 30000ms exceeded")

        with patch("careerwatch.renderer.service.async_playwright", factory):
            with pytest.raises(RenderError, match="Timed out"):
                await PageRenderer(config).render("https://example.com/careers")

        browser.close.assert_awaited_once()

    async def test_navigation_failure_raises_render_error(self, config):
        from careerwatch.renderer.service import PageRenderer, RenderError

        factory, _, browser, _, page = _fake_playwright()
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

        with patch("careerwatch.renderer.service.async_playwright", factory):
            with pytest.raises(RenderError, match="ERR_NAME_NOT_RESOLVED"):
                await PageRenderer(config).render("https://nope.invalid/careers")

        browser.close.assert_awaited_once()

    async def test_launch_failure_raises_render_error(self, config):
        from careerwatch.renderer.service import PageRenderer, RenderError

        factory, playwright, browser, _, _ = _fake_playwright()
        playwright.chromium.launch.side_effect = PlaywrightError(
            "Executable doesn't exist"
        )

        with patch("careerwatch.renderer.service.async_playwright", factory):
            with pytest.raises(RenderError):
                await PageRenderer(config).render("https://example.com/careers")

        browser.close.assert_not_awaited()

    async def test_close_failure_does_not_mask_result(self, config):
        from careerwatch.renderer.service import PageRenderer

        factory, _, browser, _, _ = _fake_playwright()
        browser.close.side_effect = PlaywrightError("Target closed")

        with patch("careerwatch.renderer.service.async_playwright", factory):
            page = await PageRenderer(config).render("https://example.com/careers")

        assert page.html

    async def test_each_render_launches_its_own_browser(self, config):
        from careerwatch.renderer.service import PageRenderer

        factory, playwright, browser, _, _ = _fake_playwright()
        renderer = PageRenderer(config)
        with patch("careerwatch.renderer.service.async_playwright", factory):
            await renderer.render("https://example.com/a")
            await renderer.render("https://example.com/b")

        assert playwright.chromium.launch.await_count == 2
        assert browser.close.await_count == 2
