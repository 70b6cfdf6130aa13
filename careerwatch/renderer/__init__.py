"""Headless browser rendering of career pages.

Public API:
    - PageRenderer: Loads a URL in an isolated Chromium instance
    - RenderedPage: The rendered DOM snapshot
    - RenderError: Raised on launch, navigation or timeout failures
    - RendererConfig: Configuration settings for the renderer
"""

from careerwatch.renderer.config import RendererConfig, get_renderer_config
from careerwatch.renderer.service import PageRenderer, RenderedPage, RenderError

__all__ = [
    "PageRenderer",
    "RenderedPage",
    "RenderError",
    "RendererConfig",
    "get_renderer_config",
]
