"""Configuration settings for the Page Renderer."""

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class RendererConfig(BaseSettings):
    """Renderer configuration settings.

    Values can be overridden via environment variables with the RENDERER_
    prefix or a .env file.

    Attributes:
        headless: Run Chromium without a window.
        navigation_timeout_ms: Upper bound for a single page navigation.
        settle_delay_seconds: Extra wait after the load state is reached so
            late client-side rendering can finish.
        wait_until: Playwright load state that ends navigation.
        user_agent: User-agent string presented to target sites.
        launch_args: Extra Chromium command line flags.
        viewport_width: Browser viewport width.
        viewport_height: Browser viewport height.
    """

    model_config = SettingsConfigDict(
        env_prefix="RENDERER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    headless: bool = Field(default=True, description="Run browser in headless mode")
    navigation_timeout_ms: Annotated[int, Field(gt=0)] = Field(
        default=30_000,
        description="Navigation timeout in milliseconds",
    )
    settle_delay_seconds: Annotated[float, Field(ge=0)] = Field(
        default=2.0,
        description="Seconds to wait after navigation for dynamic content",
    )
    wait_until: str = Field(
        default="networkidle",
        description="Load state: 'load', 'domcontentloaded', 'networkidle' or 'commit'",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-agent string sent with every request",
    )
    launch_args: list[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"],
        description="Extra Chromium launch flags",
    )
    viewport_width: int = Field(default=1280, description="Viewport width")
    viewport_height: int = Field(default=720, description="Viewport height")

    @field_validator("wait_until", mode="before")
    @classmethod
    def validate_wait_until(cls, v: str) -> str:
        """Validate wait_until is a Playwright load state."""
        if not isinstance(v, str):
            raise ValueError("wait_until must be a string")
        value = v.lower().strip()
        if value not in {"load", "domcontentloaded", "networkidle", "commit"}:
            raise ValueError(
                "wait_until must be one of: load, domcontentloaded, networkidle, commit"
            )
        return value


_renderer_config: RendererConfig | None = None


def get_renderer_config() -> RendererConfig:
    """Get the renderer configuration singleton."""
    global _renderer_config
    if _renderer_config is None:
        _renderer_config = RendererConfig()
    return _renderer_config


def reset_renderer_config() -> None:
    """Reset the renderer configuration singleton (useful for testing)."""
    global _renderer_config
    _renderer_config = None
