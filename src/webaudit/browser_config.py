"""
Browser configuration for Playwright-based audits.

This module provides a validated Pydantic configuration model for the browser
session used by one audit: launch options, timeouts, and the fixed desktop and
mobile emulation profiles used by the responsive probe.
"""
from typing import List, Literal

from pydantic import BaseModel, Field


DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 14_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/14.0 Mobile/15E148 Safari/604.1"
)

# Flags for running Chromium in containers and without background throttling
DEFAULT_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
]


class ViewportConfig(BaseModel):
    """Device emulation profile."""

    width: int = Field(ge=1, description="Viewport width in CSS pixels")
    height: int = Field(ge=1, description="Viewport height in CSS pixels")
    device_scale_factor: float = Field(default=1.0, gt=0, description="Device pixel ratio")
    is_mobile: bool = Field(default=False, description="Emulate a mobile device")
    has_touch: bool = Field(default=False, description="Emulate touch support")

    def as_viewport(self) -> dict:
        """Width/height mapping accepted by Playwright."""
        return {"width": self.width, "height": self.height}


DESKTOP_VIEWPORT = ViewportConfig(width=1920, height=1080)

MOBILE_VIEWPORT = ViewportConfig(
    width=375,
    height=667,
    device_scale_factor=2,
    is_mobile=True,
    has_touch=True,
)


class BrowserConfig(BaseModel):
    """
    Configuration for the Playwright-based BrowserSession.

    All fields are validated by Pydantic to ensure type safety and valid values.
    """

    headless: bool = Field(
        default=True,
        description="Run browser in headless mode (no visible UI)"
    )

    browser_type: Literal["chromium"] = Field(
        default="chromium",
        description="Browser engine; device emulation relies on the Chromium CDP session"
    )

    launch_timeout: float = Field(
        default=30.0,
        description="Browser launch timeout in seconds",
        gt=0,
        le=300
    )

    navigation_timeout: float = Field(
        default=30.0,
        description="Page navigation timeout in seconds",
        gt=0,
        le=300
    )

    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="networkidle",
        description="When to consider navigation complete"
    )

    launch_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_LAUNCH_ARGS),
        description="Browser launch arguments"
    )

    desktop_viewport: ViewportConfig = Field(
        default_factory=lambda: DESKTOP_VIEWPORT.model_copy(),
        description="Viewport used for navigation and the desktop probe"
    )

    mobile_viewport: ViewportConfig = Field(
        default_factory=lambda: MOBILE_VIEWPORT.model_copy(),
        description="Viewport emulated during the mobile probe"
    )

    desktop_user_agent: str = Field(
        default=DESKTOP_USER_AGENT,
        description="User agent set on every audit page"
    )

    mobile_user_agent: str = Field(
        default=MOBILE_USER_AGENT,
        description="User agent emulated during the mobile probe"
    )

    class Config:
        """Pydantic model configuration."""
        frozen = False
        validate_assignment = True

    @property
    def navigation_timeout_ms(self) -> float:
        """Navigation timeout in milliseconds, as Playwright expects it."""
        return self.navigation_timeout * 1000
