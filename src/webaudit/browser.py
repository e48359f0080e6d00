"""
Playwright browser session used by one audit.

The auditor never evaluates arbitrary scripts: ``AuditPage`` exposes the fixed
set of typed queries the analyzers need (content snapshot, title, first
heading, performance entries, layout probe, technology signals) plus
Chromium device emulation through a CDP session.

    async with BrowserSession(config) as session:
        page = await session.new_page()
        await page.goto("https://example.com")
        html = await page.content()
"""
import logging
from typing import Any, Dict, Optional

from webaudit.browser_config import BrowserConfig, ViewportConfig
from webaudit.constants import METRICS_SETTLE_MS
from webaudit.utils import with_timeout

logger = logging.getLogger(__name__)


# Navigation, paint and layout-shift entries. CLS and FID are observed for a
# settle window because layout-shift entries keep arriving after load.
PERFORMANCE_SNAPSHOT_SCRIPT = """
(settleMs) => new Promise((resolve) => {
    const navigation = performance.getEntriesByType('navigation')[0];
    const paint = performance.getEntriesByType('paint');
    const fcp = paint.find((entry) => entry.name === 'first-contentful-paint');

    let lcp = 0, cls = 0, fid = 0;

    try {
        new PerformanceObserver((list) => {
            const entries = list.getEntries();
            if (entries.length > 0) {
                lcp = entries[entries.length - 1].startTime;
            }
        }).observe({type: 'largest-contentful-paint', buffered: true});
    } catch (e) {}

    try {
        new PerformanceObserver((list) => {
            for (const entry of list.getEntries()) {
                if (!entry.hadRecentInput) {
                    cls += entry.value;
                }
            }
        }).observe({type: 'layout-shift', buffered: true});
    } catch (e) {}

    try {
        new PerformanceObserver((list) => {
            const entry = list.getEntries()[0];
            if (entry) {
                fid = entry.processingStart - entry.startTime;
            }
        }).observe({type: 'first-input', buffered: true});
    } catch (e) {}

    setTimeout(() => resolve({
        loadTime: navigation ? navigation.loadEventEnd - navigation.loadEventStart : 0,
        domContentLoaded: navigation
            ? navigation.domContentLoadedEventEnd - navigation.domContentLoadedEventStart
            : 0,
        firstContentfulPaint: fcp ? fcp.startTime : 0,
        largestContentfulPaint: lcp,
        cumulativeLayoutShift: cls,
        firstInputDelay: fid,
    }), settleMs);
})
"""

LAYOUT_PROBE_SCRIPT = """
() => ({
    hasViewportMeta: !!document.querySelector('meta[name="viewport"]'),
    contentWidth: document.body ? document.body.scrollWidth : 0,
    viewportWidth: window.innerWidth,
})
"""

FIRST_HEADING_SCRIPT = """
() => {
    const h1 = document.querySelector('h1');
    return h1 ? (h1.textContent || '').trim() : '';
}
"""

TECHNOLOGY_SIGNALS_SCRIPT = """
() => ({
    react: !!(window.React || window.__REACT_DEVTOOLS_GLOBAL_HOOK__),
    vue: !!(window.Vue || window.__VUE__),
    angular: !!window.angular,
    next: !!window.next,
    jquery: !!(window.jQuery || window.$),
    analytics: !!(window.ga || window.gtag || window.dataLayer),
})
"""


class AuditPage:
    """A single Playwright page with the queries an audit is allowed to run."""

    def __init__(self, page, config: BrowserConfig):
        self._page = page
        self._config = config
        self._cdp = None

    @property
    def url(self) -> str:
        return self._page.url

    @property
    def config(self) -> BrowserConfig:
        return self._config

    async def goto(self, url: str) -> None:
        """Navigate and wait for the configured completion signal."""
        await self._page.goto(
            url,
            wait_until=self._config.wait_until,
            timeout=self._config.navigation_timeout_ms,
        )

    async def reload(self) -> None:
        await self._page.reload(
            wait_until=self._config.wait_until,
            timeout=self._config.navigation_timeout_ms,
        )

    async def content(self) -> str:
        """Snapshot of the rendered DOM as HTML."""
        return await self._page.content()

    async def title(self) -> str:
        return await self._page.title()

    async def first_heading(self) -> str:
        """Trimmed text of the first H1, or an empty string."""
        return await self._page.evaluate(FIRST_HEADING_SCRIPT) or ""

    async def performance_snapshot(self, settle_ms: int = METRICS_SETTLE_MS) -> Dict[str, float]:
        """Navigation timings, paints, CLS and FID in milliseconds (CLS unitless)."""
        return await self._page.evaluate(PERFORMANCE_SNAPSHOT_SCRIPT, settle_ms)

    async def layout_probe(self) -> Dict[str, Any]:
        """Viewport meta presence and content width against the window width."""
        return await self._page.evaluate(LAYOUT_PROBE_SCRIPT)

    async def technology_signals(self) -> Dict[str, bool]:
        """Framework and analytics globals exposed on ``window``."""
        return await self._page.evaluate(TECHNOLOGY_SIGNALS_SCRIPT)

    def viewport_size(self) -> Optional[Dict[str, int]]:
        return self._page.viewport_size

    async def _cdp_session(self):
        if self._cdp is None:
            self._cdp = await self._page.context.new_cdp_session(self._page)
        return self._cdp

    async def emulate(self, viewport: ViewportConfig, user_agent: str) -> None:
        """
        Emulate a device: metrics, touch support and user agent.

        Args:
            viewport: Device profile to emulate
            user_agent: User agent sent with subsequent requests
        """
        cdp = await self._cdp_session()
        await cdp.send("Emulation.setDeviceMetricsOverride", {
            "width": viewport.width,
            "height": viewport.height,
            "deviceScaleFactor": viewport.device_scale_factor,
            "mobile": viewport.is_mobile,
        })
        await cdp.send("Emulation.setTouchEmulationEnabled", {
            "enabled": viewport.has_touch,
            "maxTouchPoints": 5 if viewport.has_touch else 0,
        })
        await cdp.send("Network.setUserAgentOverride", {"userAgent": user_agent})

    async def restore(self, viewport: Optional[Dict[str, int]], user_agent: str) -> None:
        """Drop device emulation and return to the given viewport and user agent."""
        cdp = await self._cdp_session()
        await cdp.send("Emulation.clearDeviceMetricsOverride")
        await cdp.send("Emulation.setTouchEmulationEnabled", {"enabled": False})
        await cdp.send("Network.setUserAgentOverride", {"userAgent": user_agent})
        if viewport:
            await self._page.set_viewport_size(viewport)

    async def close(self) -> None:
        if self._cdp is not None:
            try:
                await self._cdp.detach()
            except Exception as e:
                logger.debug(f"CDP session already detached: {e}")
            self._cdp = None
        await self._page.context.close()


class BrowserSession:
    """
    Isolated Playwright browser owned by one audit.

    This class is designed to be used as an async context manager, managing
    its own browser lifecycle:

        async with BrowserSession(config) as session:
            page = await session.new_page()

    Launch is bounded by ``config.launch_timeout``; a breach raises
    ``AuditTimeoutError``. Closing never raises.
    """

    def __init__(self, config: Optional[BrowserConfig] = None):
        self._config = config or BrowserConfig()
        self._playwright = None
        self._browser = None

    @property
    def config(self) -> BrowserConfig:
        return self._config

    async def __aenter__(self) -> "BrowserSession":
        """Enter async context manager, launching browser."""
        await self.launch()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context manager, closing browser."""
        await self.close()

    async def launch(self) -> None:
        await with_timeout(
            self._launch(),
            self._config.launch_timeout,
            "Timeout: unable to launch the browser",
        )

    async def _launch(self) -> None:
        from playwright.async_api import async_playwright

        logger.info(f"Launching {self._config.browser_type} browser (headless={self._config.headless})")

        self._playwright = await async_playwright().start()
        browser_launcher = getattr(self._playwright, self._config.browser_type)

        launch_options = {"headless": self._config.headless}
        if self._config.launch_args:
            launch_options["args"] = self._config.launch_args

        self._browser = await browser_launcher.launch(**launch_options)
        logger.info("Browser launched successfully")

    async def new_page(self) -> AuditPage:
        """
        Open a page in a fresh context with the desktop viewport and user agent.

        Raises:
            RuntimeError: If the browser is not running
        """
        if not self._browser:
            raise RuntimeError(
                "Browser is not running. Use BrowserSession as an async context manager: "
                "async with BrowserSession(config) as session:"
            )

        context = await self._browser.new_context(
            viewport=self._config.desktop_viewport.as_viewport(),
            user_agent=self._config.desktop_user_agent,
        )
        page = await context.new_page()
        return AuditPage(page, self._config)

    async def close(self) -> None:
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None

        logger.info("Browser closed")
