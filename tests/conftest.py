# tests/conftest.py
"""Shared fixtures: an in-memory stand-in for AuditPage and a fake browser session."""

import pytest


GOOD_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>Acme Plumbing - Emergency repairs and installs | Springfield</title>
  <meta name="description" content="Acme Plumbing provides emergency repairs, boiler installs and bathroom renovations across Springfield, with certified technicians available day and night.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="canonical" href="https://acme.example/">
  <meta property="og:title" content="Acme Plumbing">
  <script type="application/ld+json">{"@type": "LocalBusiness"}</script>
</head>
<body>
  <h1>Acme Plumbing</h1>
  <h2>Our services</h2>
  <img src="/van.jpg" alt="Acme van">
</body>
</html>
"""

GOOD_SNAPSHOT = {
    "loadTime": 1200,
    "domContentLoaded": 800,
    "firstContentfulPaint": 900,
    "largestContentfulPaint": 1500,
    "cumulativeLayoutShift": 0.01,
    "firstInputDelay": 0,
}

RESPONSIVE_PROBE = {"hasViewportMeta": True, "contentWidth": 375, "viewportWidth": 375}


class FakePage:
    """Records calls made by the analyzers and answers with canned data."""

    def __init__(
        self,
        html=GOOD_HTML,
        title="Acme Plumbing - Emergency repairs and installs | Springfield",
        first_heading="Acme Plumbing",
        snapshot=None,
        probes=None,
        signals=None,
        viewport=None,
        goto_error=None,
        reload_error=None,
    ):
        self.html = html
        self._title = title
        self._first_heading = first_heading
        self.snapshot = GOOD_SNAPSHOT if snapshot is None else snapshot
        self.probes = list(probes) if probes is not None else [RESPONSIVE_PROBE, RESPONSIVE_PROBE]
        self.signals = signals or {}
        self.viewport = viewport or {"width": 1920, "height": 1080}
        self.goto_error = goto_error
        self.reload_error = reload_error

        self.visited = []
        self.emulations = []
        self.restored = []
        self.reloads = 0
        self.closed = False

    async def goto(self, url):
        if self.goto_error:
            raise self.goto_error
        self.visited.append(url)

    async def reload(self):
        if self.reload_error:
            raise self.reload_error
        self.reloads += 1

    async def content(self):
        return self.html

    async def title(self):
        return self._title

    async def first_heading(self):
        return self._first_heading

    async def performance_snapshot(self, settle_ms=0):
        return self.snapshot

    async def layout_probe(self):
        return self.probes.pop(0)

    async def technology_signals(self):
        return self.signals

    def viewport_size(self):
        return self.viewport

    async def emulate(self, viewport, user_agent):
        self.emulations.append((viewport, user_agent))

    async def restore(self, viewport, user_agent):
        self.restored.append((viewport, user_agent))

    async def close(self):
        self.closed = True


class FakeSession:
    """BrowserSession stand-in handing out one prepared page."""

    def __init__(self, page=None, launch_error=None):
        self.page = page
        self.launch_error = launch_error
        self.launched = False
        self.closed = False

    async def launch(self):
        if self.launch_error:
            raise self.launch_error
        self.launched = True

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_page():
    """A well-formed, fast, responsive page."""
    return FakePage()


@pytest.fixture
def make_page():
    """Factory for FakePage instances with custom behaviour."""
    return FakePage


@pytest.fixture
def make_session():
    """Factory for FakeSession instances."""
    return FakeSession
