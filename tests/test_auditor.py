# tests/test_auditor.py
"""Tests for the audit orchestrator."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from webaudit.auditor import SiteAuditor, audit_site, audit_sites_sequential
from webaudit.browser_config import BrowserConfig
from webaudit.config import Config
from webaudit.models import AuditOptions, CategoryScores, IssueType
from webaudit.utils import AuditTimeoutError

from tests.conftest import FakePage, FakeSession


# No title and no canonical link: structural score 100 - 30 - 10 = 60
SEO_60_HTML = """<html><head>
  <meta name="description" content="Acme Plumbing provides emergency repairs, boiler installs and bathroom renovations across Springfield, with certified technicians available day and night.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta property="og:title" content="Acme">
  <script type="application/ld+json">{}</script>
</head><body><h1>Acme</h1><img src="x.png" alt="x"></body></html>
"""

# 6s load with good paint timings: performance score 70
SLOW_SNAPSHOT = {
    "loadTime": 6000,
    "firstContentfulPaint": 1000,
    "largestContentfulPaint": 2000,
    "cumulativeLayoutShift": 0,
    "firstInputDelay": 0,
}


def _auditor(sessions, external_analyzer=None, **config):
    """Auditor whose sessions come from ``sessions`` in order."""
    pending = list(sessions)
    return SiteAuditor(
        config=Config(**config),
        external_analyzer=external_analyzer,
        session_factory=lambda browser_config: pending.pop(0),
    )


def _external(scores=None, error=None):
    analyzer = AsyncMock()
    if error is not None:
        analyzer.score_categories.side_effect = error
    else:
        analyzer.score_categories.return_value = scores
    return analyzer


class TestSiteAuditor:
    """Test suite for SiteAuditor.run_audit."""

    def test_browser_config_from_config(self):
        """Test that runtime settings flow into the browser configuration."""
        auditor = SiteAuditor(Config(headless=False, navigation_timeout=12))

        assert auditor.browser_config.headless is False
        assert auditor.browser_config.navigation_timeout == 12

    @pytest.mark.asyncio
    async def test_successful_audit(self, fake_page):
        """Test a clean page without the external analyzer."""
        session = FakeSession(fake_page)
        auditor = _auditor([session])

        report = await auditor.run_audit("acme.example", AuditOptions(lighthouse=False))

        assert report.is_success
        assert report.url == "https://acme.example"
        assert fake_page.visited == ["https://acme.example"]
        assert report.categories == CategoryScores(
            seo=100, performance=100, accessibility=0, best_practices=0
        )
        # 100 * 0.25 + 100 * 0.35
        assert report.score == 60
        assert report.issues == ()
        assert report.page_info.title.startswith("Acme Plumbing")
        assert report.page_info.first_h1 == "Acme Plumbing"
        assert report.quick_wins == ()
        assert len(report.contextual_recommendations) == 1
        assert fake_page.closed
        assert session.closed

    @pytest.mark.asyncio
    async def test_external_scores_are_reconciled(self, fake_page):
        """Test that complete external scores fill all four categories."""
        external = _external(CategoryScores(
            seo=90, performance=40, accessibility=70, best_practices=95
        ))
        auditor = _auditor([FakeSession(fake_page)], external)

        report = await auditor.run_audit("https://acme.example")

        external.score_categories.assert_awaited_once_with(fake_page, "https://acme.example")
        assert report.categories == CategoryScores(
            seo=100, performance=100, accessibility=70, best_practices=95
        )
        issue_messages = [issue["message"] for issue in report.issues]
        assert "Very low performance score: 40/100" in issue_messages
        assert "Low accessibility score: 70/100" in issue_messages

    @pytest.mark.asyncio
    async def test_external_failure_keeps_local_scores(self):
        """Test that a throwing external analyzer leaves local scores untouched."""
        page = FakePage(html=SEO_60_HTML, title="", snapshot=SLOW_SNAPSHOT)
        external = _external(error=RuntimeError("lighthouse exploded"))
        auditor = _auditor([FakeSession(page)], external)

        report = await auditor.run_audit("https://acme.example")

        assert report.is_success
        assert report.categories == CategoryScores(
            seo=60, performance=70, accessibility=0, best_practices=0
        )
        assert report.score == 40
        issue_types = {issue["type"] for issue in report.issues}
        assert IssueType.ACCESSIBILITY.value not in issue_types
        assert IssueType.BEST_PRACTICES.value not in issue_types
        assert [i["message"] for i in report.issues if i["type"] == "Performance"] == [
            "High load time: 6000ms"
        ]

    @pytest.mark.asyncio
    async def test_lighthouse_disabled_skips_external(self, fake_page):
        """Test that the external analyzer is not called when disabled."""
        external = _external(CategoryScores(1, 1, 1, 1))
        auditor = _auditor([FakeSession(fake_page)], external)

        await auditor.run_audit("https://acme.example", AuditOptions(lighthouse=False))

        external.score_categories.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_navigation_error(self, make_page):
        """Test that a DNS failure produces a classified error report."""
        page = make_page(goto_error=Exception("net::ERR_NAME_NOT_RESOLVED at https://nope.invalid"))
        session = FakeSession(page)
        auditor = _auditor([session])
        options = AuditOptions(row_id="42", company_email="ops@acme.example")

        report = await auditor.run_audit("nope.invalid", options)

        assert report.status == "error"
        assert report.message == "Site inaccessible: domain not found"
        assert report.score == 0
        assert report.issues == ()
        assert report.row_id == "42"
        assert report.company_email == "ops@acme.example"
        assert page.closed
        assert session.closed

    @pytest.mark.asyncio
    async def test_launch_timeout(self):
        """Test that a browser launch timeout is reported."""
        session = FakeSession(launch_error=AuditTimeoutError("Timeout: unable to launch the browser"))
        auditor = _auditor([session])

        report = await auditor.run_audit("https://acme.example")

        assert report.message == "Timeout: unable to launch the browser"
        assert session.closed

    @pytest.mark.asyncio
    async def test_navigation_timeout(self, make_page):
        """Test that a hanging navigation is cut off."""
        page = make_page()

        async def hang(url):
            await asyncio.sleep(10)

        page.goto = hang
        auditor = _auditor([FakeSession(page)])
        auditor.browser_config = BrowserConfig(navigation_timeout=0.01)

        report = await auditor.run_audit("https://acme.example")

        assert report.message == "Timeout: site unreachable"
        assert page.closed

    @pytest.mark.asyncio
    async def test_page_crash_during_analysis(self, make_page):
        """Test that an unusable page yields an error report, not fabricated findings."""
        page = make_page()
        page.content = AsyncMock(side_effect=RuntimeError("Target crashed"))
        session = FakeSession(page)
        auditor = _auditor([session])

        report = await auditor.run_audit("https://acme.example", AuditOptions(lighthouse=False))

        assert report.status == "error"
        assert report.message == "Error: Target crashed"
        assert session.closed

    @pytest.mark.asyncio
    async def test_page_info_failure_degrades(self, make_page):
        """Test that page info errors leave empty identity fields."""
        page = make_page()
        page.title = AsyncMock(side_effect=RuntimeError("no title"))
        auditor = _auditor([FakeSession(page)])

        report = await auditor.run_audit("https://acme.example", AuditOptions(lighthouse=False))

        assert report.is_success
        assert report.page_info.title == ""
        assert report.page_info.first_h1 == ""

    @pytest.mark.asyncio
    async def test_close_failures_are_swallowed(self, fake_page):
        """Test that cleanup errors never replace the report."""
        fake_page.close = AsyncMock(side_effect=RuntimeError("already closed"))
        session = FakeSession(fake_page)
        session.close = AsyncMock(side_effect=RuntimeError("browser gone"))
        auditor = _auditor([session])

        report = await auditor.run_audit("https://acme.example", AuditOptions(lighthouse=False))

        assert report.is_success
        session.close.assert_awaited_once()


class TestAuditSite:
    """Test suite for audit_site and the whole-audit ceiling."""

    @pytest.mark.asyncio
    async def test_ceiling_breach(self, make_page):
        """Test that an audit exceeding the ceiling is cancelled and cleaned up."""
        page = make_page()

        async def stall(settle_ms=0):
            await asyncio.sleep(10)

        page.performance_snapshot = stall
        session = FakeSession(page)
        auditor = _auditor([session], audit_timeout=0.05)

        report = await audit_site("acme.example", AuditOptions(lighthouse=False, row_id="7"), auditor)

        assert report.status == "error"
        assert report.url == "https://acme.example"
        assert report.message == "Timeout: analysis took too long"
        assert report.row_id == "7"
        assert page.closed
        assert session.closed


class TestAuditSitesSequential:
    """Test suite for audit_sites_sequential."""

    @pytest.mark.asyncio
    async def test_batch_isolates_failures(self, make_page):
        """Test that one unreachable site does not affect the others."""
        pages = [
            make_page(),
            make_page(goto_error=Exception("net::ERR_NAME_NOT_RESOLVED at https://two.invalid")),
            make_page(),
        ]
        sessions = [FakeSession(page) for page in pages]
        auditor = _auditor(sessions)
        options = AuditOptions(lighthouse=False)

        reports = await audit_sites_sequential(
            [("one.example", options), ("two.invalid", options), ("three.example", options)],
            auditor,
        )

        assert [r.url for r in reports] == [
            "https://one.example", "https://two.invalid", "https://three.example"
        ]
        assert [r.status for r in reports] == ["success", "error", "success"]
        assert reports[1].message == "Site inaccessible: domain not found"
        assert all(session.closed for session in sessions)

    @pytest.mark.asyncio
    async def test_unexpected_failure_becomes_error_report(self):
        """Test that an exception escaping an audit is contained."""
        auditor = _auditor([])
        auditor.run_audit = AsyncMock(side_effect=RuntimeError("session factory broke"))

        reports = await audit_sites_sequential([("acme.example", None)], auditor)

        assert reports[0].status == "error"
        assert reports[0].message == "Error: session factory broke"
