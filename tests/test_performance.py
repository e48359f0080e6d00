# tests/test_performance.py
"""Tests for the performance collector and responsive probe."""

from unittest.mock import AsyncMock, Mock

import pytest

from webaudit.browser_config import (
    DESKTOP_USER_AGENT,
    DESKTOP_VIEWPORT,
    MOBILE_USER_AGENT,
    MOBILE_VIEWPORT,
    BrowserConfig,
    ViewportConfig,
)
from webaudit.models import IssueType, PerformanceMetrics, Severity
from webaudit.performance import (
    calculate_performance_score,
    check_responsive_design,
    generate_performance_issues,
    get_performance_metrics,
)


def _metrics(**overrides):
    values = dict(
        load_time=1000,
        first_contentful_paint=1000,
        largest_contentful_paint=2000,
        cumulative_layout_shift=0,
        first_input_delay=0,
        is_mobile_responsive=True,
        is_desktop_responsive=True,
    )
    values.update(overrides)
    return PerformanceMetrics(**values)


class TestCheckResponsiveDesign:
    """Test suite for the responsive probe."""

    @pytest.mark.asyncio
    async def test_responsive_page(self, fake_page):
        """Test a page that fits both viewports."""
        mobile_ok, desktop_ok = await check_responsive_design(fake_page)

        assert (mobile_ok, desktop_ok) == (True, True)
        assert fake_page.emulations == [
            (MOBILE_VIEWPORT, MOBILE_USER_AGENT),
            (DESKTOP_VIEWPORT, DESKTOP_USER_AGENT),
        ]
        assert fake_page.reloads == 2

    @pytest.mark.asyncio
    async def test_viewport_restored(self, make_page):
        """Test that the original viewport is restored after probing."""
        page = make_page(viewport={"width": 1280, "height": 720})

        await check_responsive_design(page)

        assert page.restored == [({"width": 1280, "height": 720}, DESKTOP_USER_AGENT)]

    @pytest.mark.asyncio
    async def test_missing_viewport_meta_fails_mobile(self, make_page):
        """Test that mobile requires a viewport meta tag."""
        page = make_page(probes=[
            {"hasViewportMeta": False, "contentWidth": 375, "viewportWidth": 375},
            {"hasViewportMeta": False, "contentWidth": 1920, "viewportWidth": 1920},
        ])

        assert await check_responsive_design(page) == (False, True)

    @pytest.mark.asyncio
    async def test_overflow_tolerances(self, make_page):
        """Test the 10% mobile and 5% desktop overflow allowances."""
        page = make_page(probes=[
            {"hasViewportMeta": True, "contentWidth": 412, "viewportWidth": 375},
            {"hasViewportMeta": True, "contentWidth": 2010, "viewportWidth": 1920},
        ])

        assert await check_responsive_design(page) == (True, True)

        page = make_page(probes=[
            {"hasViewportMeta": True, "contentWidth": 413, "viewportWidth": 375},
            {"hasViewportMeta": True, "contentWidth": 2017, "viewportWidth": 1920},
        ])

        assert await check_responsive_design(page) == (False, False)

    @pytest.mark.asyncio
    async def test_probe_failure_fails_both_and_restores(self, make_page):
        """Test that a probe error counts as failing both checks."""
        page = make_page(reload_error=RuntimeError("Target closed"))

        assert await check_responsive_design(page) == (False, False)
        assert len(page.restored) == 1

    @pytest.mark.asyncio
    async def test_restore_failure_is_swallowed(self):
        """Test that a failing restore does not propagate."""
        page = AsyncMock()
        page.viewport_size = Mock(return_value={"width": 1920, "height": 1080})
        page.layout_probe.return_value = {
            "hasViewportMeta": True, "contentWidth": 100, "viewportWidth": 100
        }
        page.restore.side_effect = RuntimeError("context closed")

        assert await check_responsive_design(page) == (True, True)
        page.restore.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_uses_configured_profiles(self, fake_page):
        """Test that the browser configuration supplies the emulation profiles."""
        tablet = ViewportConfig(width=768, height=1024, is_mobile=True, has_touch=True)
        config = BrowserConfig(mobile_viewport=tablet, mobile_user_agent="TabletUA")

        await check_responsive_design(fake_page, config)

        assert fake_page.emulations[0] == (tablet, "TabletUA")


class TestGetPerformanceMetrics:
    """Test suite for metric collection."""

    @pytest.mark.asyncio
    async def test_collects_snapshot_and_probe(self, fake_page):
        """Test that timings and probe results are combined."""
        metrics = await get_performance_metrics(fake_page, settle_ms=0)

        assert metrics.load_time == 1200
        assert metrics.dom_content_loaded == 800
        assert metrics.first_contentful_paint == 900
        assert metrics.largest_contentful_paint == 1500
        assert metrics.cumulative_layout_shift == pytest.approx(0.01)
        assert metrics.is_mobile_responsive is True
        assert metrics.is_desktop_responsive is True

    @pytest.mark.asyncio
    async def test_missing_entries_default_to_zero(self, make_page):
        """Test that absent or non-numeric entries become 0."""
        page = make_page(snapshot={"loadTime": None, "firstContentfulPaint": "n/a"})

        metrics = await get_performance_metrics(page, settle_ms=0)

        assert metrics.load_time == 0
        assert metrics.first_contentful_paint == 0
        assert metrics.largest_contentful_paint == 0

    @pytest.mark.asyncio
    async def test_snapshot_failure_still_probes(self):
        """Test that a failing snapshot degrades to zeros."""
        page = AsyncMock()
        page.viewport_size = Mock(return_value=None)
        page.performance_snapshot.side_effect = RuntimeError("Execution context was destroyed")
        page.layout_probe.return_value = {
            "hasViewportMeta": True, "contentWidth": 100, "viewportWidth": 100
        }

        metrics = await get_performance_metrics(page, settle_ms=0)

        assert metrics.load_time == 0
        assert metrics.is_mobile_responsive is True


class TestGeneratePerformanceIssues:
    """Test suite for performance issue rules."""

    def test_slow_load_only(self):
        """Test a 6s load with otherwise good metrics."""
        issues = generate_performance_issues(_metrics(load_time=6000))

        assert len(issues) == 1
        assert issues[0].message_key == "slow_load_time"
        assert issues[0].severity == Severity.HIGH
        assert issues[0].type == IssueType.PERFORMANCE
        assert issues[0].message == "High load time: 6000ms"

    def test_medium_thresholds(self):
        """Test values between the medium and high thresholds."""
        issues = generate_performance_issues(_metrics(
            load_time=4000,
            first_contentful_paint=2000,
            largest_contentful_paint=3000,
            cumulative_layout_shift=0.2,
            first_input_delay=200,
        ))

        assert [i.message_key for i in issues] == [
            "slow_load_time", "slow_fcp", "slow_lcp", "high_cls", "high_fid"
        ]
        assert all(i.severity == Severity.MEDIUM for i in issues)

    def test_boundaries_are_exclusive(self):
        """Test that values equal to a threshold produce no issue."""
        issues = generate_performance_issues(_metrics(
            load_time=3000,
            first_contentful_paint=1800,
            largest_contentful_paint=2500,
            cumulative_layout_shift=0.1,
            first_input_delay=100,
        ))

        assert issues == []

    def test_cls_message_format(self):
        """Test that CLS is reported with three decimals."""
        issues = generate_performance_issues(_metrics(cumulative_layout_shift=0.3))

        assert issues[0].message == "High Cumulative Layout Shift: 0.300"
        assert issues[0].severity == Severity.HIGH

    def test_responsive_issues(self):
        """Test mobile and desktop layout issues."""
        issues = generate_performance_issues(_metrics(
            is_mobile_responsive=False, is_desktop_responsive=False
        ))
        by_key = {i.message_key: i for i in issues}

        assert by_key["not_mobile_responsive"].severity == Severity.HIGH
        assert by_key["not_mobile_responsive"].type == IssueType.BEST_PRACTICES
        assert by_key["desktop_responsive_issues"].severity == Severity.MEDIUM


class TestCalculatePerformanceScore:
    """Test suite for the performance score."""

    def test_slow_load_scenario(self):
        """Test a 6s load with good paint timings."""
        assert calculate_performance_score(_metrics(load_time=6000)) == 70

    def test_fast_page(self):
        """Test a fast, responsive page."""
        assert calculate_performance_score(_metrics()) == 100

    @pytest.mark.parametrize("load_time,expected", [
        (2000, 100),
        (2001, 90),
        (3001, 80),
        (5001, 70),
    ])
    def test_load_time_tiers(self, load_time, expected):
        """Test load time deduction tiers."""
        assert calculate_performance_score(_metrics(load_time=load_time)) == expected

    def test_paint_tiers(self):
        """Test FCP and LCP deductions stack."""
        metrics = _metrics(first_contentful_paint=3500, largest_contentful_paint=2600)

        assert calculate_performance_score(metrics) == 100 - 25 - 15

    def test_responsive_penalties(self):
        """Test layout penalties."""
        metrics = _metrics(is_mobile_responsive=False, is_desktop_responsive=False)

        assert calculate_performance_score(metrics) == 70

    def test_clamped_to_zero(self):
        """Test that the score never goes negative."""
        metrics = _metrics(
            load_time=9000,
            first_contentful_paint=9000,
            largest_contentful_paint=9000,
            is_mobile_responsive=False,
            is_desktop_responsive=False,
        )

        assert calculate_performance_score(metrics) == 0

    @pytest.mark.parametrize("overrides", [
        {"load_time": 2001},
        {"load_time": 5001},
        {"first_contentful_paint": 1501},
        {"first_contentful_paint": 3001},
        {"largest_contentful_paint": 2001},
        {"largest_contentful_paint": 4001},
        {"is_mobile_responsive": False},
        {"is_desktop_responsive": False},
    ])
    def test_crossing_any_threshold_lowers_score(self, overrides):
        """Test that a single metric past its threshold scores below a clean page."""
        baseline = calculate_performance_score(_metrics())

        assert baseline == 100
        assert calculate_performance_score(_metrics(**overrides)) < baseline
