"""
Performance collector.

Reads load, paint and layout-shift measurements from the loaded page and runs
the responsive probe: the page is reloaded under mobile emulation, then under
the desktop viewport, and checked for horizontal overflow each time.
"""
import logging
from typing import List, Optional, Tuple

from webaudit.browser_config import (
    DESKTOP_USER_AGENT,
    DESKTOP_VIEWPORT,
    MOBILE_USER_AGENT,
    MOBILE_VIEWPORT,
    BrowserConfig,
)
from webaudit.constants import (
    CLS_ISSUE_THRESHOLDS,
    DESKTOP_OVERFLOW_TOLERANCE,
    FCP_ISSUE_THRESHOLDS_MS,
    FCP_SCORE_TIERS,
    FID_ISSUE_THRESHOLDS_MS,
    LCP_ISSUE_THRESHOLDS_MS,
    LCP_SCORE_TIERS,
    LOAD_TIME_ISSUE_THRESHOLDS_MS,
    LOAD_TIME_SCORE_TIERS,
    METRICS_SETTLE_MS,
    MOBILE_OVERFLOW_TOLERANCE,
    PERF_PENALTY_NOT_DESKTOP_RESPONSIVE,
    PERF_PENALTY_NOT_MOBILE_RESPONSIVE,
)
from webaudit.models import AuditIssue, IssueType, PerformanceMetrics, Severity

logger = logging.getLogger(__name__)


def _number(data: dict, key: str) -> float:
    value = data.get(key)
    return float(value) if isinstance(value, (int, float)) else 0.0


async def check_responsive_design(
    page, browser_config: Optional[BrowserConfig] = None
) -> Tuple[bool, bool]:
    """
    Probe mobile and desktop layouts for horizontal overflow.

    The original viewport and user agent are restored afterwards, even when a
    probe step fails. A failing probe counts as failing both checks.

    Args:
        page: AuditPage to probe
        browser_config: Source of the mobile/desktop profiles

    Returns:
        Tuple of (is_mobile_responsive, is_desktop_responsive)
    """
    if browser_config is not None:
        mobile_viewport = browser_config.mobile_viewport
        desktop_viewport = browser_config.desktop_viewport
        mobile_user_agent = browser_config.mobile_user_agent
        desktop_user_agent = browser_config.desktop_user_agent
    else:
        mobile_viewport, desktop_viewport = MOBILE_VIEWPORT, DESKTOP_VIEWPORT
        mobile_user_agent, desktop_user_agent = MOBILE_USER_AGENT, DESKTOP_USER_AGENT

    original_viewport = page.viewport_size()
    mobile_ok = desktop_ok = False

    try:
        await page.emulate(mobile_viewport, mobile_user_agent)
        await page.reload()
        probe = await page.layout_probe()
        mobile_ok = bool(probe.get('hasViewportMeta')) and (
            _number(probe, 'contentWidth')
            <= _number(probe, 'viewportWidth') * MOBILE_OVERFLOW_TOLERANCE
        )

        await page.emulate(desktop_viewport, desktop_user_agent)
        await page.reload()
        probe = await page.layout_probe()
        desktop_ok = (
            _number(probe, 'contentWidth')
            <= _number(probe, 'viewportWidth') * DESKTOP_OVERFLOW_TOLERANCE
        )
    except Exception as e:
        logger.warning(f"Responsive probe failed, counting both checks as failed: {e}")
        mobile_ok = desktop_ok = False
    finally:
        try:
            await page.restore(original_viewport, desktop_user_agent)
        except Exception as e:
            logger.warning(f"Failed to restore viewport after responsive probe: {e}")

    return mobile_ok, desktop_ok


async def get_performance_metrics(
    page,
    browser_config: Optional[BrowserConfig] = None,
    settle_ms: int = METRICS_SETTLE_MS,
) -> PerformanceMetrics:
    """
    Collect timings and run the responsive probe.

    Timings are read before the probe because the probe reloads the page.

    Args:
        page: Loaded AuditPage
        browser_config: Emulation profiles for the probe
        settle_ms: Observation window for layout shifts and input delay

    Returns:
        PerformanceMetrics for the page
    """
    try:
        snapshot = await page.performance_snapshot(settle_ms)
    except Exception as e:
        logger.warning(f"Failed to read performance entries: {e}")
        snapshot = {}
    snapshot = snapshot or {}

    is_mobile_responsive, is_desktop_responsive = await check_responsive_design(
        page, browser_config
    )

    return PerformanceMetrics(
        load_time=_number(snapshot, 'loadTime'),
        dom_content_loaded=_number(snapshot, 'domContentLoaded'),
        first_contentful_paint=_number(snapshot, 'firstContentfulPaint'),
        largest_contentful_paint=_number(snapshot, 'largestContentfulPaint'),
        cumulative_layout_shift=_number(snapshot, 'cumulativeLayoutShift'),
        first_input_delay=_number(snapshot, 'firstInputDelay'),
        is_mobile_responsive=is_mobile_responsive,
        is_desktop_responsive=is_desktop_responsive,
    )


def _threshold_issue(value, thresholds, message, key) -> Optional[AuditIssue]:
    medium, high = thresholds
    if value <= medium:
        return None
    severity = Severity.HIGH if value > high else Severity.MEDIUM
    return AuditIssue.create(IssueType.PERFORMANCE, message, severity, key)


def generate_performance_issues(metrics: PerformanceMetrics) -> List[AuditIssue]:
    """Build the performance issue list from collected metrics."""
    candidates = [
        _threshold_issue(
            metrics.load_time, LOAD_TIME_ISSUE_THRESHOLDS_MS,
            f"High load time: {round(metrics.load_time)}ms", "slow_load_time",
        ),
        _threshold_issue(
            metrics.first_contentful_paint, FCP_ISSUE_THRESHOLDS_MS,
            f"High First Contentful Paint: {round(metrics.first_contentful_paint)}ms", "slow_fcp",
        ),
        _threshold_issue(
            metrics.largest_contentful_paint, LCP_ISSUE_THRESHOLDS_MS,
            f"High Largest Contentful Paint: {round(metrics.largest_contentful_paint)}ms", "slow_lcp",
        ),
        _threshold_issue(
            metrics.cumulative_layout_shift, CLS_ISSUE_THRESHOLDS,
            f"High Cumulative Layout Shift: {metrics.cumulative_layout_shift:.3f}", "high_cls",
        ),
        _threshold_issue(
            metrics.first_input_delay, FID_ISSUE_THRESHOLDS_MS,
            f"High First Input Delay: {round(metrics.first_input_delay)}ms", "high_fid",
        ),
    ]
    issues = [issue for issue in candidates if issue is not None]

    if not metrics.is_mobile_responsive:
        issues.append(AuditIssue.create(
            IssueType.BEST_PRACTICES, "Site not optimized for mobile", Severity.HIGH,
            "not_mobile_responsive",
        ))

    if not metrics.is_desktop_responsive:
        issues.append(AuditIssue.create(
            IssueType.BEST_PRACTICES, "Display problems on desktop", Severity.MEDIUM,
            "desktop_responsive_issues",
        ))

    return issues


def _tier_penalty(value: float, tiers) -> int:
    """Penalty of the highest tier whose threshold ``value`` exceeds."""
    for threshold, penalty in tiers:
        if value > threshold:
            return penalty
    return 0


def calculate_performance_score(metrics: PerformanceMetrics) -> int:
    """Score collected metrics, 0-100."""
    score = 100
    score -= _tier_penalty(metrics.load_time, LOAD_TIME_SCORE_TIERS)
    score -= _tier_penalty(metrics.first_contentful_paint, FCP_SCORE_TIERS)
    score -= _tier_penalty(metrics.largest_contentful_paint, LCP_SCORE_TIERS)

    if not metrics.is_mobile_responsive:
        score -= PERF_PENALTY_NOT_MOBILE_RESPONSIVE
    if not metrics.is_desktop_responsive:
        score -= PERF_PENALTY_NOT_DESKTOP_RESPONSIVE

    return max(0, score)
