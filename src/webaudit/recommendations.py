"""
Recommendation engine.

Turns the merged issue list into the narrative parts of a report: the short
summary, ranked recommendations, site-aware contextual recommendations, quick
wins and site type advice. All functions are pure.
"""

from typing import List, Optional, Sequence

from webaudit.constants import (
    MAX_CONTEXTUAL_RECOMMENDATIONS,
    MAX_QUICK_WINS,
    MAX_RECOMMENDATIONS,
    QUICK_WIN_KEYS,
)
from webaudit.messages import get_message
from webaudit.models import (
    AuditIssue,
    ContextualRecommendation,
    IssueType,
    Priority,
    Severity,
    SiteType,
)


# Issues without a catalog priority sort with enhancements
UNKNOWN_PRIORITY_RANK = Priority.ENHANCEMENT.rank

GENERIC_RECOMMENDATIONS = (
    "Keep monitoring load times regularly with PageSpeed Insights",
    "Keep page titles, meta descriptions and content up to date",
    "Check accessibility again after every significant redesign",
    "Keep your CMS, plugins and front-end libraries up to date",
)

WELL_OPTIMIZED = ContextualRecommendation(
    title="Site is well optimized overall",
    description=(
        "Your site follows most web best practices. Keep monitoring performance "
        "and SEO regularly to maintain this level of quality."
    ),
    priority=Priority.ENHANCEMENT,
    estimated_time="Ongoing maintenance",
    impact="Keeps current quality and performance",
)

WORDPRESS_SEO_CONTEXT = (
    " With WordPress, plugins such as Yoast SEO or Rank Math make these fixes easy."
)

SHOPIFY_ECOMMERCE_CONTEXT = (
    " For your Shopify store, these optimizations can directly increase sales by 15-30%."
)


def _count(issues: Sequence[AuditIssue], severity: Severity) -> int:
    return sum(1 for issue in issues if issue.severity == severity)


def _effort_estimate(high_count: int) -> str:
    if high_count > 5:
        return "2-5 days"
    if high_count > 2:
        return "1-2 days"
    return "a few hours"


def generate_short_summary(issues: Sequence[AuditIssue], score: int) -> str:
    """One-sentence verdict for the overall score band.

    Args:
        issues: Merged issue list
        score: Overall score

    Returns:
        Summary mentioning the high and medium severity counts
    """
    high = _count(issues, Severity.HIGH)
    medium = _count(issues, Severity.MEDIUM)
    counts = f"{high} critical issue(s) and {medium} moderate issue(s)"

    if score >= 90:
        return f"Excellent site with very good results overall; {counts} remaining."
    if score >= 75:
        return f"Good site with some room for improvement: {counts} to address."
    if score >= 50:
        return f"Decent site that needs significant optimization: {counts} detected."
    return (
        f"Site needs major improvements: {counts} detected. "
        f"Estimated effort: {_effort_estimate(high)}."
    )


def _priority_rank(issue: AuditIssue) -> int:
    return issue.priority.rank if issue.priority is not None else UNKNOWN_PRIORITY_RANK


def prioritize_issues(issues: Sequence[AuditIssue]) -> List[AuditIssue]:
    """High severity issues by catalog priority, then medium severity issues.

    Both sorts are stable, so ties keep discovery order. Low severity issues
    are dropped.
    """
    high = sorted(
        (issue for issue in issues if issue.severity == Severity.HIGH),
        key=_priority_rank,
    )
    medium = [issue for issue in issues if issue.severity == Severity.MEDIUM]
    return high + medium


def generate_recommendations(issues: Sequence[AuditIssue]) -> List[str]:
    """Ranked, actionable recommendation strings (at most 7)."""
    ranked = prioritize_issues(issues)[:MAX_RECOMMENDATIONS]
    if not ranked:
        return list(GENERIC_RECOMMENDATIONS)
    return [issue.action or issue.message for issue in ranked]


def _estimated_time(key: str) -> str:
    if "low_" in key or "score" in key:
        return "1-3 days"
    if "mobile" in key or "performance" in key or "accessibility" in key:
        return "2-4 hours"
    return "15-30 minutes"


def generate_contextual_recommendations(
    issues: Sequence[AuditIssue],
    site_type: SiteType = SiteType.UNKNOWN,
    cms: Optional[str] = None,
) -> List[ContextualRecommendation]:
    """
    Structured recommendations, one per catalog key, tailored to the site.

    Args:
        issues: Merged issue list
        site_type: Detected site type
        cms: Detected CMS name, if any

    Returns:
        At most 7 recommendations, or a single "well optimized" entry
    """
    recommendations: List[ContextualRecommendation] = []
    seen_keys = set()

    for issue in prioritize_issues(issues):
        if len(recommendations) >= MAX_CONTEXTUAL_RECOMMENDATIONS:
            break

        key = issue.message_key
        if not key or key in seen_keys:
            continue

        message = get_message(key)
        if message is None:
            continue
        seen_keys.add(key)

        description = message.description
        if cms == "WordPress" and "seo" in key:
            description += WORDPRESS_SEO_CONTEXT
        if cms == "Shopify" and site_type == SiteType.ECOMMERCE:
            description += SHOPIFY_ECOMMERCE_CONTEXT

        recommendations.append(ContextualRecommendation(
            title=message.short,
            description=f"{description}\n\n{message.action}",
            priority=message.priority,
            estimated_time=_estimated_time(key),
            impact=message.impact,
        ))

    if not recommendations:
        recommendations.append(WELL_OPTIMIZED)

    return recommendations


def generate_quick_wins(issues: Sequence[AuditIssue]) -> List[str]:
    """Up to 3 fast fixes in discovery order, one per catalog key."""
    quick_wins: List[str] = []
    seen_keys = set()

    for issue in issues:
        if len(quick_wins) >= MAX_QUICK_WINS:
            break

        key = issue.message_key
        if key not in QUICK_WIN_KEYS or key in seen_keys:
            continue

        message = get_message(key)
        if message is None:
            continue
        seen_keys.add(key)

        quick_win = f"{message.short}: {message.action}"
        if message.code_example:
            quick_win += f"\n\nCode example:\n{message.code_example}"
        quick_wins.append(quick_win)

    return quick_wins


def _has_high(issues: Sequence[AuditIssue], issue_type: IssueType) -> bool:
    return any(
        issue.type == issue_type and issue.severity == Severity.HIGH for issue in issues
    )


def generate_site_type_advice(site_type: SiteType, issues: Sequence[AuditIssue]) -> str:
    """Fixed advice for the site type, adjusted to the high severity issues found."""
    performance = _has_high(issues, IssueType.PERFORMANCE)
    seo = _has_high(issues, IssueType.SEO)
    accessibility = _has_high(issues, IssueType.ACCESSIBILITY)

    if site_type == SiteType.ECOMMERCE:
        parts = [
            "For an e-commerce site, performance is critical: every extra second of "
            "load time can cut sales by 7%.",
            "Your current performance problems directly affect revenue."
            if performance
            else "Keep performance high to maximize conversions.",
            "SEO is also crucial to attract qualified traffic for free." if seo else "",
        ]
    elif site_type == SiteType.BLOG:
        parts = [
            "For a blog, SEO is your main growth lever.",
            "Fixing your SEO problems can multiply organic traffic by 2 to 5."
            if seo
            else "Keep optimizing SEO to attract more readers.",
            "Load speed also affects your Google ranking.",
        ]
    elif site_type == SiteType.CORPORATE:
        parts = [
            "For a corporate site, a professional image and credibility are essential.",
            "Accessibility problems can expose you to legal risk and hurt your image."
            if accessibility
            else "",
            "Good SEO lets prospects find you when they search for your services."
            if seo
            else "",
        ]
    elif site_type == SiteType.LANDING:
        parts = [
            "For a landing page, the goal is conversion.",
            "Your performance problems drive visitors away before they even see your offer."
            if performance
            else "Keep load times minimal to maximize conversions.",
            "Every second counts when turning a visitor into a customer.",
        ]
    elif site_type == SiteType.PORTFOLIO:
        parts = [
            "For a portfolio, visual quality and fast rendering are key.",
            "Heavy images slow your site down and leave a poor impression."
            if performance
            else "Keep optimizing your images for fast, professional rendering.",
            "Good SEO will help potential clients find you." if seo else "",
        ]
    elif site_type == SiteType.APPLICATION:
        parts = [
            "For a web application, performance and accessibility come first.",
            "Slowdowns frustrate users and push them toward competitors."
            if performance
            else "",
            "Accessibility is not optional: it ensures every user can use your application."
            if accessibility
            else "",
        ]
    else:
        parts = [
            "Focus first on critical issues before moving on to less urgent optimizations."
        ]

    return " ".join(part for part in parts if part)
