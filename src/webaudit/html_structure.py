"""Structural analyzer: meta tags, headings and image alt text of a rendered page."""

import re
from typing import List

from bs4 import BeautifulSoup

from webaudit.constants import (
    META_DESCRIPTION_MAX_LENGTH,
    META_DESCRIPTION_MIN_LENGTH,
    SEO_PENALTY_IMAGES_CAP,
    SEO_PENALTY_MISSING_CANONICAL,
    SEO_PENALTY_MISSING_H1,
    SEO_PENALTY_MISSING_META_DESCRIPTION,
    SEO_PENALTY_MISSING_TITLE,
    SEO_PENALTY_MISSING_VIEWPORT,
    SEO_PENALTY_PER_IMAGE_WITHOUT_ALT,
    SEVERITY_ESCALATION_IMAGES_THRESHOLD,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from webaudit.models import AuditIssue, HTMLAnalysis, IssueType, Severity


OPEN_GRAPH_PROPERTY = re.compile(r'^og:', re.I)


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    tag = soup.find('meta', attrs={'name': re.compile(f'^{name}$', re.I)})
    if not tag:
        return ''
    return (tag.get('content') or '').strip()


def extract_html_analysis(html: str) -> HTMLAnalysis:
    """Derive structural findings from an HTML snapshot.

    Args:
        html: Rendered page HTML

    Returns:
        HTMLAnalysis for the snapshot
    """
    soup = BeautifulSoup(html or '', 'html.parser')

    title_tag = soup.find('title')
    title = title_tag.get_text().strip() if title_tag else ''
    meta_description = _meta_content(soup, 'description')
    meta_keywords = _meta_content(soup, 'keywords')

    heading_structure = {
        f'h{level}': len(soup.find_all(f'h{level}')) for level in range(1, 7)
    }

    images = soup.find_all('img')
    images_without_alt = sum(
        1 for img in images if not (img.get('alt') or '').strip()
    )

    has_structured_data = bool(
        soup.find('script', type='application/ld+json')
        or soup.find(attrs={'itemscope': True})
    )

    return HTMLAnalysis(
        has_title=bool(title),
        title_length=len(title),
        has_meta_description=bool(meta_description),
        meta_description_length=len(meta_description),
        has_meta_keywords=bool(meta_keywords),
        heading_structure=heading_structure,
        images_without_alt=images_without_alt,
        total_images=len(images),
        has_viewport_meta=soup.find('meta', attrs={'name': re.compile('^viewport$', re.I)}) is not None,
        has_canonical_link=soup.find('link', rel='canonical') is not None,
        has_open_graph=soup.find('meta', attrs={'property': OPEN_GRAPH_PROPERTY}) is not None,
        has_structured_data=has_structured_data,
    )


async def analyze_html_structure(page) -> HTMLAnalysis:
    """Snapshot the page DOM and analyze it.

    Args:
        page: AuditPage (or anything with an async ``content()``)

    Returns:
        HTMLAnalysis of the current DOM
    """
    html = await page.content()
    return extract_html_analysis(html)


def generate_html_issues(analysis: HTMLAnalysis) -> List[AuditIssue]:
    """Build the structural issue list. Every rule is evaluated independently."""
    issues = []

    # Title
    if not analysis.has_title:
        issues.append(AuditIssue.create(
            IssueType.SEO, "Missing page title", Severity.HIGH, "missing_title"
        ))
    elif analysis.title_length < TITLE_MIN_LENGTH:
        issues.append(AuditIssue.create(
            IssueType.SEO,
            f"Page title too short ({analysis.title_length} characters)",
            Severity.MEDIUM,
            "title_too_short",
        ))
    elif analysis.title_length > TITLE_MAX_LENGTH:
        issues.append(AuditIssue.create(
            IssueType.SEO,
            f"Page title too long ({analysis.title_length} characters)",
            Severity.MEDIUM,
            "title_too_long",
        ))

    # Meta description
    if not analysis.has_meta_description:
        issues.append(AuditIssue.create(
            IssueType.SEO, "Missing meta description", Severity.HIGH, "missing_meta_description"
        ))
    elif analysis.meta_description_length < META_DESCRIPTION_MIN_LENGTH:
        issues.append(AuditIssue.create(
            IssueType.SEO,
            f"Meta description too short ({analysis.meta_description_length} characters)",
            Severity.MEDIUM,
            "meta_description_too_short",
        ))
    elif analysis.meta_description_length > META_DESCRIPTION_MAX_LENGTH:
        issues.append(AuditIssue.create(
            IssueType.SEO,
            f"Meta description too long ({analysis.meta_description_length} characters)",
            Severity.MEDIUM,
            "meta_description_too_long",
        ))

    if not analysis.has_viewport_meta:
        issues.append(AuditIssue.create(
            IssueType.BEST_PRACTICES,
            "Missing viewport meta tag for responsive design",
            Severity.HIGH,
            "missing_viewport_meta",
        ))

    if not analysis.has_canonical_link:
        issues.append(AuditIssue.create(
            IssueType.SEO, "Missing canonical link", Severity.MEDIUM, "missing_canonical_link"
        ))

    # Headings
    h1_count = analysis.heading_structure.get('h1', 0)
    if h1_count == 0:
        issues.append(AuditIssue.create(
            IssueType.HTML_STRUCTURE, "No H1 heading found", Severity.HIGH, "missing_h1"
        ))
    elif h1_count > 1:
        issues.append(AuditIssue.create(
            IssueType.HTML_STRUCTURE,
            f"{h1_count} H1 headings found (one is recommended)",
            Severity.MEDIUM,
            "multiple_h1",
        ))

    if analysis.images_without_alt > 0:
        severity = (
            Severity.HIGH
            if analysis.images_without_alt > SEVERITY_ESCALATION_IMAGES_THRESHOLD
            else Severity.MEDIUM
        )
        issues.append(AuditIssue.create(
            IssueType.ACCESSIBILITY,
            f"{analysis.images_without_alt} image(s) without alt attribute",
            severity,
            "images_without_alt",
        ))

    if analysis.heading_structure.get('h2', 0) > 0 and h1_count == 0:
        issues.append(AuditIssue.create(
            IssueType.HTML_STRUCTURE, "H2 headings present without an H1", Severity.MEDIUM, "h2_without_h1"
        ))

    # Open Graph and structured data are recorded on the analysis only
    return issues


def calculate_seo_score(analysis: HTMLAnalysis) -> int:
    """Score presence of the key SEO elements, 0-100.

    Length problems are reported as issues but never penalized here.
    """
    score = 100

    if not analysis.has_title:
        score -= SEO_PENALTY_MISSING_TITLE
    if not analysis.has_meta_description:
        score -= SEO_PENALTY_MISSING_META_DESCRIPTION
    if not analysis.has_viewport_meta:
        score -= SEO_PENALTY_MISSING_VIEWPORT
    if not analysis.has_canonical_link:
        score -= SEO_PENALTY_MISSING_CANONICAL
    if analysis.heading_structure.get('h1', 0) == 0:
        score -= SEO_PENALTY_MISSING_H1
    if analysis.images_without_alt > 0:
        score -= min(
            SEO_PENALTY_IMAGES_CAP,
            analysis.images_without_alt * SEO_PENALTY_PER_IMAGE_WITHOUT_ALT,
        )

    return max(0, score)
