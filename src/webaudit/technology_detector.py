"""Technology and site type detection.

Classifies the page (ecommerce, blog, corporate, ...) from framework globals,
generator metadata and keyword heuristics on the rendered HTML. The result only
contextualizes recommendation text and never affects scores.
"""

import logging
import re
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from webaudit.models import DetectedTechnology, SiteType, TechnologyDetection

logger = logging.getLogger(__name__)


# (signal name, technology, category) for globals reported by the page
GLOBAL_SIGNALS = (
    ('react', 'React', 'framework'),
    ('vue', 'Vue.js', 'framework'),
    ('angular', 'Angular', 'framework'),
    ('next', 'Next.js', 'framework'),
    ('jquery', 'jQuery', 'library'),
    ('analytics', 'Google Analytics', 'analytics'),
)

# Generator meta substring -> (CMS name, implied site type)
GENERATOR_CMS = (
    ('wordpress', 'WordPress', SiteType.BLOG),
    ('shopify', 'Shopify', SiteType.ECOMMERCE),
    ('wix', 'Wix', None),
    ('drupal', 'Drupal', None),
    ('joomla', 'Joomla', None),
)

SITE_TYPE_LABELS = {
    SiteType.ECOMMERCE: "E-commerce site",
    SiteType.BLOG: "Blog or news site",
    SiteType.CORPORATE: "Corporate / showcase site",
    SiteType.PORTFOLIO: "Portfolio",
    SiteType.LANDING: "Landing page",
    SiteType.APPLICATION: "Web application",
    SiteType.UNKNOWN: "Undetermined site type",
}

CTA_PATTERN = re.compile(r'sign up|subscribe|register|inscription', re.I)


def _contains_any(text: str, *needles: str) -> bool:
    return any(needle in text for needle in needles)


def classify_technologies(
    signals: Optional[Dict[str, bool]], html: str
) -> TechnologyDetection:
    """Detect technologies and site type from page globals and rendered HTML.

    Args:
        signals: Globals reported by ``AuditPage.technology_signals``
        html: Rendered page HTML

    Returns:
        TechnologyDetection with the first CMS and framework found
    """
    signals = signals or {}
    soup = BeautifulSoup(html or '', 'html.parser')
    content = (html or '').lower()

    technologies: List[DetectedTechnology] = []
    site_type = SiteType.UNKNOWN

    def add(name: str, category: str, confidence: str) -> None:
        if not any(t.name == name for t in technologies):
            technologies.append(DetectedTechnology(name, category, confidence))

    # Framework and analytics globals; Angular and Next.js also leave DOM markers
    dom_markers = {
        'angular': soup.select_one('[ng-app], [ng-version]') is not None,
        'next': soup.find(id='__next') is not None,
    }
    for signal, name, category in GLOBAL_SIGNALS:
        if signals.get(signal) or dom_markers.get(signal):
            add(name, category, 'high')

    # Generator metadata
    generator = soup.find('meta', attrs={'name': re.compile('^generator$', re.I)})
    generator_content = (generator.get('content') or '').lower() if generator else ''
    for needle, cms, implied_type in GENERATOR_CMS:
        if needle in generator_content:
            add(cms, 'cms', 'high')
            if implied_type is not None:
                site_type = implied_type
            break

    body_classes = ' '.join(soup.body.get('class', [])).lower() if soup.body else ''

    if 'wordpress' in body_classes or _contains_any(content, 'wp-content', 'wp-includes'):
        add('WordPress', 'cms', 'medium')
        site_type = SiteType.BLOG

    if 'shopify' in content:
        add('Shopify', 'cms', 'medium')
        site_type = SiteType.ECOMMERCE

    if _contains_any(content, 'woocommerce', 'add-to-cart', 'shopping-cart'):
        site_type = SiteType.ECOMMERCE

    # Keyword heuristics, applied only while the type is still unknown
    if site_type == SiteType.UNKNOWN:
        many_articles = len(soup.find_all('article')) > 3
        if many_articles and _contains_any(content, 'blog', 'article', 'post'):
            site_type = SiteType.BLOG

    if site_type == SiteType.UNKNOWN:
        has_services = _contains_any(content, 'service', 'solution')
        has_about = _contains_any(content, 'about', 'à propos')
        has_contact = _contains_any(content, 'contact', 'contactez')
        if has_services and has_about and has_contact:
            site_type = SiteType.CORPORATE

    if site_type == SiteType.UNKNOWN:
        has_portfolio = _contains_any(content, 'portfolio', 'projets', 'réalisations')
        has_gallery = soup.select_one('.gallery, .portfolio, .projects') is not None
        if has_portfolio or has_gallery:
            site_type = SiteType.PORTFOLIO

    if site_type == SiteType.UNKNOWN:
        has_cta = len(CTA_PATTERN.findall(content)) > 2
        has_hero = soup.select_one('.hero, .banner, .jumbotron') is not None
        submit_count = len(soup.select('button[type="submit"], input[type="submit"], .cta'))
        if has_cta and has_hero and submit_count <= 3:
            site_type = SiteType.LANDING

    cms = next((t.name for t in technologies if t.category == 'cms'), None)
    framework = next((t.name for t in technologies if t.category == 'framework'), None)

    return TechnologyDetection(
        technologies=tuple(technologies),
        site_type=site_type,
        cms=cms,
        framework=framework,
    )


async def detect_technologies(page) -> TechnologyDetection:
    """Detect technologies on the loaded page.

    Failures degrade to an empty, unknown classification.
    """
    try:
        signals = await page.technology_signals()
        html = await page.content()
        detection = classify_technologies(signals, html)
    except Exception as e:
        logger.warning(f"Technology detection failed: {e}")
        return TechnologyDetection()

    logger.debug(
        f"Detected site type {detection.site_type.value} "
        f"({', '.join(t.name for t in detection.technologies) or 'no technologies'})"
    )
    return detection


def get_site_type_label(site_type: SiteType) -> str:
    """Human readable label for a site type."""
    return SITE_TYPE_LABELS.get(site_type, SITE_TYPE_LABELS[SiteType.UNKNOWN])
