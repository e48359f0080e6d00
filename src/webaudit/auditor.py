"""
Audit orchestrator.

Drives one browser session per audit: navigate, run the analyzers against the
loaded page, optionally ask the external analyzer for category scores, then
reconcile everything into a single AuditReport.

    auditor = SiteAuditor()
    report = await audit_site("example.com", AuditOptions(lighthouse=False), auditor)
"""
import logging
from typing import Iterable, List, Optional, Tuple

from webaudit.browser import BrowserSession
from webaudit.browser_config import BrowserConfig
from webaudit.config import Config
from webaudit.html_structure import (
    analyze_html_structure,
    calculate_seo_score,
    generate_html_issues,
)
from webaudit.lighthouse_runner import create_external_analyzer, generate_lighthouse_issues
from webaudit.models import AuditOptions, AuditReport, CategoryScores, PageInfo
from webaudit.performance import (
    calculate_performance_score,
    generate_performance_issues,
    get_performance_metrics,
)
from webaudit.recommendations import (
    generate_contextual_recommendations,
    generate_quick_wins,
    generate_recommendations,
    generate_short_summary,
    generate_site_type_advice,
)
from webaudit.scoring import (
    calculate_overall_score,
    merge_issues,
    reconcile_categories,
    simplify_issues,
)
from webaudit.technology_detector import detect_technologies
from webaudit.utils import (
    DEFAULT_TIMEOUT_MESSAGE,
    AuditTimeoutError,
    classify_error,
    normalize_url,
    with_timeout,
)

logger = logging.getLogger(__name__)


class SiteAuditor:
    """Runs complete audits, one isolated browser session each."""

    def __init__(
        self,
        config: Optional[Config] = None,
        browser_config: Optional[BrowserConfig] = None,
        external_analyzer=None,
        session_factory=BrowserSession,
    ):
        """
        Initialize the auditor.

        Args:
            config: Runtime configuration (defaults to the environment)
            browser_config: Browser settings; derived from ``config`` when omitted
            external_analyzer: Object with ``score_categories(page, url)``;
                built from ``config`` on first use when omitted
            session_factory: Callable returning a browser session for a BrowserConfig
        """
        self.config = config or Config.from_env()
        self.browser_config = browser_config or BrowserConfig(
            headless=self.config.headless,
            launch_timeout=self.config.launch_timeout,
            navigation_timeout=self.config.navigation_timeout,
        )
        self._external_analyzer = external_analyzer
        self._session_factory = session_factory

    @property
    def external_analyzer(self):
        if self._external_analyzer is None:
            self._external_analyzer = create_external_analyzer(self.config)
        return self._external_analyzer

    async def run_audit(self, url: str, options: Optional[AuditOptions] = None) -> AuditReport:
        """
        Audit a single URL.

        Browser launch and navigation failures produce an error report; page
        info, technology detection, the responsive probe and the external
        analyzer degrade locally. The page and the session are always closed.

        Args:
            url: URL to audit (``https://`` is assumed when no scheme is given)
            options: Per-audit options

        Returns:
            AuditReport with status ``success`` or ``error``
        """
        options = options or AuditOptions()
        url = normalize_url(url)
        session = self._session_factory(self.browser_config)
        page = None

        logger.info(f"Auditing {url}")
        try:
            try:
                await session.launch()
                page = await session.new_page()
                await with_timeout(
                    page.goto(url),
                    self.browser_config.navigation_timeout,
                    "Timeout: site unreachable",
                )
            except Exception as e:
                logger.error(f"Audit failed for {url}: {e}")
                return AuditReport.error(url, classify_error(e), options)

            try:
                return await self._analyze(page, url, options)
            except Exception as e:
                # The page itself became unusable (crash, closed target)
                logger.exception(f"Analysis aborted for {url}: {e}")
                return AuditReport.error(url, classify_error(e), options)
        finally:
            if page is not None:
                try:
                    await page.close()
                except Exception as e:
                    logger.warning(f"Error closing page for {url}: {e}")
            try:
                await session.close()
            except Exception as e:
                logger.warning(f"Error closing browser session for {url}: {e}")

    async def _analyze(self, page, url: str, options: AuditOptions) -> AuditReport:
        page_info = await self._extract_page_info(page)
        technologies = await detect_technologies(page)

        html_analysis = await analyze_html_structure(page)
        html_issues = generate_html_issues(html_analysis)
        seo_score = calculate_seo_score(html_analysis)

        metrics = await get_performance_metrics(page, self.browser_config)
        performance_issues = generate_performance_issues(metrics)
        performance_score = calculate_performance_score(metrics)

        external = None
        external_issues = []
        if options.lighthouse:
            external = await self._score_externally(page, url)
            external_issues = generate_lighthouse_issues(external)

        categories = reconcile_categories(seo_score, performance_score, external)
        issues = merge_issues(html_issues, performance_issues, external_issues)
        overall_score = calculate_overall_score(categories)

        logger.info(
            f"Audit complete for {url}: score={overall_score}, "
            f"{len(issues)} issue(s), site type {technologies.site_type.value}"
        )

        return AuditReport(
            status="success",
            url=url,
            score=overall_score,
            categories=categories.normalized(),
            issues=tuple(simplify_issues(issues)),
            short_summary=generate_short_summary(issues, overall_score),
            recommendations=tuple(generate_recommendations(issues)),
            page_info=page_info,
            row_id=options.row_id,
            company_email=options.company_email,
            technologies=technologies,
            contextual_recommendations=tuple(generate_contextual_recommendations(
                issues, technologies.site_type, technologies.cms
            )),
            quick_wins=tuple(generate_quick_wins(issues)),
            site_type_advice=generate_site_type_advice(technologies.site_type, issues),
        )

    async def _extract_page_info(self, page) -> PageInfo:
        try:
            title = await page.title()
            first_h1 = await page.first_heading()
        except Exception as e:
            logger.warning(f"Failed to extract page info: {e}")
            return PageInfo()
        return PageInfo(title=(title or "").strip(), first_h1=first_h1 or "")

    async def _score_externally(self, page, url: str) -> CategoryScores:
        try:
            return await self.external_analyzer.score_categories(page, url)
        except Exception as e:
            logger.error(f"External analyzer failed for {url}, scores unavailable: {e}")
            return CategoryScores.unavailable()


async def audit_site(
    url: str,
    options: Optional[AuditOptions] = None,
    auditor: Optional[SiteAuditor] = None,
) -> AuditReport:
    """
    Audit a URL under the whole-audit ceiling.

    A ceiling breach cancels the audit (its cleanup still runs) and yields an
    error report.
    """
    options = options or AuditOptions()
    auditor = auditor or SiteAuditor()
    try:
        return await with_timeout(
            auditor.run_audit(url, options),
            auditor.config.audit_timeout,
            DEFAULT_TIMEOUT_MESSAGE,
        )
    except AuditTimeoutError as e:
        logger.error(f"Audit of {url} exceeded {auditor.config.audit_timeout}s")
        return AuditReport.error(normalize_url(url), classify_error(e), options)


async def audit_sites_sequential(
    items: Iterable[Tuple[str, Optional[AuditOptions]]],
    auditor: Optional[SiteAuditor] = None,
) -> List[AuditReport]:
    """
    Audit several URLs one after another.

    Each audit gets its own browser session; output order equals input order
    and one failing site never affects the others.
    """
    auditor = auditor or SiteAuditor()
    reports = []
    for url, options in items:
        options = options or AuditOptions()
        try:
            report = await audit_site(url, options, auditor)
        except Exception as e:
            logger.error(f"Unexpected failure auditing {url}: {e}")
            report = AuditReport.error(normalize_url(url), classify_error(e), options)
        reports.append(report)
    return reports
