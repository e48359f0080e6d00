"""
Lighthouse category scorer.

Runs Google Lighthouse via CLI against the audited URL and turns the report
into the four category scores. Any failure (missing binary, timeout, bad
report) yields unavailable scores instead of raising.
"""

import asyncio
import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from webaudit.config import Config
from webaudit.constants import EXTERNAL_SCORE_LOW, EXTERNAL_SCORE_VERY_LOW
from webaudit.models import AuditIssue, CategoryScores, IssueType, Score, Severity
from webaudit.pagespeed import PageSpeedInsightsAnalyzer

logger = logging.getLogger(__name__)


class LighthouseRunner:
    """Runs Lighthouse audits and extracts category scores."""

    def __init__(
        self,
        lighthouse_path: str = "lighthouse",
        chrome_flags: Optional[List[str]] = None,
        timeout: int = 90,
        only_categories: Optional[List[str]] = None,
    ):
        """
        Initialize the Lighthouse runner.

        Args:
            lighthouse_path: Lighthouse executable
            chrome_flags: Chrome flags passed to Lighthouse (e.g., ['--headless'])
            timeout: Timeout for Lighthouse execution in seconds
            only_categories: Categories to run (performance, accessibility, best-practices, seo)
        """
        self.lighthouse_path = lighthouse_path
        self.chrome_flags = chrome_flags or ["--headless", "--no-sandbox"]
        self.timeout = timeout
        self.only_categories = only_categories or [
            "performance",
            "accessibility",
            "best-practices",
            "seo",
        ]

    def build_command(self, url: str, output_path: str) -> List[str]:
        return [
            self.lighthouse_path,
            url,
            "--output=json",
            f"--output-path={output_path}",
            "--quiet",
            "--chrome-flags=" + " ".join(self.chrome_flags),
            "--only-categories=" + ",".join(self.only_categories),
        ]

    async def run_lighthouse(self, url: str) -> Optional[Dict[str, Any]]:
        """
        Run Lighthouse on a URL and return the raw report.

        Args:
            url: The URL to audit

        Returns:
            Lighthouse result JSON, or None if the run failed
        """
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as tmp_file:
            output_path = tmp_file.name

        process = None
        try:
            logger.info(f"Running Lighthouse on {url}")
            process = await asyncio.create_subprocess_exec(
                *self.build_command(url, output_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)

            if process.returncode != 0:
                logger.error(
                    f"Lighthouse failed for {url}: {stderr.decode(errors='replace').strip()}"
                )
                return None

            with open(output_path, "r") as f:
                lighthouse_data = json.load(f)

            logger.info(f"Lighthouse completed successfully for {url}")
            return lighthouse_data

        except asyncio.TimeoutError:
            logger.error(f"Lighthouse timeout for {url} after {self.timeout}s")
            if process is not None and process.returncode is None:
                process.kill()
                await process.wait()
            return None
        except FileNotFoundError:
            logger.error(f"Lighthouse executable not found: {self.lighthouse_path}")
            return None
        except (OSError, ValueError) as e:
            logger.error(f"Error running Lighthouse on {url}: {e}")
            return None
        finally:
            Path(output_path).unlink(missing_ok=True)

    @staticmethod
    def _get_score(category: Optional[Dict]) -> Score:
        """Extract score from category (0-1) and convert to an int 0-100."""
        if not category:
            return None
        score = category.get("score")
        if not isinstance(score, (int, float)):
            return None
        return max(0, min(100, round(score * 100)))

    def parse_scores(self, lhr: Dict[str, Any]) -> CategoryScores:
        """Category scores from a Lighthouse result; missing categories are None."""
        categories = lhr.get("categories") or {}
        return CategoryScores(
            seo=self._get_score(categories.get("seo")),
            performance=self._get_score(categories.get("performance")),
            accessibility=self._get_score(categories.get("accessibility")),
            best_practices=self._get_score(categories.get("best-practices")),
        )

    async def score_categories(self, page, url: str) -> CategoryScores:
        """
        Score the four categories for ``url``.

        Lighthouse drives its own Chrome instance, so ``page`` is not touched.

        Returns:
            CategoryScores, all None when the run failed
        """
        lhr = await self.run_lighthouse(url)
        if not lhr:
            return CategoryScores.unavailable()
        return self.parse_scores(lhr)


def generate_lighthouse_issues(scores: CategoryScores) -> List[AuditIssue]:
    """
    Issues for low external category scores.

    Below 50 is a high severity "very low" issue, [50, 75) a medium "low" one.
    Unavailable categories never produce an issue.
    """
    checks = (
        (scores.performance, IssueType.PERFORMANCE, "performance", "low_performance_score"),
        (scores.seo, IssueType.SEO, "SEO", "low_seo_score"),
        (scores.accessibility, IssueType.ACCESSIBILITY, "accessibility", "low_accessibility_score"),
        (scores.best_practices, IssueType.BEST_PRACTICES, "best practices", "low_best_practices_score"),
    )

    issues = []
    for score, issue_type, label, key in checks:
        if score is None:
            continue
        if score < EXTERNAL_SCORE_VERY_LOW:
            issues.append(AuditIssue.create(
                issue_type, f"Very low {label} score: {score}/100", Severity.HIGH, key
            ))
        elif score < EXTERNAL_SCORE_LOW:
            issues.append(AuditIssue.create(
                issue_type, f"Low {label} score: {score}/100", Severity.MEDIUM, key
            ))
    return issues


def create_external_analyzer(config: Optional[Config] = None):
    """
    Build the external analyzer selected by configuration.

    Falls back to Lighthouse when PageSpeed Insights is selected without an
    API key.

    Args:
        config: Runtime configuration (defaults to the environment)

    Returns:
        LighthouseRunner or PageSpeedInsightsAnalyzer
    """
    config = config or Config.from_env()

    if config.external_analyzer == "pagespeed":
        if config.google_psi_api_key:
            return PageSpeedInsightsAnalyzer(
                api_key=config.google_psi_api_key,
                strategy=config.psi_strategy,
                locale=config.psi_locale,
            )
        logger.warning("GOOGLE_PSI_API_KEY is not set, using the Lighthouse CLI instead")

    chrome_flags = ["--headless", "--no-sandbox"] if config.headless else ["--no-sandbox"]

    return LighthouseRunner(
        lighthouse_path=config.lighthouse_path,
        chrome_flags=chrome_flags,
        timeout=config.lighthouse_timeout,
    )
