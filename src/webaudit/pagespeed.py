"""
PageSpeed Insights category scorer.

Alternative to the local Lighthouse CLI: Google runs Lighthouse remotely and
the v5 API returns the same category scores. Quotas are 400 queries per 100
seconds and 25,000 per day on the free tier; the sliding-window limiter below
keeps one analyzer instance inside the short-term quota.

See https://developers.google.com/speed/docs/insights/v5/get-started
"""

import asyncio
import logging
import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional

import httpx

from webaudit.models import CategoryScores, Score

logger = logging.getLogger(__name__)


PSI_CATEGORIES = ('performance', 'accessibility', 'best-practices', 'seo')


class PageSpeedInsightsAnalyzer:
    """Scores the four audit categories through the PageSpeed Insights API."""

    API_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    QUOTA_REQUESTS = 400
    QUOTA_WINDOW_SECONDS = 100.0

    def __init__(
        self,
        api_key: str,
        strategy: str = "mobile",
        categories: Optional[List[str]] = None,
        locale: str = "en",
        timeout: float = 120.0,
    ):
        """
        Initialize the analyzer.

        Args:
            api_key: Google API key with the PageSpeed Insights API enabled
            strategy: Device profile Google emulates, 'mobile' or 'desktop'
            categories: Lighthouse categories to request (defaults to all four)
            locale: Language of the returned strings
            timeout: HTTP timeout in seconds; PSI runs often take 30-60s
        """
        self.api_key = api_key
        self.strategy = strategy
        self.categories = list(categories or PSI_CATEGORIES)
        self.locale = locale
        self.timeout = timeout

        self._sent_at: Deque[float] = deque()
        self.total_requests = 0
        self.failed_requests = 0

    async def fetch(self, url: str) -> Dict[str, Any]:
        """
        Request a PSI run for ``url``.

        Raises:
            httpx.HTTPError: On transport failures or a non-2xx status
            ValueError: If the body is not JSON
        """
        await self._wait_for_quota()

        params = [
            ('url', url),
            ('key', self.api_key),
            ('strategy', self.strategy),
            ('locale', self.locale),
        ]
        params.extend(('category', category) for category in self.categories)

        logger.info(f"[PSI] Requesting {self.strategy} run for {url}")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(self.API_URL, params=params)
        self.total_requests += 1
        response.raise_for_status()
        return response.json()

    async def score_categories(self, page, url: str) -> CategoryScores:
        """
        Score the four categories for ``url``.

        Google fetches the URL itself, so ``page`` is not touched.

        Returns:
            CategoryScores, all None when the request failed
        """
        try:
            data = await self.fetch(url)
        except httpx.TimeoutException:
            reason = f"no answer within {self.timeout:.0f}s"
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                reason = "quota exceeded (HTTP 429)"
            elif status == 400:
                reason = "URL rejected by the API (HTTP 400)"
            else:
                reason = f"HTTP {status}"
        except (httpx.HTTPError, ValueError) as e:
            reason = str(e) or type(e).__name__
        else:
            scores = self.parse_scores(data)
            logger.info(
                f"[PSI] {url}: performance={scores.performance}, seo={scores.seo}, "
                f"accessibility={scores.accessibility}, best_practices={scores.best_practices}"
            )
            return scores

        self.failed_requests += 1
        logger.error(f"[PSI] Scores unavailable for {url}: {reason}")
        return CategoryScores.unavailable()

    def parse_scores(self, data: Dict[str, Any]) -> CategoryScores:
        """Category scores from a PSI response; absent categories are None."""
        categories = (data.get('lighthouseResult') or {}).get('categories') or {}
        return CategoryScores(
            seo=self._score(categories.get('seo')),
            performance=self._score(categories.get('performance')),
            accessibility=self._score(categories.get('accessibility')),
            best_practices=self._score(categories.get('best-practices')),
        )

    @staticmethod
    def _score(category: Optional[Dict[str, Any]]) -> Score:
        value = (category or {}).get('score')
        if not isinstance(value, (int, float)):
            return None
        return max(0, min(100, round(value * 100)))

    def _prune(self, now: float) -> None:
        while self._sent_at and now - self._sent_at[0] > self.QUOTA_WINDOW_SECONDS:
            self._sent_at.popleft()

    async def _wait_for_quota(self) -> None:
        """Sleep until a request fits in the sliding quota window, then record it."""
        now = time.monotonic()
        self._prune(now)

        if len(self._sent_at) >= self.QUOTA_REQUESTS:
            delay = self.QUOTA_WINDOW_SECONDS - (now - self._sent_at[0])
            if delay > 0:
                logger.warning(f"[PSI] Quota window full, waiting {delay:.1f}s")
                await asyncio.sleep(delay)
            now = time.monotonic()
            self._prune(now)

        self._sent_at.append(now)

    def get_stats(self) -> Dict[str, int]:
        """Request counters for this analyzer instance."""
        return {
            'total_requests': self.total_requests,
            'failed_requests': self.failed_requests,
            'requests_in_window': len(self._sent_at),
        }
