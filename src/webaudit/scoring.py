"""Score and issue reconciliation across the local analyzers and the external analyzer."""

import logging
from itertools import chain
from typing import Dict, Iterable, List, Optional

from webaudit.constants import CATEGORY_WEIGHTS
from webaudit.models import AuditIssue, CategoryScores, Score

logger = logging.getLogger(__name__)


def reconcile_categories(
    local_seo: Score,
    local_performance: Score,
    external: Optional[CategoryScores] = None,
) -> CategoryScores:
    """
    Combine local and external category scores.

    When the external analyzer produced all four scores, SEO and performance
    take the better of both sources. Otherwise the local SEO and performance
    are kept and accessibility / best practices stay whatever the external
    analyzer produced, possibly None. Nothing is ever compared against None.

    Args:
        local_seo: Structural analyzer score
        local_performance: Performance collector score
        external: External analyzer scores, or None when it was not run

    Returns:
        Reconciled CategoryScores (may still contain None)
    """
    if external is None:
        return CategoryScores(seo=local_seo, performance=local_performance)

    if external.is_complete:
        return CategoryScores(
            seo=_best(local_seo, external.seo),
            performance=_best(local_performance, external.performance),
            accessibility=external.accessibility,
            best_practices=external.best_practices,
        )

    logger.debug("External scores incomplete, keeping local SEO and performance")
    return CategoryScores(
        seo=local_seo if local_seo is not None else external.seo,
        performance=local_performance if local_performance is not None else external.performance,
        accessibility=external.accessibility,
        best_practices=external.best_practices,
    )


def _best(local: Score, external: Score) -> Score:
    if local is None:
        return external
    if external is None:
        return local
    return max(local, external)


def merge_issues(*sources: Iterable[AuditIssue]) -> List[AuditIssue]:
    """Concatenate issue lists in discovery order, without deduplication."""
    return list(chain.from_iterable(sources))


def calculate_overall_score(categories: CategoryScores) -> int:
    """Weighted overall score on normalized categories, 0-100."""
    normalized = categories.normalized()
    total = (
        normalized.seo * CATEGORY_WEIGHTS["seo"]
        + normalized.performance * CATEGORY_WEIGHTS["performance"]
        + normalized.accessibility * CATEGORY_WEIGHTS["accessibility"]
        + normalized.best_practices * CATEGORY_WEIGHTS["best_practices"]
    )
    # Round half up; the 2-decimal pass absorbs float error in the weights
    return max(0, min(100, int(round(total, 2) + 0.5)))


def simplify_issues(issues: Iterable[AuditIssue]) -> List[Dict[str, str]]:
    """Caller-facing projection of each issue: type, message and severity."""
    return [issue.to_simple_dict() for issue in issues]
