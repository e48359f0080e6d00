"""Data models for web audits."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional


# Category score: an int in [0, 100], or None when the score could not be measured
Score = Optional[int]


class IssueType(str, Enum):
    """Category an issue belongs to."""
    SEO = "SEO"
    PERFORMANCE = "Performance"
    ACCESSIBILITY = "Accessibility"
    BEST_PRACTICES = "Best Practices"
    HTML_STRUCTURE = "HTML Structure"


class Severity(str, Enum):
    """Issue severity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Priority(str, Enum):
    """Catalog priority tier, most urgent first."""
    CRITICAL = "critical"
    IMPORTANT = "important"
    ENHANCEMENT = "enhancement"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 1,
    Priority.IMPORTANT: 2,
    Priority.ENHANCEMENT: 3,
}


class SiteType(str, Enum):
    """Coarse site classification used to contextualize advice."""
    ECOMMERCE = "ecommerce"
    BLOG = "blog"
    CORPORATE = "corporate"
    PORTFOLIO = "portfolio"
    LANDING = "landing"
    APPLICATION = "application"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AuditIssue:
    """A single detected problem.

    Enriched fields are copied from the message catalog when the issue is
    created and never recomputed afterwards. Use ``AuditIssue.create`` rather
    than the constructor so that enrichment happens.
    """

    type: IssueType
    message: str
    severity: Severity
    message_key: Optional[str] = None
    priority: Optional[Priority] = None
    short: Optional[str] = None
    description: Optional[str] = None
    impact: Optional[str] = None
    action: Optional[str] = None
    code_example: Optional[str] = None

    @classmethod
    def create(
        cls,
        type: IssueType,
        message: str,
        severity: Severity,
        message_key: Optional[str] = None,
    ) -> "AuditIssue":
        """Build an issue, enriching it from the catalog when the key is known.

        Args:
            type: Issue category
            message: Human readable message (usually with the measured value)
            severity: Issue severity
            message_key: Optional catalog key

        Returns:
            AuditIssue with catalog fields populated, or only the fixed
            fields when the key is absent or unknown
        """
        from webaudit.messages import get_message

        entry = get_message(message_key) if message_key else None
        if entry is None:
            return cls(type=type, message=message, severity=severity, message_key=message_key)

        return cls(
            type=type,
            message=message,
            severity=severity,
            message_key=message_key,
            priority=entry.priority,
            short=entry.short,
            description=entry.description,
            impact=entry.impact,
            action=entry.action,
            code_example=entry.code_example,
        )

    def to_simple_dict(self) -> dict[str, str]:
        """Caller-facing projection: category, message and severity only."""
        return {
            "type": self.type.value,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class CategoryScores:
    """The four category scores, each possibly unavailable (None)."""

    seo: Score = None
    performance: Score = None
    accessibility: Score = None
    best_practices: Score = None

    @classmethod
    def unavailable(cls) -> "CategoryScores":
        return cls()

    @property
    def is_complete(self) -> bool:
        return all(
            score is not None
            for score in (self.seo, self.performance, self.accessibility, self.best_practices)
        )

    def normalized(self) -> "CategoryScores":
        """Collapse unavailable scores to 0 for report assembly."""
        return replace(
            self,
            seo=self.seo or 0,
            performance=self.performance or 0,
            accessibility=self.accessibility or 0,
            best_practices=self.best_practices or 0,
        )

    def to_dict(self) -> dict[str, Score]:
        return {
            "seo": self.seo,
            "performance": self.performance,
            "accessibility": self.accessibility,
            "bestPractices": self.best_practices,
        }


@dataclass
class HTMLAnalysis:
    """Structural signals extracted from a rendered page."""

    has_title: bool = False
    title_length: int = 0
    has_meta_description: bool = False
    meta_description_length: int = 0
    has_meta_keywords: bool = False
    heading_structure: dict[str, int] = field(
        default_factory=lambda: {f"h{level}": 0 for level in range(1, 7)}
    )
    images_without_alt: int = 0
    total_images: int = 0
    has_viewport_meta: bool = False
    has_canonical_link: bool = False
    has_open_graph: bool = False
    has_structured_data: bool = False


@dataclass
class PerformanceMetrics:
    """Timing, paint and responsiveness measurements (milliseconds except CLS)."""

    load_time: float = 0.0
    dom_content_loaded: float = 0.0
    first_contentful_paint: float = 0.0
    largest_contentful_paint: float = 0.0
    cumulative_layout_shift: float = 0.0
    first_input_delay: float = 0.0
    is_mobile_responsive: bool = False
    is_desktop_responsive: bool = False


@dataclass(frozen=True)
class PageInfo:
    """Page identity shown next to the report."""
    title: str = ""
    first_h1: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "firstH1": self.first_h1}


@dataclass(frozen=True)
class DetectedTechnology:
    """A technology found on the page."""
    name: str
    category: str  # framework, cms, analytics, library, hosting, other
    confidence: str  # high, medium, low


@dataclass(frozen=True)
class TechnologyDetection:
    """Detected technologies and site type for one audit."""

    technologies: tuple[DetectedTechnology, ...] = ()
    site_type: SiteType = SiteType.UNKNOWN
    cms: Optional[str] = None
    framework: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "technologies": [
                {"name": t.name, "category": t.category, "confidence": t.confidence}
                for t in self.technologies
            ],
            "siteType": self.site_type.value,
            "cms": self.cms,
            "framework": self.framework,
        }


@dataclass(frozen=True)
class ContextualRecommendation:
    """Structured, site-aware recommendation built from the catalog."""

    title: str
    description: str
    priority: Priority
    estimated_time: str
    impact: str

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "estimatedTime": self.estimated_time,
            "impact": self.impact,
        }


@dataclass(frozen=True)
class AuditOptions:
    """Per-audit options supplied by the caller."""

    lighthouse: bool = True
    row_id: Optional[str] = None
    company_email: Optional[str] = None


@dataclass(frozen=True)
class AuditReport:
    """Result of one audit. Scores are normalized ints; issues are simplified."""

    status: str  # success or error
    url: str
    score: int = 0
    categories: CategoryScores = field(
        default_factory=lambda: CategoryScores(0, 0, 0, 0)
    )
    issues: tuple[dict[str, str], ...] = ()
    short_summary: str = ""
    recommendations: tuple[str, ...] = ()
    page_info: Optional[PageInfo] = None
    message: Optional[str] = None
    row_id: Optional[str] = None
    company_email: Optional[str] = None

    technologies: Optional[TechnologyDetection] = None
    contextual_recommendations: tuple[ContextualRecommendation, ...] = ()
    quick_wins: tuple[str, ...] = ()
    site_type_advice: str = ""

    @classmethod
    def error(cls, url: str, message: str, options: AuditOptions) -> "AuditReport":
        """Build an error report: zero scores, empty lists, tracing ids echoed."""
        return cls(
            status="error",
            url=url,
            message=message,
            row_id=options.row_id,
            company_email=options.company_email,
        )

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape returned by the API."""
        data: dict[str, Any] = {
            "status": self.status,
            "url": self.url,
            "score": self.score,
            "categories": self.categories.to_dict(),
            "issues": [dict(issue) for issue in self.issues],
            "shortSummary": self.short_summary,
            "recommendations": list(self.recommendations),
        }
        if self.message is not None:
            data["message"] = self.message
        if self.page_info is not None:
            data["pageInfo"] = self.page_info.to_dict()
        if self.technologies is not None:
            data["technologies"] = self.technologies.to_dict()
        if self.is_success:
            data["contextualRecommendations"] = [
                rec.to_dict() for rec in self.contextual_recommendations
            ]
            data["quickWins"] = list(self.quick_wins)
            data["siteTypeAdvice"] = self.site_type_advice
        if self.row_id is not None:
            data["rowId"] = self.row_id
        if self.company_email is not None:
            data["company_email"] = self.company_email
        return data
