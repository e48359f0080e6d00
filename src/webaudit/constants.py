# src/webaudit/constants.py
"""Centralized constants for the web auditor.

This module contains the thresholds, penalties and weights shared by the
analyzers, the reconciler and the recommendation engine. Runtime settings
(timeouts read from the environment, analyzer backend) live in config.py.
"""

# =============================================================================
# Timeouts
# =============================================================================

# Browser launch timeout in seconds
BROWSER_LAUNCH_TIMEOUT_SECONDS = 30

# Page navigation timeout in seconds
NAVIGATION_TIMEOUT_SECONDS = 30

# Global ceiling for one complete audit in seconds
AUDIT_TIMEOUT_SECONDS = 120

# Time given to layout-shift / input observers after load (milliseconds)
METRICS_SETTLE_MS = 1500


# =============================================================================
# Structural (SEO) Constants
# =============================================================================

TITLE_MIN_LENGTH = 30
TITLE_MAX_LENGTH = 60

META_DESCRIPTION_MIN_LENGTH = 120
META_DESCRIPTION_MAX_LENGTH = 160

# Images without alt above this count escalate to high severity
SEVERITY_ESCALATION_IMAGES_THRESHOLD = 5

# Score penalties for missing elements
SEO_PENALTY_MISSING_TITLE = 30
SEO_PENALTY_MISSING_META_DESCRIPTION = 25
SEO_PENALTY_MISSING_VIEWPORT = 20
SEO_PENALTY_MISSING_CANONICAL = 10
SEO_PENALTY_MISSING_H1 = 15
SEO_PENALTY_PER_IMAGE_WITHOUT_ALT = 2
SEO_PENALTY_IMAGES_CAP = 20


# =============================================================================
# Performance Constants
# =============================================================================

# Issue thresholds: (medium, high), milliseconds unless noted
LOAD_TIME_ISSUE_THRESHOLDS_MS = (3000, 5000)
FCP_ISSUE_THRESHOLDS_MS = (1800, 3000)
LCP_ISSUE_THRESHOLDS_MS = (2500, 4000)
CLS_ISSUE_THRESHOLDS = (0.1, 0.25)  # unitless
FID_ISSUE_THRESHOLDS_MS = (100, 300)

# Score deduction tiers: (threshold, penalty), checked highest first
LOAD_TIME_SCORE_TIERS = ((5000, 30), (3000, 20), (2000, 10))
FCP_SCORE_TIERS = ((3000, 25), (2000, 15), (1500, 5))
LCP_SCORE_TIERS = ((4000, 25), (2500, 15), (2000, 5))
PERF_PENALTY_NOT_MOBILE_RESPONSIVE = 20
PERF_PENALTY_NOT_DESKTOP_RESPONSIVE = 10

# Allowed content overflow relative to the viewport width
MOBILE_OVERFLOW_TOLERANCE = 1.10
DESKTOP_OVERFLOW_TOLERANCE = 1.05


# =============================================================================
# External Analyzer / Reconciliation Constants
# =============================================================================

# External category score below which an issue is "very low" (high severity)
EXTERNAL_SCORE_VERY_LOW = 50

# External category score below which an issue is "low" (medium severity)
EXTERNAL_SCORE_LOW = 75

# Overall score weights
CATEGORY_WEIGHTS = {
    "seo": 0.25,
    "performance": 0.35,
    "accessibility": 0.25,
    "best_practices": 0.15,
}


# =============================================================================
# Recommendation Constants
# =============================================================================

MAX_RECOMMENDATIONS = 7
MAX_CONTEXTUAL_RECOMMENDATIONS = 7
MAX_QUICK_WINS = 3

# Catalog keys considered fast to fix
QUICK_WIN_KEYS = (
    "missing_meta_description",
    "missing_viewport_meta",
    "missing_canonical_link",
    "missing_h1",
    "images_without_alt",
    "title_too_short",
    "title_too_long",
    "meta_description_too_short",
    "meta_description_too_long",
)
