"""Web page auditor: SEO, performance, accessibility and best practices scoring."""

__version__ = "0.1.0"

from webaudit.auditor import SiteAuditor, audit_site, audit_sites_sequential
from webaudit.api import InvalidRequestError, analyze, analyze_batch
from webaudit.browser import AuditPage, BrowserSession
from webaudit.browser_config import BrowserConfig
from webaudit.config import Config
from webaudit.messages import get_all_messages, get_message, get_message_short
from webaudit.models import (
    AuditIssue,
    AuditOptions,
    AuditReport,
    CategoryScores,
    IssueType,
    Priority,
    Severity,
    SiteType,
)
from webaudit.utils import AuditTimeoutError

__all__ = [
    "__version__",
    # Orchestration
    "SiteAuditor",
    "audit_site",
    "audit_sites_sequential",
    "analyze",
    "analyze_batch",
    "InvalidRequestError",
    "AuditTimeoutError",
    # Browser
    "AuditPage",
    "BrowserSession",
    "BrowserConfig",
    "Config",
    # Catalog
    "get_message",
    "get_message_short",
    "get_all_messages",
    # Models
    "AuditIssue",
    "AuditOptions",
    "AuditReport",
    "CategoryScores",
    "IssueType",
    "Priority",
    "Severity",
    "SiteType",
]
