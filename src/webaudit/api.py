"""
Inbound API: validated entry points for single and batch audits.

Request bodies are validated with Pydantic before any browser is launched;
invalid bodies (and an invalid single-site URL) raise InvalidRequestError,
which an HTTP layer maps to a client error.

    report = await analyze({"url": "example.com", "options": {"lighthouse": False}})
"""
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from webaudit.auditor import SiteAuditor, audit_site, audit_sites_sequential
from webaudit.models import AuditOptions, AuditReport
from webaudit.utils import is_valid_url, normalize_url

logger = logging.getLogger(__name__)


class InvalidRequestError(ValueError):
    """Raised for malformed request bodies or invalid URLs."""


class AuditOptionsRequest(BaseModel):
    """Options object of an audit request."""

    lighthouse: bool = Field(
        default=True,
        description="Run the external analyzer (Lighthouse or PageSpeed Insights)"
    )

    row_id: Optional[str] = Field(
        default=None,
        alias="rowId",
        description="Caller trace id echoed back in the report"
    )

    company_email: Optional[str] = Field(
        default=None,
        description="Contact email echoed back in the report"
    )

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True

    @field_validator("row_id", mode="before")
    @classmethod
    def _coerce_row_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_options(self) -> AuditOptions:
        return AuditOptions(
            lighthouse=self.lighthouse,
            row_id=self.row_id,
            company_email=self.company_email,
        )


class AnalyzeRequest(BaseModel):
    """Single-site audit request."""

    url: str = Field(min_length=1, description="URL to audit; https:// is assumed")
    options: AuditOptionsRequest = Field(default_factory=AuditOptionsRequest)

    @field_validator("url")
    @classmethod
    def _normalize_url(cls, value: str) -> str:
        normalized = normalize_url(value)
        if not is_valid_url(normalized):
            raise ValueError(f"Invalid URL: {value}")
        return normalized


class BatchSiteRequest(BaseModel):
    """One site of a batch request.

    The URL is only checked for presence here; a URL that is still invalid
    after normalization becomes an error report at its position.
    """

    url: str = Field(min_length=1, description="URL to audit; https:// is assumed")
    options: AuditOptionsRequest = Field(default_factory=AuditOptionsRequest)


class BatchAnalyzeRequest(BaseModel):
    """Batch audit request; sites are audited in order."""

    sites: List[BatchSiteRequest]


def _format_validation_error(error: ValidationError) -> str:
    details = ", ".join(
        f"{'.'.join(str(part) for part in e['loc']) or 'body'}: {e['msg']}"
        for e in error.errors()
    )
    return f"Invalid request: {details}"


def parse_analyze_request(payload: Union[Dict[str, Any], Any]) -> AnalyzeRequest:
    """Validate a single-site request body.

    Raises:
        InvalidRequestError: If the body or URL is invalid
    """
    try:
        return AnalyzeRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(_format_validation_error(e)) from e


def parse_batch_request(payload: Union[Dict[str, Any], Any]) -> BatchAnalyzeRequest:
    """Validate a batch request body.

    Raises:
        InvalidRequestError: If the body is malformed
    """
    try:
        return BatchAnalyzeRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(_format_validation_error(e)) from e


async def analyze(
    payload: Dict[str, Any], auditor: Optional[SiteAuditor] = None
) -> Dict[str, Any]:
    """
    Audit one site from a request body.

    Args:
        payload: ``{"url": ..., "options": {"lighthouse", "rowId", "company_email"}}``
        auditor: Auditor to use (defaults to one built from the environment)

    Returns:
        The report as a JSON-ready dict

    Raises:
        InvalidRequestError: If the body or URL is invalid
    """
    request = parse_analyze_request(payload)
    logger.info(f"Audit requested for {request.url}")
    report = await audit_site(request.url, request.options.to_options(), auditor)
    return report.to_dict()


async def analyze_batch(
    payload: Dict[str, Any], auditor: Optional[SiteAuditor] = None
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Audit several sites sequentially from a request body.

    A site whose URL is invalid gets an error report at its position; the
    other sites are still audited.

    Args:
        payload: ``{"sites": [{"url": ..., "options": {...}}, ...]}``
        auditor: Auditor shared by the audits (each still gets its own browser)

    Returns:
        ``{"reports": [...]}`` in input order

    Raises:
        InvalidRequestError: If the body is malformed
    """
    request = parse_batch_request(payload)
    logger.info(f"Batch audit requested for {len(request.sites)} site(s)")

    reports: List[Optional[AuditReport]] = []
    pending = []
    for site in request.sites:
        url = normalize_url(site.url)
        options = site.options.to_options()
        if is_valid_url(url):
            reports.append(None)
            pending.append((url, options))
        else:
            logger.warning(f"Skipping invalid URL in batch: {site.url}")
            reports.append(AuditReport.error(url, f"Error: Invalid URL: {site.url}", options))

    audited = iter(await audit_sites_sequential(pending, auditor) if pending else [])
    return {
        "reports": [
            (report if report is not None else next(audited)).to_dict()
            for report in reports
        ]
    }
