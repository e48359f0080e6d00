"""
Shared helpers for the auditor: timeouts, URL handling and error classification.
"""
import asyncio
import logging
from typing import Awaitable, Optional, TypeVar
from urllib.parse import urlparse

from webaudit.constants import AUDIT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_MESSAGE = "Timeout: analysis took too long"

# Network failure signatures reported by Chromium, in match order
NETWORK_ERROR_MESSAGES = (
    ("net::ERR_NAME_NOT_RESOLVED", "Site inaccessible: domain not found"),
    ("net::ERR_CONNECTION_REFUSED", "Site inaccessible: connection refused"),
    ("net::ERR_TIMED_OUT", "Site inaccessible: connection timed out"),
)

UNKNOWN_ERROR_MESSAGE = "Unknown error during analysis"


class AuditTimeoutError(TimeoutError):
    """Raised when an audit step exceeds its time budget.

    The message is already user facing and is reported unchanged.
    """


async def with_timeout(
    awaitable: Awaitable[T],
    timeout: float = AUDIT_TIMEOUT_SECONDS,
    message: str = DEFAULT_TIMEOUT_MESSAGE,
) -> T:
    """
    Await an operation under a time budget.

    Args:
        awaitable: Coroutine or future to await
        timeout: Budget in seconds
        message: Message carried by the raised AuditTimeoutError

    Returns:
        Result of the awaited operation

    Raises:
        AuditTimeoutError: If the budget is exceeded (the operation is cancelled)
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise AuditTimeoutError(message) from e


def normalize_url(url: str) -> str:
    """Prefix ``https://`` when the URL has neither an http nor https scheme."""
    url = url.strip()
    if not url.startswith("http://") and not url.startswith("https://"):
        return f"https://{url}"
    return url


def is_valid_url(url: str) -> bool:
    """Return True when ``url`` is an absolute http(s) URL with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc) and " " not in url


def classify_error(error: Optional[BaseException]) -> str:
    """
    Turn an audit failure into a short, human readable message.

    Known Chromium network signatures are matched first, then any message
    mentioning a timeout, then the raw message.

    Args:
        error: Exception raised by a launch or navigation step

    Returns:
        Classified message for the error report
    """
    if error is None:
        return UNKNOWN_ERROR_MESSAGE

    text = str(error)
    if isinstance(error, AuditTimeoutError) and text:
        return text

    for signature, classified in NETWORK_ERROR_MESSAGES:
        if signature in text:
            return classified

    if "timeout" in text.lower() or isinstance(error, TimeoutError):
        return DEFAULT_TIMEOUT_MESSAGE

    if not text:
        return UNKNOWN_ERROR_MESSAGE

    return f"Error: {text}"
