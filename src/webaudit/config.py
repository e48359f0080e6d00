from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Optional
import os

from webaudit.constants import (
    AUDIT_TIMEOUT_SECONDS,
    BROWSER_LAUNCH_TIMEOUT_SECONDS,
    NAVIGATION_TIMEOUT_SECONDS,
)

load_dotenv()  # Loads variables from .env file


EXTERNAL_ANALYZERS = ("lighthouse", "pagespeed")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Runtime configuration for the web auditor."""
    launch_timeout: float = BROWSER_LAUNCH_TIMEOUT_SECONDS
    navigation_timeout: float = NAVIGATION_TIMEOUT_SECONDS
    audit_timeout: float = AUDIT_TIMEOUT_SECONDS
    headless: bool = True
    log_level: str = "INFO"

    # External analyzer backend: 'lighthouse' (local CLI) or 'pagespeed' (PSI API)
    external_analyzer: str = "lighthouse"

    # Lighthouse CLI
    lighthouse_path: str = "lighthouse"
    lighthouse_timeout: int = 90

    # PageSpeed Insights API
    google_psi_api_key: Optional[str] = None
    psi_strategy: str = "mobile"  # 'mobile' or 'desktop'
    psi_locale: str = "en"

    def __post_init__(self):
        if self.external_analyzer not in EXTERNAL_ANALYZERS:
            raise ValueError(
                f"Unknown external analyzer '{self.external_analyzer}', "
                f"expected one of {', '.join(EXTERNAL_ANALYZERS)}"
            )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Returns:
            Config: Configuration instance with values from environment
        """
        return cls(
            launch_timeout=float(
                os.getenv("WEBAUDIT_LAUNCH_TIMEOUT", str(BROWSER_LAUNCH_TIMEOUT_SECONDS))
            ),
            navigation_timeout=float(
                os.getenv("WEBAUDIT_NAVIGATION_TIMEOUT", str(NAVIGATION_TIMEOUT_SECONDS))
            ),
            audit_timeout=float(
                os.getenv("WEBAUDIT_AUDIT_TIMEOUT", str(AUDIT_TIMEOUT_SECONDS))
            ),
            headless=_env_bool("WEBAUDIT_HEADLESS", True),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            external_analyzer=os.getenv("WEBAUDIT_EXTERNAL_ANALYZER", "lighthouse").lower(),
            # Lighthouse
            lighthouse_path=os.getenv("LIGHTHOUSE_PATH", "lighthouse"),
            lighthouse_timeout=int(os.getenv("LIGHTHOUSE_TIMEOUT", "90")),
            # PageSpeed Insights
            google_psi_api_key=os.getenv("GOOGLE_PSI_API_KEY"),
            psi_strategy=os.getenv("PSI_STRATEGY", "mobile"),
            psi_locale=os.getenv("PSI_LOCALE", "en"),
        )
