import os
from dataclasses import dataclass, field
from email.utils import formataddr, parseaddr
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Resend Email Configuration (server side only, never exposed to the browser)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
RESEND_API_BASE = os.getenv("RESEND_API_BASE", "https://api.resend.com")
RESEND_TIMEOUT_SECONDS = float(os.getenv("RESEND_TIMEOUT_SECONDS", "10"))
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "NFI REPORT <noreply@nfireport.com>")

# Retry policy for transient delivery failures
NOTIFY_MAX_ATTEMPTS = int(os.getenv("NOTIFY_MAX_ATTEMPTS", "3"))
NOTIFY_BACKOFF_BASE_SECONDS = float(os.getenv("NOTIFY_BACKOFF_BASE_SECONDS", "1.0"))
NOTIFY_BACKOFF_MULTIPLIER = float(os.getenv("NOTIFY_BACKOFF_MULTIPLIER", "2.0"))
NOTIFY_BACKOFF_MAX_SECONDS = float(os.getenv("NOTIFY_BACKOFF_MAX_SECONDS", "30.0"))

# Optional shared secret required by the HTTP endpoints
NOTIFY_API_TOKEN = os.getenv("NOTIFY_API_TOKEN")

# Public site, used for links inside email bodies
SITE_URL = os.getenv("SITE_URL", "https://nfireport.com")


@dataclass(frozen=True)
class SenderIdentity:
    """The fixed "from" identity used for every outbound message"""

    address: str
    display_name: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> "SenderIdentity":
        """Parse either `Name <address>` or a bare address"""
        name, address = parseaddr(value.strip())
        return cls(address=address or value.strip(), display_name=name.strip() or None)

    @property
    def formatted(self) -> str:
        if self.display_name:
            return formataddr((self.display_name, self.address))
        return self.address


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff applied to retryable delivery failures"""

    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("Backoff delays cannot be negative")
        if self.multiplier < 1:
            raise ValueError("multiplier must be >= 1 so delays never shrink")

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before the given 1-based attempt number"""
        if attempt <= 1:
            return 0.0
        return min(self.base_delay * self.multiplier ** (attempt - 2), self.max_delay)


@dataclass(frozen=True)
class DeliveryConfig:
    """Credential and endpoint used by the dispatch client"""

    api_key: Optional[str] = field(default=None, repr=False)
    api_base: str = "https://api.resend.com"
    timeout: float = 10.0
    sender: SenderIdentity = field(
        default_factory=lambda: SenderIdentity("noreply@nfireport.com", "NFI REPORT")
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@lru_cache()
def get_delivery_config() -> DeliveryConfig:
    """Build the process-wide delivery configuration once"""
    return DeliveryConfig(
        api_key=RESEND_API_KEY,
        api_base=RESEND_API_BASE.rstrip("/"),
        timeout=RESEND_TIMEOUT_SECONDS,
        sender=SenderIdentity.parse(EMAIL_FROM_ADDRESS),
    )


@lru_cache()
def get_retry_policy() -> RetryPolicy:
    return RetryPolicy(
        max_attempts=NOTIFY_MAX_ATTEMPTS,
        base_delay=NOTIFY_BACKOFF_BASE_SECONDS,
        multiplier=NOTIFY_BACKOFF_MULTIPLIER,
        max_delay=NOTIFY_BACKOFF_MAX_SECONDS,
    )
