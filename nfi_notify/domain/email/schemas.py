"""Email domain schemas - notification kinds, messages and dispatch outcomes"""

from dataclasses import dataclass
from email.utils import formataddr
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from ...config import SenderIdentity
from ...shared.validators import validate_email
from ...utils.sanitization import strip_header_value


class NotificationKind(str, Enum):
    """Closed set of events that trigger a transactional email"""

    WELCOME = "welcome"
    SUBSCRIPTION_CONFIRMED = "subscription_confirmed"
    NEWSLETTER = "newsletter"
    PASSWORD_RESET = "password_reset"
    INVOICE = "invoice"
    PREMIUM_ALERT = "premium_alert"


@dataclass(frozen=True)
class TemplateDescriptor:
    kind: NotificationKind
    subject_template: str
    body_template_id: str


@dataclass(frozen=True)
class Recipient:
    """Email recipient, identified only by its address"""

    address: str
    display_name: Optional[str] = None

    def __post_init__(self):
        address = (self.address or "").strip()
        if not address:
            raise ValueError("Recipient address is required")
        object.__setattr__(self, "address", address)
        if self.display_name is not None:
            object.__setattr__(self, "display_name", strip_header_value(self.display_name) or None)

    @property
    def formatted(self) -> str:
        if self.display_name:
            return formataddr((self.display_name, self.address))
        return self.address


@dataclass(frozen=True)
class ComposedMessage:
    """A send-ready email for a single notification"""

    kind: NotificationKind
    sender: SenderIdentity
    to: Recipient
    subject: str
    body: str

    def to_provider_payload(self) -> dict:
        """Request body for the Resend `POST /emails` endpoint"""
        return {
            "from": self.sender.formatted,
            "to": [self.to.formatted],
            "subject": self.subject,
            "html": self.body,
        }


@dataclass(frozen=True)
class Delivered:
    provider_message_id: str

    delivered = True


@dataclass(frozen=True)
class Failed:
    reason: str
    retryable: bool

    delivered = False


DispatchResult = Union[Delivered, Failed]


# ============================================
# Request schemas for the HTTP boundary
# ============================================


class NotificationRequest(BaseModel):
    """Schema for sending one notification"""

    kind: NotificationKind
    to: str
    display_name: Optional[str] = None
    params: dict[str, str] = Field(default_factory=dict)

    @field_validator("to")
    @classmethod
    def validate_to(cls, v):
        if not v or not v.strip():
            raise ValueError("Recipient email is required")
        return validate_email(v)


class WelcomeEmailRequest(BaseModel):
    """Schema for the newsletter signup welcome email"""

    email: Optional[str] = None
