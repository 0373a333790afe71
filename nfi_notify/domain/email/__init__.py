"""Email domain - transactional notification templates and delivery"""

from .errors import MissingParam, NotificationError, TemplateRenderError, UnknownKind, UnknownTemplate
from .registry import TEMPLATE_REGISTRY, lookup
from .schemas import (
    ComposedMessage,
    Delivered,
    DispatchResult,
    Failed,
    NotificationKind,
    Recipient,
    TemplateDescriptor,
)

# Composer, dispatch client, service and router are imported from their own
# modules; they depend on email_templates, which imports this package.

__all__ = [
    "ComposedMessage",
    "Delivered",
    "DispatchResult",
    "Failed",
    "MissingParam",
    "NotificationError",
    "NotificationKind",
    "Recipient",
    "TEMPLATE_REGISTRY",
    "TemplateDescriptor",
    "TemplateRenderError",
    "UnknownKind",
    "UnknownTemplate",
    "lookup",
]
