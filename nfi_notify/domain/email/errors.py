"""Email domain errors raised before any message reaches the provider"""


class NotificationError(Exception):
    """Base class for notification composition errors"""


class UnknownKind(NotificationError):
    """Raised when a notification kind is outside the closed set"""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unknown notification kind: {kind!r}")


class UnknownTemplate(NotificationError):
    """Raised when no body template is registered under an id"""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Unknown body template: {template_id!r}")


class MissingParam(NotificationError):
    """Raised when a subject placeholder has no supplied value"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing template parameter: {name}")


class TemplateRenderError(NotificationError):
    """Raised when an MJML body cannot be compiled to HTML"""
