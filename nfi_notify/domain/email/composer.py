"""Message composer - resolves a notification into a send-ready message"""

import logging
from string import Formatter
from typing import Callable, Mapping, Optional, Union

from ...config import SenderIdentity
from ...email_templates import render_body
from ...utils.sanitization import strip_header_value
from .errors import MissingParam
from .registry import lookup
from .schemas import ComposedMessage, NotificationKind, Recipient

logger = logging.getLogger(__name__)

BodyRenderer = Callable[[str, Recipient, Mapping[str, str]], str]


def placeholder_names(template: str) -> list[str]:
    """Placeholder names referenced by a subject template, in order of appearance"""
    names = []
    for _, field_name, _, _ in Formatter().parse(template):
        if field_name is not None and field_name not in names:
            names.append(field_name)
    return names


def render_subject(template: str, params: Mapping[str, str]) -> str:
    """
    Substitute every placeholder of a subject template.

    Raises:
        MissingParam: If a referenced placeholder has no non-blank value
    """
    values = {}
    for name in placeholder_names(template):
        value = params.get(name)
        if value is None or not str(value).strip():
            raise MissingParam(name)
        values[name] = strip_header_value(str(value))
    return template.format_map(values)


class MessageComposer:
    """Builds ComposedMessage instances for a fixed sender identity"""

    def __init__(self, sender: SenderIdentity, body_renderer: Optional[BodyRenderer] = None):
        self.sender = sender
        self.body_renderer = body_renderer or render_body

    def compose(
        self,
        kind: Union[NotificationKind, str],
        recipient: Recipient,
        params: Optional[Mapping[str, str]] = None,
    ) -> ComposedMessage:
        params = params or {}
        descriptor = lookup(kind)

        subject = render_subject(descriptor.subject_template, params)
        body = self.body_renderer(descriptor.body_template_id, recipient, params)

        logger.debug(f"Composed {descriptor.kind.value} email for {recipient.address}")
        return ComposedMessage(
            kind=descriptor.kind,
            sender=self.sender,
            to=recipient,
            subject=subject,
            body=body,
        )
