"""Template registry - one subject/body descriptor per notification kind"""

from types import MappingProxyType
from typing import Mapping, Union

from .errors import UnknownKind
from .schemas import NotificationKind, TemplateDescriptor

_DESCRIPTORS = (
    TemplateDescriptor(NotificationKind.WELCOME, "Bienvenue sur NFI REPORT", "welcome"),
    TemplateDescriptor(
        NotificationKind.SUBSCRIPTION_CONFIRMED,
        "Votre abonnement NFI REPORT est activé",
        "subscription_confirmed",
    ),
    TemplateDescriptor(NotificationKind.NEWSLETTER, "La lettre financière NFI REPORT", "newsletter"),
    TemplateDescriptor(
        NotificationKind.PASSWORD_RESET, "Réinitialisation de votre mot de passe", "password_reset"
    ),
    TemplateDescriptor(NotificationKind.INVOICE, "Votre facture NFI REPORT ({period})", "invoice"),
    TemplateDescriptor(
        NotificationKind.PREMIUM_ALERT, "Nouvelle analyse premium : {article_title}", "premium_alert"
    ),
)


def _build_registry() -> Mapping[NotificationKind, TemplateDescriptor]:
    registry = {}
    for descriptor in _DESCRIPTORS:
        if descriptor.kind in registry:
            raise RuntimeError(f"Duplicate template descriptor for {descriptor.kind.value}")
        registry[descriptor.kind] = descriptor

    missing = [kind.value for kind in NotificationKind if kind not in registry]
    if missing:
        raise RuntimeError(f"No template descriptor for: {', '.join(missing)}")

    return MappingProxyType(registry)


TEMPLATE_REGISTRY = _build_registry()


def lookup(kind: Union[NotificationKind, str]) -> TemplateDescriptor:
    """Return the descriptor for a kind, raising UnknownKind outside the closed set"""
    try:
        return TEMPLATE_REGISTRY[NotificationKind(kind)]
    except (ValueError, KeyError):
        raise UnknownKind(kind) from None


def all_descriptors() -> list[TemplateDescriptor]:
    return list(TEMPLATE_REGISTRY.values())
