"""Tests for the notification template registry."""
from __future__ import annotations

import pytest

from nfi_notify.domain.email.errors import UnknownKind
from nfi_notify.domain.email.registry import TEMPLATE_REGISTRY, all_descriptors, lookup
from nfi_notify.domain.email.schemas import NotificationKind
from nfi_notify.email_templates import BODY_TEMPLATES


@pytest.mark.parametrize("kind", list(NotificationKind))
def test_lookup_is_total_over_kinds(kind):
    descriptor = lookup(kind)

    assert descriptor.kind is kind
    assert descriptor.subject_template
    assert descriptor.body_template_id in BODY_TEMPLATES


def test_lookup_accepts_string_value():
    assert lookup("password_reset").kind is NotificationKind.PASSWORD_RESET


def test_welcome_subject_matches_catalog():
    assert lookup(NotificationKind.WELCOME).subject_template == "Bienvenue sur NFI REPORT"


@pytest.mark.parametrize("kind", ["sms_alert", "", None, 42])
def test_lookup_rejects_unknown_kind(kind):
    with pytest.raises(UnknownKind):
        lookup(kind)


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        TEMPLATE_REGISTRY[NotificationKind.WELCOME] = None  # type: ignore[index]


def test_one_descriptor_per_kind():
    kinds = [d.kind for d in all_descriptors()]

    assert sorted(kinds) == sorted(NotificationKind)
