"""Tests for shared validation helpers."""
from __future__ import annotations

import pytest

from nfi_notify.shared.validators import is_valid_email, validate_email


def test_validate_email_normalizes():
    assert validate_email("  Reader@Example.COM ") == "reader@example.com"


def test_validate_email_rejects_malformed():
    with pytest.raises(ValueError):
        validate_email("not-an-email")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("a@example.com", True),
        ("not-an-email", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_email(value, expected):
    assert is_valid_email(value) is expected
