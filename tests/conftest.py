"""Pytest configuration for shared fixtures."""
from __future__ import annotations

import os
from typing import Callable, Dict

import httpx
import pytest

os.environ["RESEND_API_KEY"] = os.environ.get("RESEND_API_KEY") or "re_test_key"
os.environ.pop("NOTIFY_API_TOKEN", None)

from helpers import API_BASE, ProviderStub, RecordingSleep, fake_renderer
from nfi_notify.config import DeliveryConfig, RetryPolicy, SenderIdentity
from nfi_notify.domain.email.composer import MessageComposer
from nfi_notify.domain.email.dispatch import ResendDispatchClient
from nfi_notify.domain.email.service import NotificationService

@pytest.fixture
def sender() -> SenderIdentity:
    return SenderIdentity(address="noreply@nfireport.com", display_name="NFI REPORT")

@pytest.fixture
def delivery_config(sender: SenderIdentity) -> DeliveryConfig:
    return DeliveryConfig(api_key="re_test_key", api_base=API_BASE, timeout=5.0, sender=sender)

@pytest.fixture
def composer(sender: SenderIdentity) -> MessageComposer:
    return MessageComposer(sender=sender, body_renderer=fake_renderer)

@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()

@pytest.fixture
def build_service(
    composer: MessageComposer, delivery_config: DeliveryConfig, recording_sleep: RecordingSleep
) -> Callable[..., NotificationService]:
    """Factory wiring a NotificationService to a scripted provider."""

    def _build(provider: ProviderStub, max_attempts: int = 3) -> NotificationService:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(provider))
        return NotificationService(
            composer=composer,
            client=ResendDispatchClient(delivery_config, http_client=http_client),
            retry_policy=RetryPolicy(max_attempts=max_attempts, base_delay=1.0, multiplier=2.0),
            sleep=recording_sleep,
        )

    return _build

@pytest.fixture
def params() -> Dict[str, str]:
    return {"period": "Octobre 2026", "amount": "5 000 FCFA"}
