"""Tests for the Resend dispatch client."""
from __future__ import annotations

import json

import httpx
import pytest

from helpers import API_BASE
from nfi_notify.config import DeliveryConfig
from nfi_notify.domain.email.dispatch import ResendDispatchClient, classify_response
from nfi_notify.domain.email.schemas import Delivered, Failed, NotificationKind, Recipient


def _client(config: DeliveryConfig, handler) -> ResendDispatchClient:
    return ResendDispatchClient(
        config, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )


@pytest.fixture
def message(composer):
    return composer.compose(NotificationKind.WELCOME, Recipient("a@example.com"), {})


@pytest.mark.asyncio
async def test_send_posts_payload(delivery_config, message):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "msg_1"})

    result = await _client(delivery_config, handler).send(message)

    assert result == Delivered(provider_message_id="msg_1")
    assert len(seen) == 1
    request = seen[0]
    assert str(request.url) == f"{API_BASE}/emails"
    assert request.headers["Authorization"] == "Bearer re_test_key"
    assert json.loads(request.content) == {
        "from": "NFI REPORT <noreply@nfireport.com>",
        "to": ["a@example.com"],
        "subject": "Bienvenue sur NFI REPORT",
        "html": message.body,
    }


@pytest.mark.asyncio
async def test_client_error_is_permanent(delivery_config, message):
    def handler(request):
        return httpx.Response(422, json={"statusCode": 422, "name": "invalid_recipient"})

    result = await _client(delivery_config, handler).send(message)

    assert result == Failed(reason="invalid_recipient", retryable=False)


@pytest.mark.asyncio
async def test_server_error_is_retryable(delivery_config, message):
    def handler(request):
        return httpx.Response(503, text="upstream unavailable")

    result = await _client(delivery_config, handler).send(message)

    assert result == Failed(reason="http_503", retryable=True)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc, reason",
    [
        (httpx.ConnectTimeout, "timeout"),
        (httpx.ReadTimeout, "timeout"),
        (httpx.ConnectError, "connection_error"),
    ],
)
async def test_transport_errors_are_retryable(delivery_config, message, exc, reason):
    def handler(request):
        raise exc("boom", request=request)

    result = await _client(delivery_config, handler).send(message)

    assert result == Failed(reason=reason, retryable=True)


@pytest.mark.asyncio
async def test_unexpected_error_is_captured(delivery_config, message):
    def handler(request):
        raise RuntimeError("bug")

    result = await _client(delivery_config, handler).send(message)

    assert result == Failed(reason="unexpected_error", retryable=False)


@pytest.mark.asyncio
async def test_missing_api_key_makes_no_request(sender, message):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"id": "x"})

    config = DeliveryConfig(api_key=None, api_base=API_BASE, sender=sender)
    result = await _client(config, handler).send(message)

    assert result == Failed(reason="not_configured", retryable=False)
    assert calls == []


@pytest.mark.parametrize(
    "status, body, expected",
    [
        (200, {"id": "abc"}, Delivered("abc")),
        (200, {}, Failed("invalid_provider_response", False)),
        (400, {"name": "validation_error"}, Failed("validation_error", False)),
        (401, {"name": "missing_api_key"}, Failed("missing_api_key", False)),
        (404, None, Failed("http_404", False)),
        (408, None, Failed("http_408", True)),
        (429, {"name": "rate_limit_exceeded"}, Failed("rate_limit_exceeded", True)),
        (500, {"name": "internal_server_error"}, Failed("internal_server_error", True)),
    ],
)
def test_classify_response(status, body, expected):
    if body is None:
        response = httpx.Response(status, text="")
    else:
        response = httpx.Response(status, json=body)

    assert classify_response(response) == expected


def test_api_key_not_in_repr(delivery_config):
    assert "re_test_key" not in repr(delivery_config)
