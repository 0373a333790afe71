"""Test doubles for the Resend provider and the body renderer."""
from __future__ import annotations

from typing import Callable, List, Mapping

import httpx

from nfi_notify.domain.email.schemas import Recipient

API_BASE = "https://resend.test"


def fake_renderer(template_id: str, recipient: Recipient, params: Mapping[str, str]) -> str:
    """Deterministic stand-in for the MJML body renderer."""

    pairs = ",".join(f"{key}={params[key]}" for key in sorted(params))
    return f"<p>{template_id}|{recipient.address}|{pairs}</p>"


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ProviderStub:
    """Scripted Resend endpoint for httpx.MockTransport."""

    def __init__(self, responses: List[Callable[[httpx.Request], httpx.Response]]) -> None:
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        return step(request)


def ok(message_id: str = "msg_123") -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, json={"id": message_id})


def error(status: int, name: str, message: str = "") -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(
        status, json={"statusCode": status, "name": name, "message": message}
    )


def timeout() -> Callable[[httpx.Request], httpx.Response]:
    def _raise(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    return _raise
