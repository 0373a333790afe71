"""
Resend dispatch client
Submits one composed message per call and classifies the provider response
"""

import logging
from typing import Optional

import httpx

from ...config import DeliveryConfig
from .schemas import ComposedMessage, Delivered, DispatchResult, Failed

logger = logging.getLogger(__name__)

# Client errors that describe a transient condition rather than a bad message
TRANSIENT_CLIENT_STATUSES = {408, 429}


def _error_reason(response: httpx.Response) -> str:
    """Machine-readable reason code from a Resend error payload"""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        for key in ("name", "code", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("name"), str):
                return value["name"]
    return f"http_{response.status_code}"


def classify_response(response: httpx.Response) -> DispatchResult:
    """Map a provider HTTP response to a dispatch result"""
    status = response.status_code

    if 200 <= status < 300:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        message_id = payload.get("id") if isinstance(payload, dict) else None
        if not message_id:
            return Failed(reason="invalid_provider_response", retryable=False)
        return Delivered(provider_message_id=str(message_id))

    reason = _error_reason(response)
    if 400 <= status < 500:
        return Failed(reason=reason, retryable=status in TRANSIENT_CLIENT_STATUSES)
    return Failed(reason=reason, retryable=True)


class ResendDispatchClient:
    """Stateless single-attempt sender for the Resend `POST /emails` endpoint"""

    def __init__(self, config: DeliveryConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._http_client = http_client

    @property
    def endpoint(self) -> str:
        return f"{self.config.api_base}/emails"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            self.endpoint, json=payload, headers=self._headers(), timeout=self.config.timeout
        )

    async def send(self, message: ComposedMessage) -> DispatchResult:
        """
        Send one message to Resend.

        Never raises: transport faults and provider rejections are both
        returned as a Failed result.
        """
        if not self.config.is_configured:
            logger.error("❌ No email service configured - RESEND_API_KEY missing")
            return Failed(reason="not_configured", retryable=False)

        payload = message.to_provider_payload()

        try:
            logger.info(f"📧 Sending {message.kind.value} email via Resend to: {message.to.address}")
            if self._http_client is not None:
                response = await self._post(self._http_client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, payload)
        except httpx.TimeoutException as e:
            logger.warning(f"⚠️ Resend request timed out for {message.to.address}: {e!r}")
            return Failed(reason="timeout", retryable=True)
        except httpx.TransportError as e:
            logger.warning(f"⚠️ Resend connection error for {message.to.address}: {e!r}")
            return Failed(reason="connection_error", retryable=True)
        except Exception as e:
            logger.error(f"❌ Unexpected error sending email to {message.to.address}: {e}")
            return Failed(reason="unexpected_error", retryable=False)

        result = classify_response(response)
        if result.delivered:
            logger.info(f"✅ Email sent successfully via Resend: {result.provider_message_id}")
        elif result.retryable:
            logger.warning(
                f"⚠️ Resend temporary failure for {message.to.address}: "
                f"HTTP {response.status_code} {result.reason}"
            )
        else:
            logger.error(
                f"❌ Resend rejected email to {message.to.address}: "
                f"HTTP {response.status_code} {result.reason}"
            )
        return result
