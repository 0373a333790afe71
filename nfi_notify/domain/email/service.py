"""Notification service - business logic for sending transactional emails"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Mapping, Optional, Union

from ...config import RetryPolicy
from .composer import MessageComposer
from .dispatch import ResendDispatchClient
from .schemas import ComposedMessage, DispatchResult, NotificationKind, Recipient

logger = logging.getLogger(__name__)


class DeliveryState(str, Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    DELIVERED = "delivered"
    REJECTED = "rejected"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class DeliveryAttempt:
    number: int
    delay_before: float
    result: DispatchResult


@dataclass(frozen=True)
class DeliveryReport:
    state: DeliveryState
    attempts: tuple[DeliveryAttempt, ...]

    @property
    def result(self) -> DispatchResult:
        return self.attempts[-1].result


class NotificationService:
    """Orchestrates compose -> send with bounded retries for transient failures"""

    def __init__(
        self,
        composer: MessageComposer,
        client: ResendDispatchClient,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.composer = composer
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._in_flight: set[asyncio.Task] = set()

    async def notify(
        self,
        kind: Union[NotificationKind, str],
        recipient: Recipient,
        params: Optional[Mapping[str, str]] = None,
    ) -> DispatchResult:
        """
        Compose and deliver one notification.

        Composition errors (UnknownKind, MissingParam, ...) are raised before
        any network call. Delivery failures are returned as Failed.
        """
        report = await self.notify_with_report(kind, recipient, params)
        return report.result

    async def notify_with_report(
        self,
        kind: Union[NotificationKind, str],
        recipient: Recipient,
        params: Optional[Mapping[str, str]] = None,
    ) -> DeliveryReport:
        message = self.composer.compose(kind, recipient, params)
        return await self.deliver(message)

    async def deliver(self, message: ComposedMessage) -> DeliveryReport:
        """Send a composed message, retrying retryable failures per the retry policy"""
        policy = self.retry_policy
        state = DeliveryState.IDLE
        attempts: list[DeliveryAttempt] = []

        for number in range(1, policy.max_attempts + 1):
            delay = policy.delay_before(number)
            if delay > 0:
                logger.info(
                    f"⏳ Retrying {message.kind.value} email to {message.to.address} "
                    f"in {delay:.1f}s (attempt {number}/{policy.max_attempts})"
                )
                await self._sleep(delay)

            state = DeliveryState.ATTEMPTING
            result = await self._send_once(message)
            attempts.append(DeliveryAttempt(number=number, delay_before=delay, result=result))

            if result.delivered:
                state = DeliveryState.DELIVERED
                break
            if not result.retryable:
                state = DeliveryState.REJECTED
                break
        else:
            state = DeliveryState.EXHAUSTED
            logger.error(
                f"❌ Giving up on {message.kind.value} email to {message.to.address} "
                f"after {len(attempts)} attempts: {attempts[-1].result.reason}"
            )

        return DeliveryReport(state=state, attempts=tuple(attempts))

    async def _send_once(self, message: ComposedMessage) -> DispatchResult:
        # A request already handed to the provider runs to completion even if
        # the caller is cancelled; only further attempts are abandoned.
        task = asyncio.ensure_future(self.client.send(message))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            logger.warning(
                f"⚠️ Notification to {message.to.address} cancelled; "
                "in-flight send left to complete"
            )
            task.add_done_callback(self._log_orphaned_result)
            raise

    @staticmethod
    def _log_orphaned_result(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        result = task.result()
        if result.delivered:
            logger.info(f"✅ Cancelled notification still delivered: {result.provider_message_id}")
        else:
            logger.warning(f"⚠️ Cancelled notification failed: {result.reason}")

    async def drain(self) -> None:
        """Wait for sends that outlived their cancelled callers"""
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)
