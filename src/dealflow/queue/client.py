"""Typed queue client: encode a record, send it once, report the outcome.

``add`` is fire-and-forget from the caller's side. Success carries an empty
dict; failures come back as ``Err`` with one of two kinds:

- EncodeRecordFailed: the record could not be serialized. Nothing was sent.
- QueueOperationFailed: the send raised, timed out, or was not accepted.

There is no internal retry and no deduplication token, so a caller that
retries after ``QueueOperationFailed`` must tolerate duplicate delivery.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar, Union

import structlog

from src.dealflow.errors import EncodeRecordFailed, QueueOperationFailed
from src.dealflow.queue.schemas import QueueConnect
from src.dealflow.queue.transport import SqsTransport, connect_queue
from src.dealflow.result import Err, Ok, Result

logger = structlog.get_logger(__name__)

T = TypeVar("T")

QueueError = Union[EncodeRecordFailed, QueueOperationFailed]
Encoder = Callable[[T], Union[str, Awaitable[str]]]


class QueueClient(Generic[T]):
    """Enqueue typed records onto a single SQS queue.

    Args:
        transport: Anything with an async ``send(queue_url, body, group_id)``.
        queue_url: Target queue URL.
        encode_message: Turns a record into the message body. May be a
            plain function or a coroutine function.
        send_timeout: Seconds to wait for the transport before giving up.
            ``None`` waits for the transport's own timeouts.
    """

    def __init__(
        self,
        transport: SqsTransport,
        queue_url: str,
        encode_message: Encoder[T],
        send_timeout: float | None = None,
    ) -> None:
        self._transport = transport
        self._queue_url = queue_url
        self._encode_message = encode_message
        self._send_timeout = send_timeout

    @property
    def queue_url(self) -> str:
        return self._queue_url

    async def _encode(self, record: T) -> str:
        encoded = self._encode_message(record)
        if asyncio.iscoroutine(encoded):
            encoded = await encoded
        return encoded

    async def add(
        self,
        record: T,
        message_group_id: str | None = None,
    ) -> Result[dict[str, Any], QueueError]:
        """Encode ``record`` and send it to the queue.

        Args:
            record: The record to enqueue.
            message_group_id: Optional ordering partition for FIFO queues.

        Returns:
            ``Ok({})`` once the service accepted the message, otherwise
            ``Err`` with EncodeRecordFailed or QueueOperationFailed.
        """
        try:
            body = await self._encode(record)
        except Exception as exc:
            logger.warning(
                "piece_message_encode_failed",
                queue_url=self._queue_url,
                error=str(exc),
            )
            return Err(EncodeRecordFailed(str(exc)))

        try:
            send = self._transport.send(self._queue_url, body, message_group_id)
            if self._send_timeout is None:
                await send
            else:
                await asyncio.wait_for(send, timeout=self._send_timeout)
        except asyncio.TimeoutError:
            reason = f"timed out after {self._send_timeout}s sending message to queue"
            logger.warning("queue_send_failed", queue_url=self._queue_url, error=reason)
            return Err(QueueOperationFailed(reason))
        except Exception as exc:
            logger.warning("queue_send_failed", queue_url=self._queue_url, error=str(exc))
            return Err(QueueOperationFailed(str(exc)))

        logger.debug(
            "queue_message_sent",
            queue_url=self._queue_url,
            message_group_id=message_group_id,
        )
        return Ok({})


def create_queue_client(
    conf: QueueConnect | Any,
    queue_url: str,
    encode_message: Encoder[T],
    send_timeout: float | None = None,
) -> QueueClient[T]:
    """Build a QueueClient from connection settings or an existing SQS client."""
    transport = SqsTransport(connect_queue(conf))
    return QueueClient(
        transport,
        queue_url=queue_url,
        encode_message=encode_message,
        send_timeout=send_timeout,
    )
