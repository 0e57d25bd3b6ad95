"""SQS transport adapter.

Wraps a boto3 SQS client behind a single ``send`` coroutine. boto3 is
blocking, so each call runs on a worker thread; the client itself is
thread-safe and shared across concurrent sends.
"""

from __future__ import annotations

import asyncio
from typing import Any

import boto3
import structlog
from botocore.config import Config

from src.dealflow.queue.schemas import QueueConnect

logger = structlog.get_logger(__name__)

ACCEPTED_STATUS_CODE = 200


class QueueSendError(Exception):
    """The queue service answered with a non-accepted status code."""

    def __init__(self, status_code: int | None) -> None:
        super().__init__(f"failed sending message to queue with code {status_code}")
        self.status_code = status_code


def connect_queue(conf: QueueConnect | Any) -> Any:
    """Return an SQS client for ``conf``.

    Args:
        conf: Either connection settings, from which a new client is
            built, or an already-constructed SQS client, returned as-is.

    Clients built here make exactly one attempt per request. Redelivery
    and retry belong to the caller.
    """
    if not isinstance(conf, QueueConnect):
        return conf

    client_kwargs: dict[str, Any] = {
        "service_name": "sqs",
        "region_name": conf.region,
        "config": Config(
            connect_timeout=conf.connect_timeout,
            read_timeout=conf.read_timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
        ),
    }
    if conf.endpoint_url:
        client_kwargs["endpoint_url"] = conf.endpoint_url
    if conf.access_key and conf.secret_key:
        client_kwargs["aws_access_key_id"] = conf.access_key
        client_kwargs["aws_secret_access_key"] = conf.secret_key

    client = boto3.client(**client_kwargs)
    logger.info(
        "sqs_client_connected",
        region=conf.region,
        endpoint=conf.endpoint_url,
    )
    return client


class SqsTransport:
    """Minimal send-only view of an SQS client.

    Args:
        client: boto3 SQS client (or anything exposing ``send_message``).
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    async def send(
        self,
        queue_url: str,
        body: str,
        group_id: str | None = None,
    ) -> dict[str, Any]:
        """Send one message and verify the service accepted it.

        Args:
            queue_url: Target queue URL.
            body: Encoded message body.
            group_id: FIFO message group id. Only sent when provided.

        Returns:
            The raw ``send_message`` response.

        Raises:
            QueueSendError: If the response status is not 200.
        """
        params: dict[str, Any] = {"QueueUrl": queue_url, "MessageBody": body}
        if group_id is not None:
            params["MessageGroupId"] = group_id

        response = await asyncio.to_thread(self._client.send_message, **params)

        status_code = (response or {}).get("ResponseMetadata", {}).get("HTTPStatusCode")
        if status_code != ACCEPTED_STATUS_CODE:
            raise QueueSendError(status_code)
        return response
