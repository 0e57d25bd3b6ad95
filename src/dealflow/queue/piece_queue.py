"""Piece queue: PieceMessage records over SQS, DAG-JSON encoded."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.dealflow.config import get_settings
from src.dealflow.queue import codec
from src.dealflow.queue.client import QueueClient, create_queue_client
from src.dealflow.queue.schemas import PieceMessage, QueueConnect


def encode_message(piece_message: PieceMessage) -> str:
    """Encode a piece message as a DAG-JSON string body.

    Raises:
        EncodingError: If a payload field is outside the data model.
    """
    return codec.dumps(piece_message.to_ipld()).decode("utf-8")


def decode_message(message: str | bytes | Mapping[str, Any]) -> PieceMessage:
    """Decode a message body back into a PieceMessage.

    Args:
        message: The body string itself, or an SQS record carrying it
            under ``MessageBody`` (send/receive API) or ``body`` (Lambda
            event records).

    Raises:
        DecodingError: If the body is not well-formed DAG-JSON.
        ValueError: If the decoded value is not a piece message.
    """
    if isinstance(message, Mapping):
        body = message.get("MessageBody", message.get("body"))
        if body is None:
            msg = "record has neither 'MessageBody' nor 'body'"
            raise ValueError(msg)
    else:
        body = message
    return PieceMessage.from_ipld(codec.loads(body))


def create_piece_queue(
    conf: QueueConnect | Any | None = None,
    queue_url: str | None = None,
) -> QueueClient[PieceMessage]:
    """Build the piece queue client.

    Both arguments fall back to settings (``AWS_REGION``,
    ``SQS_ENDPOINT_URL``, ``PIECE_QUEUE_URL``).
    """
    settings = get_settings()
    if conf is None:
        conf = QueueConnect(
            region=settings.AWS_REGION,
            endpoint_url=settings.SQS_ENDPOINT_URL or None,
        )
    url = queue_url or settings.PIECE_QUEUE_URL
    if not url:
        msg = "queue_url is required (or set PIECE_QUEUE_URL)"
        raise ValueError(msg)
    return create_queue_client(
        conf,
        queue_url=url,
        encode_message=encode_message,
        send_timeout=settings.SQS_SEND_TIMEOUT,
    )
