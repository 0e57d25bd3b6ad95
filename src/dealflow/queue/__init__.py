"""Queue dispatch for piece work items.

Exports:
    PieceMessage: Work item describing one content piece.
    QueueConnect: Connection settings for building an SQS client.
    QueueClient: Typed ``add`` over a single queue.
    SqsTransport: Send-only adapter around a boto3 SQS client.
    create_queue_client: Wire connection, transport and client together.
    create_piece_queue: QueueClient[PieceMessage] with DAG-JSON bodies.
    encode_message / decode_message: Piece message body codec.
"""

from __future__ import annotations

from src.dealflow.queue.schemas import PieceMessage, QueueConnect

__all__ = [
    "PieceMessage",
    "QueueClient",
    "QueueConnect",
    "SqsTransport",
    "create_piece_queue",
    "create_queue_client",
    "decode_message",
    "encode_message",
]


def __getattr__(name: str):  # noqa: N807
    """Lazy-load the boto3-backed modules."""
    if name in ("QueueClient", "create_queue_client"):
        from src.dealflow.queue import client

        return getattr(client, name)
    if name == "SqsTransport":
        from src.dealflow.queue.transport import SqsTransport

        return SqsTransport
    if name in ("create_piece_queue", "decode_message", "encode_message"):
        from src.dealflow.queue import piece_queue

        return getattr(piece_queue, name)
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
