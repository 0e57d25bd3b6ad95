"""Queue message and connection schemas.

PieceMessage is the work item handed to the aggregation workers. Its
``piece`` link and any extra payload fields are IPLD data-model values, so
the whole message survives a DAG-JSON round trip unchanged.
"""

from __future__ import annotations

from typing import Any

from multiformats import CID
from pydantic import BaseModel, ConfigDict, field_validator


class PieceMessage(BaseModel):
    """A content piece queued for aggregation.

    Attributes:
        piece: Content identifier of the piece.
        group: Storefront group the piece was submitted under. Optional;
            distinct from the SQS message group id used for ordering.

    Any other keyword becomes part of the domain payload and is carried
    through encoding verbatim.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="allow",
        frozen=True,
    )

    piece: CID
    group: str | None = None

    @field_validator("piece", mode="before")
    @classmethod
    def _parse_piece(cls, value: Any) -> Any:
        """Accept a CID string as well as a parsed CID."""
        if isinstance(value, str):
            return CID.decode(value)
        return value

    def to_ipld(self) -> dict[str, Any]:
        """Return the message as a plain data-model map, omitting an unset group."""
        data: dict[str, Any] = {"piece": self.piece}
        if self.group is not None:
            data["group"] = self.group
        data.update(self.model_extra or {})
        return data

    @classmethod
    def from_ipld(cls, data: Any) -> PieceMessage:
        """Rebuild a message from a decoded data-model map."""
        if not isinstance(data, dict):
            msg = f"piece message must be a map, got {type(data).__name__}"
            raise ValueError(msg)
        return cls(**data)


class QueueConnect(BaseModel):
    """Connection settings for building an SQS client.

    Attributes:
        region: AWS region of the queue.
        endpoint_url: Override for LocalStack / ElasticMQ style endpoints.
        access_key: Explicit credentials; falls back to the default boto3
            credential chain when either key is missing.
        secret_key: See ``access_key``.
        connect_timeout: Seconds to wait for the TCP connection.
        read_timeout: Seconds to wait for the service response.
    """

    region: str
    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    connect_timeout: float = 5.0
    read_timeout: float = 10.0
