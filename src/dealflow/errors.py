"""Failure taxonomy shared by the queue client and the deal views.

Each class is a kind of failure, returned inside ``Err`` rather than raised.
The underlying exception message is kept as the error message so callers
can log or surface it without unwrapping anything.
"""

from __future__ import annotations


class DealflowError(Exception):
    """Base class for failures reported through ``Result``."""

    name = "DealflowError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.name}: {self.message}" if self.message else self.name


class EncodeRecordFailed(DealflowError):
    """The outbound record could not be serialized. Retrying unchanged will not help."""

    name = "EncodeRecordFailed"


class QueueOperationFailed(DealflowError):
    """The queue send raised, timed out, or was not accepted by the service."""

    name = "QueueOperationFailed"


class DatabaseOperationError(DealflowError):
    """A deal view query failed or returned a row that could not be projected."""

    name = "DatabaseOperationError"
