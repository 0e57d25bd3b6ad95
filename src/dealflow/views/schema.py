"""Table objects for the four deal stage views.

The views are owned by the write path and its migrations; these
definitions only describe the columns the read side selects. Aggregate
columns are nullable everywhere except ``deal_pending``.

The ``signed`` and ``processed`` columns hold timestamps on Postgres but
may be boolean or integer flags elsewhere; ``StageMarker`` reads both.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Column, DateTime, MetaData, Table, Text
from sqlalchemy.types import TypeDecorator

PENDING_VIEW_NAME = "deal_pending"
SIGNED_VIEW_NAME = "deal_signed"
APPROVED_VIEW_NAME = "deal_approved"
REJECTED_VIEW_NAME = "deal_rejected"


class StageMarker(TypeDecorator):
    """Timestamp column that passes non-text values through unconverted.

    Drivers that return text timestamps (SQLite) still get the DateTime
    parsing; integers, booleans and native datetimes come back as stored.
    """

    impl = DateTime
    cache_ok = True

    def result_processor(self, dialect: Any, coltype: Any) -> Any:
        process = self.impl.dialect_impl(dialect).result_processor(dialect, coltype)
        if process is None:
            return None

        def passthrough(value: Any) -> Any:
            if isinstance(value, str):
                return process(value)
            return value

        return passthrough


views_metadata = MetaData()

deal_pending = Table(
    PENDING_VIEW_NAME,
    views_metadata,
    Column("aggregate", Text, nullable=False),
    Column("inserted", DateTime(timezone=True), nullable=False),
)

deal_signed = Table(
    SIGNED_VIEW_NAME,
    views_metadata,
    Column("aggregate", Text, nullable=True),
    Column("signed", StageMarker(timezone=True), nullable=True),
)

deal_approved = Table(
    APPROVED_VIEW_NAME,
    views_metadata,
    Column("aggregate", Text, nullable=True),
    Column("processed", StageMarker(timezone=True), nullable=True),
)

deal_rejected = Table(
    REJECTED_VIEW_NAME,
    views_metadata,
    Column("aggregate", Text, nullable=True),
    Column("processed", StageMarker(timezone=True), nullable=True),
)
