"""Read-only, stage-partitioned views over the deal lifecycle.

A deal moves pending -> signed -> approved | rejected. Each stage is a
database view owned by the write path; this module only selects from them
and projects rows into typed records.

All four selectors run through one routine, ``select_stage``, driven by a
table of stage descriptors. Each descriptor names the view and supplies the
row projection for that stage.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

import structlog
from multiformats import CID
from pydantic import BaseModel, ConfigDict
from sqlalchemy import Table, select
from sqlalchemy.ext.asyncio import AsyncEngine

from src.dealflow.config import get_settings
from src.dealflow.core.database import create_engine, get_engine
from src.dealflow.errors import DatabaseOperationError
from src.dealflow.result import Err, Ok, Result
from src.dealflow.views.schema import (
    deal_approved,
    deal_pending,
    deal_rejected,
    deal_signed,
)

logger = structlog.get_logger(__name__)

DEFAULT_LIMIT = 100

RowT = TypeVar("RowT", bound=BaseModel)


# ── Projections ─────────────────────────────────────────────────────────────


class DealPending(BaseModel):
    """Deal proposal not yet signed."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    aggregate: CID
    inserted: str


class DealSigned(BaseModel):
    """Signed deal. ``aggregate`` is None while the row has none populated.

    ``signed`` is whatever the view holds: a timestamp, or a boolean or
    integer flag on backends that store one.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    aggregate: CID | None
    signed: Any


class DealProcessed(BaseModel):
    """Approved or rejected deal; which one depends on the view it came from."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    aggregate: CID | None
    processed: Any


def to_iso_string(value: datetime | str) -> str:
    """Render a timestamp as UTC ISO-8601 with millisecond precision and a Z suffix.

    Naive datetimes are taken to be UTC. Strings are parsed first so drivers
    that hand back text timestamps render the same way.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


def _parse_optional_aggregate(value: str | None) -> CID | None:
    if value is None:
        return None
    return CID.decode(value)


def _project_pending(row: Mapping[str, Any]) -> DealPending:
    return DealPending(
        aggregate=CID.decode(row["aggregate"]),
        inserted=to_iso_string(row["inserted"]),
    )


def _project_signed(row: Mapping[str, Any]) -> DealSigned:
    return DealSigned(
        aggregate=_parse_optional_aggregate(row["aggregate"]),
        signed=row["signed"],
    )


def _project_processed(row: Mapping[str, Any]) -> DealProcessed:
    return DealProcessed(
        aggregate=_parse_optional_aggregate(row["aggregate"]),
        processed=row["processed"],
    )


# ── Stage descriptors ───────────────────────────────────────────────────────


class DealStage(str, Enum):
    """Lifecycle stages, one database view each."""

    PENDING = "pending"
    SIGNED = "signed"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class StageView(Generic[RowT]):
    """How to read one stage: the view to select from and the row projection."""

    table: Table
    project: Callable[[Mapping[str, Any]], RowT]

    @property
    def view_name(self) -> str:
        return self.table.name


STAGE_VIEWS: dict[DealStage, StageView[Any]] = {
    DealStage.PENDING: StageView(deal_pending, _project_pending),
    DealStage.SIGNED: StageView(deal_signed, _project_signed),
    DealStage.APPROVED: StageView(deal_approved, _project_processed),
    DealStage.REJECTED: StageView(deal_rejected, _project_processed),
}


# ── View ────────────────────────────────────────────────────────────────────


class DealView:
    """Stage selectors over an async SQLAlchemy engine.

    Reads only committed rows and never writes. Each call checks out its
    own connection, so one instance serves concurrent readers.

    Args:
        engine: Async engine pointed at the deal database.
        default_limit: Row limit applied when a caller passes none.
    """

    def __init__(self, engine: AsyncEngine, default_limit: int = DEFAULT_LIMIT) -> None:
        if default_limit < 1:
            msg = f"default_limit must be positive, got {default_limit}"
            raise ValueError(msg)
        self._engine = engine
        self._default_limit = default_limit

    @property
    def default_limit(self) -> int:
        return self._default_limit

    async def select_stage(
        self,
        stage: DealStage,
        limit: int | None = None,
    ) -> Result[list[Any], DatabaseOperationError]:
        """Select up to ``limit`` rows of one stage and project them.

        Args:
            stage: Which lifecycle view to read.
            limit: Maximum rows to return. ``None`` applies the default
                limit; ``0`` returns no rows.

        Returns:
            ``Ok`` with the projected rows (possibly empty), or ``Err``
            with DatabaseOperationError if ``limit`` is negative, the query
            failed, or a row carried an unparseable aggregate.
        """
        if limit is not None and limit < 0:
            return Err(DatabaseOperationError(f"limit must not be negative, got {limit}"))
        row_limit = self._default_limit if limit is None else limit
        stage_view = STAGE_VIEWS[stage]

        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(
                    select(stage_view.table).limit(row_limit)
                )
                rows = result.mappings().all()
        except Exception as exc:
            logger.warning(
                "deal_view_query_failed",
                view=stage_view.view_name,
                limit=row_limit,
                error=str(exc),
            )
            return Err(DatabaseOperationError(str(exc)))

        deals = []
        for row in rows:
            try:
                deals.append(stage_view.project(row))
            except Exception as exc:
                logger.error(
                    "deal_view_row_invalid",
                    view=stage_view.view_name,
                    aggregate=row.get("aggregate"),
                    error=str(exc),
                )
                return Err(
                    DatabaseOperationError(
                        f"invalid row in {stage_view.view_name}: {exc}"
                    )
                )

        return Ok(deals)

    async def select_all_pending(
        self, limit: int | None = None
    ) -> Result[list[DealPending], DatabaseOperationError]:
        """Deals proposed but not yet signed."""
        return await self.select_stage(DealStage.PENDING, limit)

    async def select_all_signed(
        self, limit: int | None = None
    ) -> Result[list[DealSigned], DatabaseOperationError]:
        """Signed deals awaiting a decision."""
        return await self.select_stage(DealStage.SIGNED, limit)

    async def select_all_approved(
        self, limit: int | None = None
    ) -> Result[list[DealProcessed], DatabaseOperationError]:
        return await self.select_stage(DealStage.APPROVED, limit)

    async def select_all_rejected(
        self, limit: int | None = None
    ) -> Result[list[DealProcessed], DatabaseOperationError]:
        return await self.select_stage(DealStage.REJECTED, limit)


def create_deal_view(
    database_url: str | None = None,
    default_limit: int | None = None,
) -> DealView:
    """Build a DealView.

    An explicit ``database_url`` gets its own engine; otherwise the view
    reads through the shared engine on ``DATABASE_URL``. The default limit
    falls back to ``DEAL_VIEW_DEFAULT_LIMIT``.
    """
    settings = get_settings()
    engine = create_engine(database_url) if database_url else get_engine()
    return DealView(
        engine,
        default_limit=default_limit or settings.DEAL_VIEW_DEFAULT_LIMIT,
    )
