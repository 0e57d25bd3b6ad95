"""Deal lifecycle read model.

Exports:
    DealView: Stage selectors (pending, signed, approved, rejected).
    DealStage: Lifecycle stage enum driving ``DealView.select_stage``.
    DealPending / DealSigned / DealProcessed: Projected row types.
    create_deal_view: DealView over the shared async engine.
"""

from __future__ import annotations

from src.dealflow.views.deal import (
    DEFAULT_LIMIT,
    DealPending,
    DealProcessed,
    DealSigned,
    DealStage,
    DealView,
    create_deal_view,
)
from src.dealflow.views.schema import (
    APPROVED_VIEW_NAME,
    PENDING_VIEW_NAME,
    REJECTED_VIEW_NAME,
    SIGNED_VIEW_NAME,
)

__all__ = [
    "APPROVED_VIEW_NAME",
    "DEFAULT_LIMIT",
    "DealPending",
    "DealProcessed",
    "DealSigned",
    "DealStage",
    "DealView",
    "PENDING_VIEW_NAME",
    "REJECTED_VIEW_NAME",
    "SIGNED_VIEW_NAME",
    "create_deal_view",
]
