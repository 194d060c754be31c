"""Request shapes shared by the read endpoints."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SortOrder(str, Enum):
    """Sort direction for an ``order_by`` entry."""

    ASC = "ASC"
    DESC = "DESC"


class ActionType(str, Enum):
    """Activity feed event types."""

    TRANSACTION = "TRANSACTION"
    LISTING = "LISTING"
    DELISTING = "DELISTING"
    BID = "BID"
    COLLECTIONBID = "COLLECTIONBID"
    CANCELCOLLECTIONBID = "CANCELCOLLECTIONBID"
    CANCELBID = "CANCELBID"


# Sortable columns for get-collection-view
COLLECTION_LISTING_ORDER_COLUMNS: frozenset[str] = frozenset({
    "listing_listing_type",
    "is_project_verified",
    "listing_block_timestamp",
    "listing_block_number",
    "listing_price",
    "listing_display_price",
    "rarity_hyperspace",
    "token_address",
    "token_id",
})

# Sortable columns for get-project-stats
PROJECT_STATS_ORDER_COLUMNS: frozenset[str] = frozenset({
    "project_id",
    "market_cap",
    "volume_7day",
    "volume_1day",
    "floor_price",
    "floor_price_1day_change",
    "average_price",
    "average_price_1day_change",
    "volume_1day_change",
    "max_price",
    "num_of_token_holders",
    "num_of_token_listed",
    "percentage_of_token_listed",
    "created_at",
})


class PaginationConfig(BaseModel):
    """Page cursor forwarded verbatim as ``pagination_info``."""

    model_config = ConfigDict(extra="allow")

    page_number: Optional[int] = Field(default=None, ge=1)
    page_size: Optional[int] = Field(default=None, ge=1)
    progressive_load: Optional[bool] = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class OrderConfig(BaseModel):
    """One ``(column, direction)`` pair of an ``order_by`` list."""

    field_name: str = Field(..., min_length=1)
    sort_order: SortOrder = SortOrder.ASC

    def to_wire(self) -> dict:
        return self.model_dump(mode="json")
