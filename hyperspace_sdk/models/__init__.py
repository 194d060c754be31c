"""Hyperspace SDK — models package."""

from .query import (
    COLLECTION_LISTING_ORDER_COLUMNS,
    PROJECT_STATS_ORDER_COLUMNS,
    ActionType,
    OrderConfig,
    PaginationConfig,
    SortOrder,
)
from .trade import (
    TradeResult,
    price_to_str,
    price_to_wire,
    to_price,
    token_address,
    total_payment_amount,
)

__all__ = [
    "ActionType",
    "COLLECTION_LISTING_ORDER_COLUMNS",
    "OrderConfig",
    "PROJECT_STATS_ORDER_COLUMNS",
    "PaginationConfig",
    "SortOrder",
    "TradeResult",
    "price_to_str",
    "price_to_wire",
    "to_price",
    "token_address",
    "total_payment_amount",
]
