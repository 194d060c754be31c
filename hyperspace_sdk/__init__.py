"""Hyperspace AVAX marketplace SDK.

- ``hyperspace_sdk.data``: read queries against the Hyperspace REST API
- ``hyperspace_sdk.execution``: ``TradeClient`` for bids, listings and purchases
"""

from .execution.trade_client import TradeClient
from .models import OrderConfig, PaginationConfig, SortOrder, TradeResult

__all__ = [
    "OrderConfig",
    "PaginationConfig",
    "SortOrder",
    "TradeClient",
    "TradeResult",
]
