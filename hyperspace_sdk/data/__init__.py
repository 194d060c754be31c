"""Hyperspace SDK — REST transport and read queries."""

from .queries import (
    get_collection_activity,
    get_collection_bids,
    get_collection_listings,
    get_collection_stats,
    get_user_activity,
    get_user_collection_bids,
    get_user_listings,
    get_user_owned_nfts,
)
from .rest_client import HyperspaceRestClient

__all__ = [
    "HyperspaceRestClient",
    "get_collection_activity",
    "get_collection_bids",
    "get_collection_listings",
    "get_collection_stats",
    "get_user_activity",
    "get_user_collection_bids",
    "get_user_listings",
    "get_user_owned_nfts",
]
