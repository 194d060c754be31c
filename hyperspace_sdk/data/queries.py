"""Read queries against the Hyperspace AVAX REST API.

Each function builds a ``condition`` from its arguments, adds the optional
``order_by`` / ``pagination_info`` and POSTs it to one fixed endpoint. The
``httpx.Response`` is returned as-is; transport errors and non-2xx
responses propagate to the caller.

Without an explicit ``client`` a short-lived ``HyperspaceRestClient`` is
opened from ``settings`` for the single call.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import httpx
import structlog

from hyperspace_sdk.data.rest_client import HyperspaceRestClient, compact
from hyperspace_sdk.models.query import (
    COLLECTION_LISTING_ORDER_COLUMNS,
    PROJECT_STATS_ORDER_COLUMNS,
    ActionType,
    OrderConfig,
    PaginationConfig,
)

logger = structlog.get_logger("data.queries")

__all__ = [
    "get_collection_activity",
    "get_collection_bids",
    "get_collection_listings",
    "get_collection_stats",
    "get_user_activity",
    "get_user_collection_bids",
    "get_user_listings",
    "get_user_owned_nfts",
]

Pagination = Union[PaginationConfig, Mapping[str, Any]]
OrderBy = Sequence[Union[OrderConfig, Mapping[str, Any]]]

# Endpoints
MARKETPLACE_SNAPSHOTS = "get-marketplace-snapshots"
MARKETPLACE_SNAPSHOT = "get-marketplace-snapshot"
COLLECTION_BIDS = "get-collection-bids-for-project"
USER_COLLECTION_BIDS = "get-collection-bids-for-project-and-user"
COLLECTION_ACTIVITY = "get-collection-activity"
COLLECTION_VIEW = "get-collection-view"
USER_ACTIVITY = "get-user-activity"
PROJECT_STATS = "get-project-stats"

NORMAL_LISTING = "NORMAL"


# ── Queries ──────────────────────────────────────────────────────────


async def get_user_owned_nfts(
    wallet_address: str,
    collection: Optional[str] = None,
    pagination: Optional[Pagination] = None,
    *,
    client: Optional[HyperspaceRestClient] = None,
) -> httpx.Response:
    """Snapshot of the NFTs held by ``wallet_address``, optionally in one collection."""
    condition = {
        "owner": wallet_address,
        "project_ids": _project_ids(collection),
    }
    return await _post(
        MARKETPLACE_SNAPSHOTS,
        _body(condition, pagination=pagination),
        client,
    )


async def get_collection_bids(
    collection: str,
    pagination: Optional[Pagination] = None,
    *,
    client: Optional[HyperspaceRestClient] = None,
) -> httpx.Response:
    """All collection-level bids for ``collection``."""
    condition = {"contract_address": collection}
    return await _post(COLLECTION_BIDS, _body(condition, pagination=pagination), client)


async def get_user_collection_bids(
    collection: str,
    wallet_address: str,
    pagination: Optional[Pagination] = None,
    *,
    client: Optional[HyperspaceRestClient] = None,
) -> httpx.Response:
    """Collection bids placed by ``wallet_address`` on ``collection``."""
    condition = {
        "contract_address": collection,
        "buyer_address": wallet_address,
    }
    return await _post(
        USER_COLLECTION_BIDS,
        _body(condition, pagination=pagination),
        client,
    )


async def get_user_listings(
    wallet_address: str,
    collection: Optional[str] = None,
    pagination: Optional[Pagination] = None,
    *,
    client: Optional[HyperspaceRestClient] = None,
) -> httpx.Response:
    """Active normal listings of ``wallet_address``."""
    condition = {
        "owner": wallet_address,
        "project_ids": _project_ids(collection),
        "listing_type": NORMAL_LISTING,
    }
    return await _post(MARKETPLACE_SNAPSHOT, _body(condition, pagination=pagination), client)


async def get_collection_activity(
    collection: str,
    action_types: Optional[Iterable[Union[ActionType, str]]] = None,
    pagination: Optional[Pagination] = None,
    *,
    client: Optional[HyperspaceRestClient] = None,
) -> httpx.Response:
    """Activity feed of ``collection``, optionally filtered by action type.

    Action types: TRANSACTION, LISTING, DELISTING, BID, COLLECTIONBID,
    CANCELCOLLECTIONBID, CANCELBID.
    """
    condition = {
        "projects": [{"project_id": collection}],
        "action_types": _action_types(action_types),
    }
    return await _post(
        COLLECTION_ACTIVITY,
        _body(condition, pagination=pagination),
        client,
    )


async def get_collection_listings(
    collection: str,
    order_by: Optional[OrderBy] = None,
    pagination: Optional[Pagination] = None,
    *,
    client: Optional[HyperspaceRestClient] = None,
) -> httpx.Response:
    """Active listings of ``collection``.

    ``order_by`` columns: see ``COLLECTION_LISTING_ORDER_COLUMNS``.
    """
    condition = {
        "project_ids": _project_ids(collection),
        "listing_type": NORMAL_LISTING,
    }
    body = _body(
        condition,
        order_by=_order_by(order_by, COLLECTION_LISTING_ORDER_COLUMNS, COLLECTION_VIEW),
        pagination=pagination,
    )
    return await _post(COLLECTION_VIEW, body, client)


async def get_user_activity(
    wallet_address: str,
    action_types: Optional[Iterable[Union[ActionType, str]]] = None,
    pagination: Optional[Pagination] = None,
    *,
    client: Optional[HyperspaceRestClient] = None,
) -> httpx.Response:
    """Activity feed of ``wallet_address``, optionally filtered by action type."""
    condition = {
        "user_address": wallet_address,
        "action_types": _action_types(action_types),
    }
    return await _post(USER_ACTIVITY, _body(condition, pagination=pagination), client)


async def get_collection_stats(
    collection: Optional[str] = None,
    order_by: Optional[OrderBy] = None,
    pagination: Optional[Pagination] = None,
    *,
    client: Optional[HyperspaceRestClient] = None,
) -> httpx.Response:
    """Aggregate stats for one collection, or for every collection.

    Without ``collection`` the body carries no ``condition`` at all.
    ``order_by`` columns: see ``PROJECT_STATS_ORDER_COLUMNS``.
    """
    condition = {"project_ids": [collection]} if collection else None
    body = _body(
        condition,
        order_by=_order_by(order_by, PROJECT_STATS_ORDER_COLUMNS, PROJECT_STATS),
        pagination=pagination,
    )
    return await _post(PROJECT_STATS, body, client)


# ── Body builders ────────────────────────────────────────────────────


def _body(
    condition: Optional[Mapping[str, Any]],
    order_by: Optional[list[dict]] = None,
    pagination: Optional[Pagination] = None,
) -> dict[str, Any]:
    return compact({
        "condition": compact(condition) if condition is not None else None,
        "order_by": order_by,
        "pagination_info": _pagination(pagination),
    })


def _project_ids(collection: Optional[str]) -> Optional[list[dict[str, str]]]:
    if not collection:
        return None
    return [{"project_id": collection}]


def _action_types(
    action_types: Optional[Iterable[Union[ActionType, str]]],
) -> Optional[list[str]]:
    if action_types is None:
        return None
    return [a.value if isinstance(a, ActionType) else str(a) for a in action_types]


def _pagination(pagination: Optional[Pagination]) -> Optional[dict[str, Any]]:
    if pagination is None:
        return None
    if isinstance(pagination, PaginationConfig):
        return pagination.to_wire()
    return dict(pagination)


def _order_by(
    order_by: Optional[OrderBy],
    allowed: frozenset[str],
    endpoint: str,
) -> Optional[list[dict[str, Any]]]:
    """Serialise ``order_by``; unknown columns are logged and forwarded."""
    if order_by is None:
        return None

    entries = [
        entry.to_wire() if isinstance(entry, OrderConfig) else dict(entry)
        for entry in order_by
    ]
    for entry in entries:
        column = entry.get("field_name")
        if column not in allowed:
            logger.warning(
                "queries.order_by_column_not_sortable",
                endpoint=endpoint,
                column=column,
            )
    return entries


async def _post(
    endpoint: str,
    body: Mapping[str, Any],
    client: Optional[HyperspaceRestClient],
) -> httpx.Response:
    if client is not None:
        return await client.post(endpoint, body)
    async with HyperspaceRestClient() as owned:
        return await owned.post(endpoint, body)
