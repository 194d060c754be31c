"""Hyperspace CLI — read queries and wallet status from the command line.

Usage:
    hyperspace stats --collection <contract>
    hyperspace collection-listings <contract> --order-by listing_price:ASC
    hyperspace activity <contract> --action-type LISTING --action-type TRANSACTION
    hyperspace owned <wallet> --page 1 --page-size 20
    hyperspace wallet

Credentials come from HYPERSPACE_API_KEY and, for ``wallet``,
WALLET_PRIVATE_KEY.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Optional

import structlog

from hyperspace_sdk.config.settings import settings
from hyperspace_sdk.core.logger import setup_logging
from hyperspace_sdk.data import queries
from hyperspace_sdk.data.rest_client import HyperspaceRestClient
from hyperspace_sdk.models.query import ActionType, OrderConfig, PaginationConfig, SortOrder
from hyperspace_sdk.web3_infra import approvals
from hyperspace_sdk.web3_infra.wallet import Web3Wallet

logger = structlog.get_logger("cli.main")


def _pagination(args: argparse.Namespace) -> Optional[PaginationConfig]:
    if args.page is None and args.page_size is None:
        return None
    return PaginationConfig(page_number=args.page, page_size=args.page_size)


def _order_by(args: argparse.Namespace) -> Optional[list[OrderConfig]]:
    """Parse ``column[:ASC|DESC]`` flags."""
    if not args.order_by:
        return None
    entries = []
    for raw in args.order_by:
        column, _, direction = raw.partition(":")
        entries.append(OrderConfig(
            field_name=column,
            sort_order=SortOrder(direction.upper() or "ASC"),
        ))
    return entries


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


async def cmd_query(args: argparse.Namespace) -> None:
    """Run one read query and print the JSON body."""
    pagination = _pagination(args)

    async with HyperspaceRestClient() as client:
        if args.command == "owned":
            response = await queries.get_user_owned_nfts(
                args.wallet, args.collection, pagination, client=client,
            )
        elif args.command == "listings":
            response = await queries.get_user_listings(
                args.wallet, args.collection, pagination, client=client,
            )
        elif args.command == "collection-listings":
            response = await queries.get_collection_listings(
                args.collection, _order_by(args), pagination, client=client,
            )
        elif args.command == "bids":
            if args.wallet:
                response = await queries.get_user_collection_bids(
                    args.collection, args.wallet, pagination, client=client,
                )
            else:
                response = await queries.get_collection_bids(
                    args.collection, pagination, client=client,
                )
        elif args.command == "activity":
            response = await queries.get_collection_activity(
                args.collection, args.action_type, pagination, client=client,
            )
        elif args.command == "user-activity":
            response = await queries.get_user_activity(
                args.wallet, args.action_type, pagination, client=client,
            )
        else:
            response = await queries.get_collection_stats(
                args.collection, _order_by(args), pagination, client=client,
            )

    _print_json(response.json())


async def cmd_wallet(args: argparse.Namespace) -> None:
    """Show WAVAX balance and marketplace approval state."""
    if not settings.WALLET_PRIVATE_KEY:
        print("ERROR: WALLET_PRIVATE_KEY not set")
        sys.exit(1)

    wallet = Web3Wallet(settings.WALLET_PRIVATE_KEY, rpc_url=args.rpc_url)
    owner = wallet.address
    operator = settings.MARKETPLACE_OPERATOR_ADDRESS

    try:
        balance = await approvals.get_wavax_balance(wallet, settings.WAVAX_ADDRESS, owner)
        wavax_ok = await approvals.get_wavax_approval_status(
            wallet, settings.WAVAX_ADDRESS, owner, operator,
        )
        status: dict[str, Any] = {
            "address": owner,
            "wavax_balance_wei": str(balance),
            "wavax_approved": wavax_ok,
        }
        if args.collection:
            status["nft_approved"] = await approvals.get_erc721_approval_status(
                wallet, args.collection, owner, operator,
            )
    finally:
        await wallet.aclose()
    _print_json(status)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Hyperspace AVAX marketplace — read queries",
        prog="hyperspace",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def paged(name: str, help_text: str) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--page", type=int, default=None, help="Page number")
        sub.add_argument("--page-size", type=int, default=None, help="Page size")
        return sub

    owned = paged("owned", "NFTs held by a wallet")
    owned.add_argument("wallet")
    owned.add_argument("--collection", default=None)

    listings = paged("listings", "Active listings of a wallet")
    listings.add_argument("wallet")
    listings.add_argument("--collection", default=None)

    coll_listings = paged("collection-listings", "Active listings of a collection")
    coll_listings.add_argument("collection")
    coll_listings.add_argument(
        "--order-by", action="append", default=None,
        help="column[:ASC|DESC], repeatable",
    )

    bids = paged("bids", "Collection bids (optionally for one wallet)")
    bids.add_argument("collection")
    bids.add_argument("--wallet", default=None)

    action_choices = [a.value for a in ActionType]

    activity = paged("activity", "Collection activity feed")
    activity.add_argument("collection")
    activity.add_argument("--action-type", action="append", choices=action_choices, default=None)

    user_activity = paged("user-activity", "Wallet activity feed")
    user_activity.add_argument("wallet")
    user_activity.add_argument("--action-type", action="append", choices=action_choices, default=None)

    stats = paged("stats", "Collection stats (all collections without --collection)")
    stats.add_argument("--collection", default=None)
    stats.add_argument(
        "--order-by", action="append", default=None,
        help="column[:ASC|DESC], repeatable",
    )

    wallet = subparsers.add_parser("wallet", help="WAVAX balance and approvals")
    wallet.add_argument("--collection", default=None, help="Also check NFT approval")
    wallet.add_argument("--rpc-url", default=settings.AVAX_RPC_URL)

    return parser


def main() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging()
    handler = cmd_wallet if args.command == "wallet" else cmd_query
    asyncio.run(handler(args))


if __name__ == "__main__":
    main()
