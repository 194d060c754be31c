"""TradeClient — on-chain and off-chain write operations for one wallet.

Every write follows the same chain of awaited calls:

1. approval pre-check (WAVAX for bids, the NFT contract for listings,
   delists and accepted bids), submitting the approval when missing;
2. a ``create-*-tx`` call that returns either signable ``metadata`` or a
   ready-to-send ``byte_string``;
3. local signing, then either ``validate-signature`` (bids, listings) or
   broadcast and wait for the receipt (buy, accept, delist, cancel).

Approval failures propagate. For broadcast operations anything that fails
after approval is returned as ``TradeResult(digest=None, errors=...)``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

import httpx
import structlog
from eth_account.signers.local import LocalAccount

from hyperspace_sdk.config.settings import settings
from hyperspace_sdk.data.rest_client import HyperspaceRestClient
from hyperspace_sdk.models.trade import (
    PriceLike,
    TradeResult,
    price_to_str,
    price_to_wire,
    to_price,
    token_address,
    total_payment_amount,
)
from hyperspace_sdk.web3_infra import approvals
from hyperspace_sdk.web3_infra.order_signing import parse_order, sign_order_metadata
from hyperspace_sdk.web3_infra.wallet import ChainWallet, TxOutcome, Web3Wallet

logger = structlog.get_logger("execution.trade_client")

__all__ = ["TradeClient"]

# Endpoints
VALIDATE_SIGNATURE = "validate-signature"
CREATE_COLLECTION_BID_TX = "create-collection-bid-tx"
CREATE_LIST_TX = "create-list-tx"
CREATE_BUY_TX = "create-buy-tx"
CREATE_ACCEPT_COLLECTION_BID_TX = "create-accept-collection-bid-tx"
CREATE_DELIST_TX = "create-delist-tx"
CREATE_CANCEL_COLLECTION_BID_TX = "create-cancel-collection-bid-tx"


class TradeClient:
    """Write operations against the Hyperspace AVAX marketplace.

    Parameters
    ----------
    api_key:
        Hyperspace API key.
    wallet:
        Hex private key, ``LocalAccount``, or a ready ``ChainWallet``
        (used as-is, ``rpc_url`` is then ignored).
    rpc_url:
        Avalanche C-Chain JSON-RPC endpoint the wallet is connected to.
    rest_client:
        Optional pre-built REST client (its API key wins over ``api_key``).
    operator_address:
        Marketplace operator; defaults to ``settings.MARKETPLACE_OPERATOR_ADDRESS``.
    wavax_address:
        WAVAX token; defaults to ``settings.WAVAX_ADDRESS``.

    Usage::

        async with TradeClient(api_key, private_key, rpc_url) as trader:
            result = await trader.buy_nft(contract, token_id, price, listing["metadata"])
            print(result.digest or result.errors)
    """

    def __init__(
        self,
        api_key: str,
        wallet: Union[ChainWallet, LocalAccount, str],
        rpc_url: Optional[str] = None,
        *,
        rest_client: Optional[HyperspaceRestClient] = None,
        operator_address: Optional[str] = None,
        wavax_address: Optional[str] = None,
    ) -> None:
        if isinstance(wallet, ChainWallet):
            self._wallet = wallet
            self._owns_wallet = False
        else:
            self._wallet = Web3Wallet(
                wallet,
                rpc_url=rpc_url or settings.AVAX_RPC_URL,
                chain_id=settings.AVAX_CHAIN_ID,
            )
            self._owns_wallet = True
        self._api_key = api_key
        self._rest = rest_client or HyperspaceRestClient(api_key=api_key)
        self._operator = operator_address or settings.MARKETPLACE_OPERATOR_ADDRESS
        self._wavax = wavax_address or settings.WAVAX_ADDRESS

    @property
    def address(self) -> str:
        return self._wallet.address

    @property
    def wallet(self) -> ChainWallet:
        return self._wallet

    @property
    def api_key(self) -> str:
        return self._api_key

    # ── Approvals ────────────────────────────────────────────────

    async def get_wavax_balance(self) -> int:
        """WAVAX balance of the bound wallet in wei."""
        return await approvals.get_wavax_balance(self._wallet, self._wavax, self.address)

    async def ensure_wavax_approval(self) -> Optional[TxOutcome]:
        return await approvals.ensure_wavax_approval(self._wallet, self._wavax, self._operator)

    async def ensure_nft_approval(self, contract_address: str) -> Optional[TxOutcome]:
        return await approvals.ensure_erc721_approval(
            self._wallet, contract_address, self._operator,
        )

    # ── Off-chain orders ─────────────────────────────────────────

    async def validate_signature(self, order: Mapping[str, Any]) -> httpx.Response:
        """Register a signed order with the marketplace for indexing."""
        return await self._rest.post(VALIDATE_SIGNATURE, {"order": order})

    async def create_collection_bid(
        self, contract_address: str, price_in_navax: PriceLike,
    ) -> Optional[httpx.Response]:
        """Place a WAVAX collection bid on ``contract_address``.

        Returns the ``validate-signature`` response, or None when the
        build call returned nothing to sign.
        """
        bidder = self.address
        price = to_price(price_in_navax)
        await self.ensure_wavax_approval()

        payload = {
            "condition": {
                "price": price_to_wire(price),
                "buyer_address": bidder,
                "metadata": {
                    "contractAddress": contract_address,
                    "price": price_to_str(price),
                },
            },
        }
        response = await self._rest.post(CREATE_COLLECTION_BID_TX, payload)
        return await self._sign_and_validate(response, "create_collection_bid")

    async def list_nft(
        self, contract_address: str, token_id: Union[str, int], price: PriceLike,
    ) -> Optional[httpx.Response]:
        """List an owned NFT for sale (off-chain order).

        Returns the ``validate-signature`` response, or None when the
        build call returned nothing to sign.
        """
        seller = self.address
        price = to_price(price)
        await self.ensure_nft_approval(contract_address)

        payload = {
            "condition": {
                "list_tx_args": [
                    {
                        "token_address": token_address(contract_address, token_id),
                        "seller_address": seller,
                        "metadata": {
                            "contractAddress": contract_address,
                            "tokenId": str(token_id),
                            "price": price_to_str(price),
                        },
                    },
                ],
            },
        }
        response = await self._rest.post(CREATE_LIST_TX, payload)
        return await self._sign_and_validate(response, "list_nft")

    # ── On-chain trades ──────────────────────────────────────────

    async def buy_nft(
        self,
        contract_address: str,
        token_id: Union[str, int],
        price: PriceLike,
        metadata: Mapping[str, Any],
    ) -> TradeResult:
        """Buy a listed NFT.

        ``metadata`` is the listing's ``metadata`` field from the read
        API; its ERC-20 amount plus fees is sent as the transaction value.
        """
        try:
            payload = {
                "condition": {
                    "buy_tx_args": [
                        {
                            "buyer_address": self.address,
                            "token_address": token_address(contract_address, token_id),
                            "price": price_to_wire(to_price(price)),
                            "metadata": metadata,
                        },
                    ],
                },
            }
            response = await self._rest.post(CREATE_BUY_TX, payload)
            value = total_payment_amount(metadata)
            return await self._execute(response, "buy", "purchase", value=value)
        except Exception as exc:
            return self._failed("buy_nft", exc)

    async def accept_collection_bid(
        self,
        contract_address: str,
        token_id: Union[str, int],
        price: PriceLike,
        metadata: Mapping[str, Any],
    ) -> TradeResult:
        """Sell an owned NFT into a collection bid.

        ``metadata`` is the bid's ``metadata`` field from the read API.
        """
        seller = self.address
        try:
            wire_price = price_to_wire(to_price(price))
        except ValueError as exc:
            return self._failed("accept_collection_bid", exc)
        await self.ensure_nft_approval(contract_address)

        try:
            payload = {
                "condition": {
                    "token_address": token_address(contract_address, token_id),
                    "price": wire_price,
                    "seller_address": seller,
                    "metadata": metadata,
                },
            }
            response = await self._rest.post(CREATE_ACCEPT_COLLECTION_BID_TX, payload)
            return await self._execute(
                response, "accept collection bid", "accept collection bid",
            )
        except Exception as exc:
            return self._failed("accept_collection_bid", exc)

    async def delist_nft(
        self,
        contract_address: str,
        token_id: Union[str, int],
        price: PriceLike,
        metadata: Mapping[str, Any],
    ) -> TradeResult:
        """Cancel a listing on chain."""
        seller = self.address
        try:
            wire_price = price_to_wire(to_price(price))
        except ValueError as exc:
            return self._failed("delist_nft", exc)
        await self.ensure_nft_approval(contract_address)

        try:
            payload = {
                "condition": {
                    "delist_tx_args": [
                        {
                            "seller_address": seller,
                            "token_address": token_address(contract_address, token_id),
                            "price": wire_price,
                            "metadata": metadata,
                        },
                    ],
                },
            }
            response = await self._rest.post(CREATE_DELIST_TX, payload)
            return await self._execute(response, "delist", "delist")
        except Exception as exc:
            return self._failed("delist_nft", exc)

    async def cancel_collection_bid(
        self, price: PriceLike, metadata: Mapping[str, Any],
    ) -> TradeResult:
        """Cancel one of the wallet's collection bids on chain."""
        try:
            payload = {
                "condition": {
                    "buyer_address": self.address,
                    "price": price_to_wire(to_price(price)),
                    "metadata": metadata,
                },
            }
            response = await self._rest.post(CREATE_CANCEL_COLLECTION_BID_TX, payload)
            return await self._execute(
                response, "cancel collection bid", "cancel collection bid",
            )
        except Exception as exc:
            return self._failed("cancel_collection_bid", exc)

    # ── Internals ────────────────────────────────────────────────

    async def _sign_and_validate(
        self, response: httpx.Response, operation: str,
    ) -> Optional[httpx.Response]:
        metadata = _first_result(response).get("metadata")
        if not metadata:
            logger.warning("trade_client.nothing_to_sign", operation=operation)
            return None

        transaction_block = await sign_order_metadata(self._wallet, metadata)
        order = parse_order(transaction_block)
        logger.info("trade_client.order_signed", operation=operation)
        return await self.validate_signature(order)

    async def _execute(
        self,
        response: httpx.Response,
        build_label: str,
        execute_label: str,
        value: Optional[int] = None,
    ) -> TradeResult:
        """Sign and broadcast the ``byte_string`` of a build-tx response."""
        result = _first_result(response)
        encoded = result.get("byte_string")
        if not encoded:
            return TradeResult.failure(f"Failed to create {build_label} txn")

        tx: dict[str, Any] = {
            "to": result.get("to") or self._operator,
            "data": encoded,
        }
        if value is not None:
            tx["value"] = value

        outcome = await self._wallet.send_transaction(tx)
        if outcome.succeeded:
            logger.info(
                "trade_client.tx_confirmed",
                operation=execute_label,
                tx_hash=outcome.tx_hash,
            )
            return TradeResult.success(outcome.tx_hash)

        return TradeResult.failure(
            f"Failed to sign and execute {execute_label} transaction"
        )

    @staticmethod
    def _failed(operation: str, exc: Exception) -> TradeResult:
        logger.warning(
            "trade_client.operation_failed",
            operation=operation,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return TradeResult.failure(str(exc) or type(exc).__name__)

    # ── Lifecycle ────────────────────────────────────────────────

    async def aclose(self) -> None:
        await self._rest.aclose()
        if self._owns_wallet:
            await self._wallet.aclose()

    async def __aenter__(self) -> TradeClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()


def _first_result(response: httpx.Response) -> dict[str, Any]:
    """First element of a build-tx response array, or ``{}``."""
    data = response.json()
    if isinstance(data, list) and data and isinstance(data[0], Mapping):
        return dict(data[0])
    return {}
