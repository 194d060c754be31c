"""Shared fixtures: a recording REST transport and a mocked chain wallet."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from hyperspace_sdk.data.rest_client import HyperspaceRestClient
from hyperspace_sdk.execution.trade_client import TradeClient
from hyperspace_sdk.web3_infra.wallet import ChainWallet, SignedTypedData, TxOutcome

API_KEY = "test-api-key"
WALLET_ADDRESS = "0x1111111111111111111111111111111111111111"
OPERATOR = "0x2222222222222222222222222222222222222222"
WAVAX = "0x3333333333333333333333333333333333333333"
NFT_CONTRACT = "0x4444444444444444444444444444444444444444"


class RestRecorder:
    """httpx.MockTransport handler that records requests and serves canned replies."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, tuple[int, Any]] = {}

    def route(self, endpoint: str, body: Any = None, status: int = 200) -> None:
        self._routes[endpoint] = (status, [] if body is None else body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        status, body = self._routes.get(endpoint, (200, []))
        return httpx.Response(status, json=body)

    def client(self, api_key: str = API_KEY) -> HyperspaceRestClient:
        return HyperspaceRestClient(
            api_key=api_key,
            base_url="https://avax.api.hyperspace.xyz/rest/",
            transport=httpx.MockTransport(self.handler),
        )

    def endpoints(self) -> list[str]:
        return [r.url.path.rsplit("/", 1)[-1] for r in self.requests]

    def body(self, endpoint: str) -> dict[str, Any]:
        """JSON body of the last request sent to ``endpoint``."""
        for request in reversed(self.requests):
            if request.url.path.endswith("/" + endpoint):
                return json.loads(request.content)
        raise AssertionError(f"no request sent to {endpoint}")


@pytest.fixture
def rest() -> RestRecorder:
    return RestRecorder()


@pytest.fixture
def wallet() -> MagicMock:
    """ChainWallet with everything approved and every tx succeeding."""
    w = MagicMock(spec=ChainWallet)
    w.address = WALLET_ADDRESS
    w.erc20_balance_of = AsyncMock(return_value=10**18)
    w.erc20_balance_and_allowance = AsyncMock(return_value=(10**18, 2**256 - 1))
    w.erc20_approve = AsyncMock(return_value=TxOutcome(tx_hash="0xapprove", status=1))
    w.erc721_is_approved_for_all = AsyncMock(return_value=True)
    w.erc721_set_approval_for_all = AsyncMock(
        return_value=TxOutcome(tx_hash="0xapprove721", status=1)
    )
    w.sign_typed_data = AsyncMock(return_value=SignedTypedData(
        signature="0x" + "ab" * 65,
        v=27,
        r="0x" + "01" * 32,
        s="0x" + "02" * 32,
    ))
    w.send_transaction = AsyncMock(return_value=TxOutcome(
        tx_hash="0xdigest", status=1, block_number=123, gas_used=21000,
    ))
    return w


@pytest.fixture
def trader(wallet: MagicMock, rest: RestRecorder) -> TradeClient:
    return TradeClient(
        API_KEY,
        wallet,
        rest_client=rest.client(),
        operator_address=OPERATOR,
        wavax_address=WAVAX,
    )


@pytest.fixture
def typed_order() -> dict[str, Any]:
    """EIP-712 order payload as returned in build-tx ``metadata``."""
    return {
        "domain": {
            "name": "ZeroEx",
            "version": "1.0.0",
            "chainId": 43114,
            "verifyingContract": OPERATOR,
        },
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            "Order": [
                {"name": "maker", "type": "address"},
                {"name": "erc20TokenAmount", "type": "uint256"},
                {"name": "nonce", "type": "uint256"},
            ],
        },
        "primaryType": "Order",
        "message": {
            "maker": WALLET_ADDRESS,
            "erc20TokenAmount": "1000",
            "nonce": "7",
        },
    }
