"""ChainWallet — the narrow on-chain capability the trade client needs.

``Web3Wallet`` implements it over ``AsyncWeb3`` with a local
``eth_account`` key: transactions are filled (nonce, chain id, gas),
signed locally, sent raw and awaited until mined.
"""

from __future__ import annotations

import asyncio
import functools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

import structlog
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3
from web3.providers import AsyncHTTPProvider

from hyperspace_sdk.config.settings import settings

logger = structlog.get_logger("web3_infra.wallet")

# ── ABI fragments ────────────────────────────────────────────────────

ERC20_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "allowance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "approve",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
]

ERC721_ABI = [
    {
        "name": "isApprovedForAll",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "operator", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "name": "setApprovalForAll",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "operator", "type": "address"},
            {"name": "approved", "type": "bool"},
        ],
        "outputs": [],
    },
]


@dataclass(frozen=True)
class TxOutcome:
    """Mined transaction as seen by the caller."""

    tx_hash: str | None
    status: int
    block_number: int = 0
    gas_used: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == 1 and bool(self.tx_hash)


@dataclass(frozen=True)
class SignedTypedData:
    """EIP-712 signature split into its components."""

    signature: str
    v: int
    r: str
    s: str


class ChainWallet(ABC):
    """On-chain capabilities bound to one signing key."""

    @property
    @abstractmethod
    def address(self) -> str:
        pass

    @abstractmethod
    async def sign_typed_data(self, typed_data: Mapping[str, Any]) -> SignedTypedData:
        pass

    @abstractmethod
    async def send_transaction(self, tx: Mapping[str, Any]) -> TxOutcome:
        """Sign, broadcast and wait for ``tx`` to be mined."""
        pass

    @abstractmethod
    async def erc20_balance_of(self, token: str, owner: str) -> int:
        pass

    @abstractmethod
    async def erc20_allowance(self, token: str, owner: str, spender: str) -> int:
        pass

    async def erc20_balance_and_allowance(
        self, token: str, owner: str, spender: str,
    ) -> tuple[int, int]:
        balance = await self.erc20_balance_of(token, owner)
        allowance = await self.erc20_allowance(token, owner, spender)
        return balance, allowance

    @abstractmethod
    async def erc20_approve(self, token: str, spender: str, amount: int) -> TxOutcome:
        pass

    @abstractmethod
    async def erc721_is_approved_for_all(
        self, contract: str, owner: str, operator: str,
    ) -> bool:
        pass

    @abstractmethod
    async def erc721_set_approval_for_all(
        self, contract: str, operator: str, approved: bool = True,
    ) -> TxOutcome:
        pass

    async def aclose(self) -> None:
        """Release network resources held by the wallet."""


class Web3Wallet(ChainWallet):
    """``ChainWallet`` backed by web3.py and a local private key.

    Parameters
    ----------
    account:
        ``LocalAccount`` or hex-encoded private key.
    rpc_url:
        Avalanche C-Chain JSON-RPC endpoint.
    chain_id:
        Chain id stamped on transactions (queried from the node if None).
    w3:
        Pre-built ``AsyncWeb3`` instance; overrides ``rpc_url``.
    """

    def __init__(
        self,
        account: LocalAccount | str,
        rpc_url: str | None = None,
        chain_id: int | None = None,
        gas_limit_multiplier: Decimal | None = None,
        tx_confirmation_timeout_s: float | None = None,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        self._account: LocalAccount = (
            Account.from_key(account) if isinstance(account, str) else account
        )
        self._rpc_url = rpc_url or settings.AVAX_RPC_URL
        self._owns_w3 = w3 is None
        self._w3 = w3 or AsyncWeb3(
            AsyncHTTPProvider(
                self._rpc_url,
                request_kwargs={"timeout": settings.HTTP_TIMEOUT_SECONDS},
            )
        )
        self._chain_id = chain_id
        self._gas_multiplier = gas_limit_multiplier or settings.GAS_LIMIT_MULTIPLIER
        self._confirmation_timeout = (
            tx_confirmation_timeout_s or settings.TX_CONFIRMATION_TIMEOUT_SECONDS
        )
        logger.debug("wallet.created", address=self.address, rpc_url=self._rpc_url)

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3

    # ── Signing ──────────────────────────────────────────────────

    async def sign_typed_data(self, typed_data: Mapping[str, Any]) -> SignedTypedData:
        """Sign EIP-712 typed data off the event loop."""
        loop = asyncio.get_running_loop()
        signed = await loop.run_in_executor(
            None,
            functools.partial(
                self._account.sign_typed_data,
                full_message=dict(typed_data),
            ),
        )
        return SignedTypedData(
            signature=AsyncWeb3.to_hex(signed.signature),
            v=signed.v,
            r="0x" + format(signed.r, "064x"),
            s="0x" + format(signed.s, "064x"),
        )

    # ── Transactions ─────────────────────────────────────────────

    async def send_transaction(self, tx: Mapping[str, Any]) -> TxOutcome:
        w3 = self._w3
        tx = {key: value for key, value in tx.items() if value is not None}
        tx.setdefault("from", self.address)
        if "to" in tx:
            tx["to"] = AsyncWeb3.to_checksum_address(tx["to"])

        if "nonce" not in tx:
            tx["nonce"] = await w3.eth.get_transaction_count(self.address, "pending")
        if "chainId" not in tx:
            tx["chainId"] = self._chain_id or await w3.eth.chain_id
        if "gasPrice" not in tx and "maxFeePerGas" not in tx:
            tx["gasPrice"] = await w3.eth.gas_price
        if "gas" not in tx:
            estimate = await w3.eth.estimate_gas(tx)
            tx["gas"] = int(Decimal(estimate) * self._gas_multiplier)

        signed = self._account.sign_transaction(tx)
        tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash_hex = AsyncWeb3.to_hex(tx_hash)
        logger.info("wallet.tx_sent", tx_hash=tx_hash_hex, nonce=tx["nonce"])

        receipt = await w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self._confirmation_timeout,
        )
        mined_hash = receipt.get("transactionHash")
        outcome = TxOutcome(
            tx_hash=AsyncWeb3.to_hex(mined_hash) if mined_hash else None,
            status=int(receipt.get("status", 0)),
            block_number=int(receipt.get("blockNumber", 0)),
            gas_used=int(receipt.get("gasUsed", 0)),
        )
        logger.info(
            "wallet.tx_mined",
            tx_hash=outcome.tx_hash,
            status=outcome.status,
            block=outcome.block_number,
        )
        return outcome

    # ── ERC-20 ───────────────────────────────────────────────────

    async def erc20_balance_of(self, token: str, owner: str) -> int:
        contract = self._erc20(token)
        return await contract.functions.balanceOf(
            AsyncWeb3.to_checksum_address(owner)
        ).call()

    async def erc20_allowance(self, token: str, owner: str, spender: str) -> int:
        contract = self._erc20(token)
        return await contract.functions.allowance(
            AsyncWeb3.to_checksum_address(owner),
            AsyncWeb3.to_checksum_address(spender),
        ).call()

    async def erc20_balance_and_allowance(
        self, token: str, owner: str, spender: str,
    ) -> tuple[int, int]:
        """Read balance and allowance in a single JSON-RPC batch."""
        contract = self._erc20(token)
        owner = AsyncWeb3.to_checksum_address(owner)
        spender = AsyncWeb3.to_checksum_address(spender)
        async with self._w3.batch_requests() as batch:
            batch.add(contract.functions.balanceOf(owner))
            batch.add(contract.functions.allowance(owner, spender))
            balance, allowance = await batch.async_execute()
        return int(balance), int(allowance)

    async def erc20_approve(self, token: str, spender: str, amount: int) -> TxOutcome:
        contract = self._erc20(token)
        tx = await contract.functions.approve(
            AsyncWeb3.to_checksum_address(spender), amount,
        ).build_transaction({"from": self.address})
        return await self.send_transaction(tx)

    # ── ERC-721 ──────────────────────────────────────────────────

    async def erc721_is_approved_for_all(
        self, contract: str, owner: str, operator: str,
    ) -> bool:
        nft = self._erc721(contract)
        return await nft.functions.isApprovedForAll(
            AsyncWeb3.to_checksum_address(owner),
            AsyncWeb3.to_checksum_address(operator),
        ).call()

    async def erc721_set_approval_for_all(
        self, contract: str, operator: str, approved: bool = True,
    ) -> TxOutcome:
        nft = self._erc721(contract)
        tx = await nft.functions.setApprovalForAll(
            AsyncWeb3.to_checksum_address(operator), approved,
        ).build_transaction({"from": self.address})
        return await self.send_transaction(tx)

    # ── Lifecycle ────────────────────────────────────────────────

    async def aclose(self) -> None:
        """Disconnect the provider session, unless the AsyncWeb3 was injected."""
        if self._owns_w3:
            await self._w3.provider.disconnect()

    # ── Internals ────────────────────────────────────────────────

    def _erc20(self, token: str) -> Any:
        return self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(token), abi=ERC20_ABI,
        )

    def _erc721(self, contract: str) -> Any:
        return self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(contract), abi=ERC721_ABI,
        )
