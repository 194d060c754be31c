"""Tests for web3_infra/approvals.py."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from hyperspace_sdk.core.exceptions import ApprovalError
from hyperspace_sdk.web3_infra import approvals
from hyperspace_sdk.web3_infra.wallet import TxOutcome
from tests.conftest import NFT_CONTRACT, OPERATOR, WALLET_ADDRESS, WAVAX


class TestWavaxApprovalStatus:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "balance,allowance,expected",
        [
            (100, 100, True),
            (100, 2**256 - 1, True),
            (100, 99, False),
            (0, 0, True),
        ],
    )
    async def test_allowance_covers_balance(
        self, wallet: MagicMock, balance: int, allowance: int, expected: bool,
    ) -> None:
        wallet.erc20_balance_and_allowance.return_value = (balance, allowance)

        status = await approvals.get_wavax_approval_status(
            wallet, WAVAX, WALLET_ADDRESS, OPERATOR,
        )

        assert status is expected


class TestEnsureWavaxApproval:

    @pytest.mark.asyncio
    async def test_already_approved(self, wallet: MagicMock) -> None:
        assert await approvals.ensure_wavax_approval(wallet, WAVAX, OPERATOR) is None
        wallet.erc20_approve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_approves_unlimited(self, wallet: MagicMock) -> None:
        wallet.erc20_balance_and_allowance.return_value = (500, 0)

        outcome = await approvals.ensure_wavax_approval(wallet, WAVAX, OPERATOR)

        assert outcome == TxOutcome(tx_hash="0xapprove", status=1)
        wallet.erc20_approve.assert_awaited_once_with(WAVAX, OPERATOR, approvals.MAX_UINT256)

    @pytest.mark.asyncio
    async def test_reverted_approval_raises(self, wallet: MagicMock) -> None:
        wallet.erc20_balance_and_allowance.return_value = (500, 0)
        wallet.erc20_approve.return_value = TxOutcome(tx_hash="0xrev", status=0)

        with pytest.raises(ApprovalError, match="WAVAX approval failed") as exc_info:
            await approvals.ensure_wavax_approval(wallet, WAVAX, OPERATOR)

        assert exc_info.value.tx_hash == "0xrev"


class TestEnsureErc721Approval:

    @pytest.mark.asyncio
    async def test_already_approved(self, wallet: MagicMock) -> None:
        assert await approvals.ensure_erc721_approval(wallet, NFT_CONTRACT, OPERATOR) is None
        wallet.erc721_is_approved_for_all.assert_awaited_once_with(
            NFT_CONTRACT, WALLET_ADDRESS, OPERATOR,
        )
        wallet.erc721_set_approval_for_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sets_approval_for_all(self, wallet: MagicMock) -> None:
        wallet.erc721_is_approved_for_all.return_value = False

        outcome = await approvals.ensure_erc721_approval(wallet, NFT_CONTRACT, OPERATOR)

        assert outcome.tx_hash == "0xapprove721"
        wallet.erc721_set_approval_for_all.assert_awaited_once_with(
            NFT_CONTRACT, OPERATOR, True,
        )

    @pytest.mark.asyncio
    async def test_missing_hash_raises(self, wallet: MagicMock) -> None:
        wallet.erc721_is_approved_for_all.return_value = False
        wallet.erc721_set_approval_for_all.return_value = TxOutcome(tx_hash=None, status=1)

        with pytest.raises(ApprovalError, match=NFT_CONTRACT):
            await approvals.ensure_erc721_approval(wallet, NFT_CONTRACT, OPERATOR)
