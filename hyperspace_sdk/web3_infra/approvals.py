"""Marketplace approvals: WAVAX spend allowance and NFT operator approval.

Each ``ensure_*`` helper checks the current on-chain state and, only when
missing, submits the approval and waits for it to be mined. A failed
approval raises ``ApprovalError``.
"""

from __future__ import annotations

import structlog

from hyperspace_sdk.core.exceptions import ApprovalError
from hyperspace_sdk.web3_infra.wallet import ChainWallet, TxOutcome

logger = structlog.get_logger("web3_infra.approvals")

MAX_UINT256 = 2**256 - 1


async def get_wavax_balance(wallet: ChainWallet, wavax_address: str, owner: str) -> int:
    """WAVAX balance of ``owner`` in wei."""
    return await wallet.erc20_balance_of(wavax_address, owner)


async def get_wavax_approval_status(
    wallet: ChainWallet,
    wavax_address: str,
    owner: str,
    operator: str,
) -> bool:
    """True when ``operator`` may spend the owner's entire WAVAX balance."""
    balance, allowance = await wallet.erc20_balance_and_allowance(
        wavax_address, owner, operator,
    )
    logger.debug(
        "approvals.wavax_status",
        owner=owner,
        balance=balance,
        allowance=allowance,
    )
    return allowance >= balance


async def get_erc721_approval_status(
    wallet: ChainWallet,
    contract_address: str,
    owner: str,
    operator: str,
) -> bool:
    """True when ``operator`` may transfer every token of ``contract_address``."""
    return await wallet.erc721_is_approved_for_all(contract_address, owner, operator)


async def approve_wavax(
    wallet: ChainWallet, wavax_address: str, operator: str,
) -> TxOutcome:
    """Grant ``operator`` an unlimited WAVAX allowance."""
    outcome = await wallet.erc20_approve(wavax_address, operator, MAX_UINT256)
    _check_outcome(outcome, "WAVAX approval failed")
    return outcome


async def approve_erc721(
    wallet: ChainWallet, contract_address: str, operator: str,
) -> TxOutcome:
    """``setApprovalForAll(operator, true)`` on ``contract_address``."""
    outcome = await wallet.erc721_set_approval_for_all(contract_address, operator, True)
    _check_outcome(outcome, f"ERC721 approval failed for {contract_address}")
    return outcome


async def ensure_wavax_approval(
    wallet: ChainWallet, wavax_address: str, operator: str,
) -> TxOutcome | None:
    """Approve WAVAX for ``operator`` if needed.

    Returns the approval outcome, or None when already approved.
    """
    owner = wallet.address
    if await get_wavax_approval_status(wallet, wavax_address, owner, operator):
        return None

    logger.info("approvals.approving_wavax", owner=owner, operator=operator)
    outcome = await approve_wavax(wallet, wavax_address, operator)
    logger.info("approvals.wavax_approved", tx_hash=outcome.tx_hash)
    return outcome


async def ensure_erc721_approval(
    wallet: ChainWallet, contract_address: str, operator: str,
) -> TxOutcome | None:
    """Approve ``operator`` on ``contract_address`` if needed.

    Returns the approval outcome, or None when already approved.
    """
    owner = wallet.address
    if await get_erc721_approval_status(wallet, contract_address, owner, operator):
        return None

    logger.info(
        "approvals.approving_erc721",
        owner=owner,
        contract=contract_address,
        operator=operator,
    )
    outcome = await approve_erc721(wallet, contract_address, operator)
    logger.info(
        "approvals.erc721_approved",
        contract=contract_address,
        tx_hash=outcome.tx_hash,
    )
    return outcome


def _check_outcome(outcome: TxOutcome, message: str) -> None:
    if not outcome.succeeded:
        raise ApprovalError(
            f"{message} (status={outcome.status})",
            tx_hash=outcome.tx_hash,
        )
