"""Hyperspace SDK — web3_infra package.

- ChainWallet / Web3Wallet: signing, broadcasting and token reads
- approvals: WAVAX and ERC-721 operator approval checks
- order_signing: EIP-712 signing of marketplace orders
"""

from .approvals import ensure_erc721_approval, ensure_wavax_approval, get_wavax_balance
from .order_signing import parse_order, sign_order_metadata
from .wallet import ChainWallet, SignedTypedData, TxOutcome, Web3Wallet

__all__ = [
    "ChainWallet",
    "SignedTypedData",
    "TxOutcome",
    "Web3Wallet",
    "ensure_erc721_approval",
    "ensure_wavax_approval",
    "get_wavax_balance",
    "parse_order",
    "sign_order_metadata",
]
