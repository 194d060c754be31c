"""Local signing of marketplace orders returned by the build-tx endpoints.

The remote ``metadata`` is EIP-712 typed data (``domain``, ``types``,
``primaryType``, ``message``). Signing produces the order object expected
by ``validate-signature``: the message plus a structured EIP-712
signature (``signatureType`` 2 with ``v``/``r``/``s``).
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from hyperspace_sdk.core.exceptions import OrderSigningError
from hyperspace_sdk.web3_infra.wallet import ChainWallet

# 0x v4 signature type for EIP-712 signed orders
EIP712_SIGNATURE_TYPE = 2

_DOMAIN_TYPE = "EIP712Domain"


def to_typed_data(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Validate ``metadata`` as EIP-712 typed data, filling ``primaryType``.

    Raises
    ------
    OrderSigningError
        If ``domain``, ``types`` or ``message`` is missing.
    """
    missing = [key for key in ("domain", "types", "message") if key not in metadata]
    if missing:
        raise OrderSigningError(f"Order metadata is not signable, missing: {', '.join(missing)}")

    typed_data = dict(metadata)
    if not typed_data.get("primaryType"):
        candidates = [name for name in typed_data["types"] if name != _DOMAIN_TYPE]
        if len(candidates) != 1:
            raise OrderSigningError("Order metadata has no primaryType")
        typed_data["primaryType"] = candidates[0]
    return typed_data


async def sign_order_metadata(wallet: ChainWallet, metadata: Mapping[str, Any]) -> str:
    """Sign build-tx ``metadata`` and return the serialised order block."""
    typed_data = to_typed_data(metadata)
    signed = await wallet.sign_typed_data(typed_data)

    order = dict(typed_data["message"])
    order["signature"] = {
        "signatureType": EIP712_SIGNATURE_TYPE,
        "v": signed.v,
        "r": signed.r,
        "s": signed.s,
    }
    return json.dumps(order)


def parse_order(transaction_block: str) -> dict[str, Any]:
    """Order object carried by a signed transaction block."""
    return json.loads(transaction_block)
