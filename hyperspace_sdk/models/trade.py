"""Trade-side shapes: operation results, prices and payment totals."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

PriceLike = Union[int, float, str, Decimal]


class TradeResult(BaseModel):
    """Outcome of an on-chain write operation.

    Exactly one of ``digest`` (transaction hash) and ``errors`` is set.
    """

    digest: Optional[str] = None
    errors: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.digest is not None and self.errors is None

    @classmethod
    def success(cls, digest: str) -> TradeResult:
        return cls(digest=digest, errors=None)

    @classmethod
    def failure(cls, errors: str) -> TradeResult:
        return cls(digest=None, errors=errors)


def to_price(value: PriceLike) -> Decimal:
    """Normalise a price that may arrive as a number or a string.

    Floats go through ``str()`` so ``0.1`` stays ``Decimal("0.1")``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid price: {value!r}")
    try:
        price = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid price: {value!r}") from exc
    if not price.is_finite():
        raise ValueError(f"Invalid price: {value!r}")
    return price


def price_to_wire(price: Decimal) -> Union[int, float]:
    """JSON number form of a price: int when integral, float otherwise."""
    if price == price.to_integral_value():
        return int(price)
    return float(price)


def price_to_str(price: Decimal) -> str:
    """String form used by the ``metadata.price`` fields."""
    if price == price.to_integral_value():
        return str(int(price))
    return format(price.normalize(), "f")


def token_address(contract_address: str, token_id: Union[str, int]) -> str:
    """Wire identifier of a single NFT: ``<contract>_<tokenId>``."""
    return f"{contract_address}_{token_id}"


def total_payment_amount(metadata: Mapping[str, Any]) -> int:
    """Sum the listed ERC-20 amount and every fee of a listing.

    Amounts are base-unit integers (often strings on the wire); Python
    ``int`` keeps the sum exact at any size.
    """
    event_log = metadata["event_log"]
    total = int(str(event_log["erc20TokenAmount"]))
    for fee in event_log.get("fees") or []:
        total += int(str(fee["amount"]))
    return total
