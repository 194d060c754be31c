"""Tests for models/ — prices, token addresses, payment totals and query shapes."""

from __future__ import annotations

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from hyperspace_sdk.models import (
    COLLECTION_LISTING_ORDER_COLUMNS,
    PROJECT_STATS_ORDER_COLUMNS,
    OrderConfig,
    PaginationConfig,
    SortOrder,
    TradeResult,
    price_to_str,
    price_to_wire,
    to_price,
    token_address,
    total_payment_amount,
)

# Base-unit amounts well beyond float precision
wei_amounts = st.integers(min_value=0, max_value=10**40)


class TestTotalPaymentAmount:

    def test_listed_amount_plus_fees(self) -> None:
        metadata = {
            "event_log": {
                "erc20TokenAmount": "1000",
                "fees": [{"amount": "50"}, {"amount": "25"}],
            },
        }
        assert total_payment_amount(metadata) == 1075

    def test_no_fees(self) -> None:
        assert total_payment_amount({"event_log": {"erc20TokenAmount": 42, "fees": []}}) == 42

    def test_missing_event_log_raises(self) -> None:
        with pytest.raises(KeyError):
            total_payment_amount({})

    def test_beyond_float_precision(self) -> None:
        metadata = {
            "event_log": {
                "erc20TokenAmount": "9007199254740993",  # 2**53 + 1
                "fees": [{"amount": "1"}],
            },
        }
        assert total_payment_amount(metadata) == 9007199254740994

    @given(amount=wei_amounts, fees=st.lists(wei_amounts, max_size=5))
    def test_exact_sum(self, amount: int, fees: list[int]) -> None:
        metadata = {
            "event_log": {
                "erc20TokenAmount": str(amount),
                "fees": [{"amount": str(f)} for f in fees],
            },
        }
        assert total_payment_amount(metadata) == amount + sum(fees)


class TestPrices:

    def test_number_and_string_agree(self) -> None:
        assert to_price(100) == to_price("100") == Decimal("100")

    def test_float_goes_through_str(self) -> None:
        assert to_price(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("bad", ["", "abc", "NaN", "Infinity", True])
    def test_invalid_price(self, bad) -> None:
        with pytest.raises(ValueError):
            to_price(bad)

    def test_wire_number(self) -> None:
        assert price_to_wire(Decimal("100")) == 100
        assert isinstance(price_to_wire(Decimal("100.0")), int)
        assert price_to_wire(Decimal("1.5")) == 1.5

    def test_wire_string(self) -> None:
        assert price_to_str(Decimal("2500")) == "2500"
        assert price_to_str(Decimal("1.50")) == "1.5"
        assert price_to_str(Decimal("1E+3")) == "1000"


class TestTokenAddress:

    def test_underscore_joined(self) -> None:
        assert token_address("0xAA", "7") == "0xAA_7"
        assert token_address("0xAA", 7) == "0xAA_7"


class TestTradeResult:

    def test_success(self) -> None:
        result = TradeResult.success("0xhash")
        assert result.ok
        assert result.model_dump() == {"digest": "0xhash", "errors": None}

    def test_failure(self) -> None:
        result = TradeResult.failure("nope")
        assert not result.ok
        assert result.model_dump() == {"digest": None, "errors": "nope"}


class TestQueryShapes:

    def test_pagination_drops_unset(self) -> None:
        assert PaginationConfig(page_size=20).to_wire() == {"page_size": 20}

    def test_pagination_rejects_zero_page(self) -> None:
        with pytest.raises(ValidationError):
            PaginationConfig(page_number=0)

    def test_order_config_default_ascending(self) -> None:
        assert OrderConfig(field_name="listing_price").to_wire() == {
            "field_name": "listing_price",
            "sort_order": "ASC",
        }

    def test_sort_order_from_string(self) -> None:
        assert OrderConfig(field_name="floor_price", sort_order="DESC").sort_order is SortOrder.DESC

    def test_allow_lists(self) -> None:
        assert "rarity_hyperspace" in COLLECTION_LISTING_ORDER_COLUMNS
        assert "floor_price" in PROJECT_STATS_ORDER_COLUMNS
        assert "floor_price" not in COLLECTION_LISTING_ORDER_COLUMNS
