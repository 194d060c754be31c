"""Hyperspace SDK — execution package."""

from .trade_client import TradeClient

__all__ = ["TradeClient"]
