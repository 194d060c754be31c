"""Logging setup and SDK exceptions."""

from .exceptions import ApprovalError, HyperspaceSDKError, OrderSigningError

__all__ = [
    "ApprovalError",
    "HyperspaceSDKError",
    "OrderSigningError",
]
