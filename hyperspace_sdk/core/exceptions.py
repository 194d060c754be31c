"""SDK exception hierarchy."""

from __future__ import annotations


class HyperspaceSDKError(Exception):
    """Base class for errors raised by the SDK itself."""


class ApprovalError(HyperspaceSDKError):
    """Raised when an approval transaction does not confirm.

    Approval runs before any marketplace call, so this error is never
    folded into a ``TradeResult``.
    """

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash


class OrderSigningError(HyperspaceSDKError):
    """Raised when a build-transaction payload cannot be signed locally."""
    pass
