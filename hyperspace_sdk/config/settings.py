"""Pydantic BaseSettings — on-chain amounts as Decimal/int, never float."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ── Application ─────────────────────────────────────────────
    APP_ENV: Literal["dev", "prod"] = "dev"
    APP_NAME: str = "hyperspace-avax-sdk"
    LOG_LEVEL: str = "INFO"

    # ── Hyperspace REST API ─────────────────────────────────────
    HYPERSPACE_REST_BASE_URL: str = "https://avax.api.hyperspace.xyz/rest/"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # ── Avalanche C-Chain ───────────────────────────────────────
    AVAX_RPC_URL: str = "https://api.avax.network/ext/bc/C/rpc"
    AVAX_CHAIN_ID: int = 43114
    WAVAX_ADDRESS: str = "0xB31f66AA3C1e785363F0875A1B74E27b85FD66c7"
    # Spender for WAVAX bids, operator for NFTs, target of broadcast txs
    MARKETPLACE_OPERATOR_ADDRESS: str = "0xDef1C0ded9bec7F1a1670819833240f027b25EfF"

    # ── Transactions ────────────────────────────────────────────
    GAS_LIMIT_MULTIPLIER: Decimal = Field(default=Decimal("1.2"))
    TX_CONFIRMATION_TIMEOUT_SECONDS: float = 120.0

    # ── Credentials (never commit real values) ──────────────────
    HYPERSPACE_API_KEY: str = ""
    WALLET_PRIVATE_KEY: str = ""  # CLI only


settings = Settings()
