"""Tests for core/logger.py."""

from __future__ import annotations

import io
import json
import logging
from typing import Iterator

import pytest
import structlog

from hyperspace_sdk.core.logger import redact_secrets, setup_logging


@pytest.fixture
def log_stream() -> Iterator[io.StringIO]:
    stream = io.StringIO()
    yield stream
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


class TestRedactSecrets:

    def test_masks_credentials(self) -> None:
        event = redact_secrets(None, "info", {
            "event": "rest_client.created",
            "api_key": "sk-live-123",
            "Authorization": "sk-live-123",
            "endpoint": "get-project-stats",
        })
        assert event["api_key"] == "***"
        assert event["Authorization"] == "***"
        assert event["endpoint"] == "get-project-stats"

    def test_empty_secret_left_alone(self) -> None:
        assert redact_secrets(None, "info", {"api_key": ""})["api_key"] == ""

    def test_url_reduced_to_host(self) -> None:
        event = redact_secrets(None, "debug", {
            "rpc_url": "https://avax-mainnet.example.com/v3/secret-project-id?x=1",
        })
        assert event["rpc_url"] == "https://avax-mainnet.example.com"


class TestSetupLogging:

    def test_json_lines_are_redacted(self, log_stream: io.StringIO) -> None:
        setup_logging(level="DEBUG", json_output=True, stream=log_stream)

        structlog.get_logger("tests.logger").info(
            "wallet.created",
            private_key="0x" + "4c" * 32,
            rpc_url="https://node.example.com/ext/bc/C/rpc",
        )

        record = json.loads(log_stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "wallet.created"
        assert record["level"] == "info"
        assert record["private_key"] == "***"
        assert record["rpc_url"] == "https://node.example.com"

    def test_level_filters(self, log_stream: io.StringIO) -> None:
        setup_logging(level="WARNING", json_output=True, stream=log_stream)

        structlog.get_logger("tests.logger").info("queries.sent")

        assert log_stream.getvalue() == ""
