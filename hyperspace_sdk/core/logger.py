"""Structured logging for the SDK and the ``hyperspace`` CLI.

The library only ever calls ``structlog.get_logger(...)``; nothing is
configured on import. Applications (and the CLI) call ``setup_logging()``
once to route structlog through stdlib logging with a console renderer in
``dev`` and JSON elsewhere.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping, Optional, TextIO
from urllib.parse import urlsplit

import structlog

from hyperspace_sdk.config.settings import settings

# Event keys whose values must never reach a log sink
SECRET_KEYS = frozenset({"api_key", "private_key", "authorization"})
# Event keys holding endpoint URLs, logged as scheme://host only
URL_KEYS = frozenset({"rpc_url", "base_url"})

_NOISY_LOGGERS = ("httpx", "httpcore", "web3", "urllib3")


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Mask credentials and strip paths/queries from endpoint URLs."""
    for key in list(event_dict):
        lowered = key.lower()
        if lowered in SECRET_KEYS and event_dict[key]:
            event_dict[key] = "***"
        elif lowered in URL_KEYS and isinstance(event_dict[key], str):
            parts = urlsplit(event_dict[key])
            if parts.netloc:
                event_dict[key] = f"{parts.scheme}://{parts.hostname}"
    return event_dict


def setup_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog over stdlib logging.

    Defaults come from ``settings``: ``LOG_LEVEL`` and JSON output unless
    ``APP_ENV`` is ``dev``. Output goes to stderr so that CLI JSON on
    stdout stays machine-readable.
    """
    if json_output is None:
        json_output = settings.APP_ENV != "dev"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is None)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
