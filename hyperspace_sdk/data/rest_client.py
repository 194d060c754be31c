"""HyperspaceRestClient — async JSON transport for the Hyperspace REST API.

Every endpoint is a POST with a JSON body and the raw API key in the
``Authorization`` header (no Bearer scheme). Non-2xx responses raise
``httpx.HTTPStatusError``; there is no retry layer.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx
import structlog

from hyperspace_sdk.config.settings import settings

logger = structlog.get_logger("data.rest_client")

__all__ = ["HyperspaceRestClient", "compact"]


def compact(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Drop ``None``-valued top-level keys (JSON ``undefined`` semantics)."""
    return {key: value for key, value in payload.items() if value is not None}


class HyperspaceRestClient:
    """Async client for the Hyperspace AVAX REST API.

    Parameters
    ----------
    api_key:
        Hyperspace API key, sent verbatim as ``Authorization``.
    base_url:
        REST base URL (defaults to ``settings.HYPERSPACE_REST_BASE_URL``).
    timeout:
        HTTP timeout in seconds.
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.HYPERSPACE_API_KEY
        self._base_url = (base_url or settings.HYPERSPACE_REST_BASE_URL).rstrip("/") + "/"
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Content-Type": "application/json",
                "Authorization": self._api_key,
            },
            timeout=httpx.Timeout(timeout or settings.HTTP_TIMEOUT_SECONDS),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_key(self) -> str:
        return self._api_key

    # ── Public API ───────────────────────────────────────────────

    async def post(self, endpoint: str, payload: Mapping[str, Any]) -> httpx.Response:
        """POST ``payload`` as JSON to ``endpoint`` and return the response.

        Raises
        ------
        httpx.HTTPStatusError
            On a non-2xx response.
        httpx.RequestError
            On transport failure.
        """
        response = await self._client.post(endpoint, json=dict(payload))
        logger.debug(
            "rest_client.request",
            endpoint=endpoint,
            status=response.status_code,
        )
        response.raise_for_status()
        return response

    # ── Lifecycle ────────────────────────────────────────────────

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HyperspaceRestClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
