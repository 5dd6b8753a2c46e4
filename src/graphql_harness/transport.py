"""HTTP transport for GraphQL operations."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT_SECONDS,
    NO_RESPONSE_STATUS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    """Fully buffered HTTP response.

    Attributes:
        status_code: HTTP status, or ``NO_RESPONSE_STATUS`` (0) when no
            response was received
        body: Parsed JSON value when ``is_json`` is true, otherwise the raw
            text (``None`` when no response was received)
        is_json: Whether ``body`` is parsed JSON
        error: Description of the transport failure, if any
        elapsed_ms: Wall-clock duration of the call
    """

    status_code: int
    body: Any
    is_json: bool = False
    error: Optional[str] = None
    elapsed_ms: Optional[int] = None

    @property
    def received(self) -> bool:
        return self.status_code != NO_RESPONSE_STATUS


def _decode_body(response: httpx.Response) -> tuple[Any, bool]:
    text = response.text
    try:
        return json.loads(text), True
    except (json.JSONDecodeError, ValueError):
        return text, False


class TransportClient:
    """Sends GraphQL operations as ``POST {"query": ...}``.

    Non-2xx responses are returned, not raised, unless ``fail_on_status`` is
    enabled for the client or for a single call. Timeouts and connection
    errors produce a ``RawResponse`` with status 0 and no body.

    ```python
    async with TransportClient("https://graphqlzero.almansi.me/api") as client:
        raw = await client.send('query { album(id: 1) { title } }')
    ```
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        fail_on_status: bool = False,
        headers: Optional[dict[str, str]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize transport client.

        Args:
            endpoint: Default GraphQL endpoint URL
            timeout: Default per-call timeout in seconds
            fail_on_status: Raise ``httpx.HTTPStatusError`` on 4xx/5xx
            headers: Extra headers sent with every request
            http_client: Shared HTTP client (managed by caller). A private
                client is created when omitted.
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.fail_on_status = fail_on_status
        self.headers = dict(headers or {})
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=_timeout(timeout)
        )

    async def send(
        self,
        operation_text: str,
        *,
        endpoint: Optional[str] = None,
        fail_on_status: Optional[bool] = None,
        timeout: Optional[float] = None,
    ) -> RawResponse:
        """Send an operation and return the buffered response.

        Args:
            operation_text: GraphQL document
            endpoint: Per-call endpoint override
            fail_on_status: Per-call override of the failure-tolerance policy
            timeout: Per-call timeout override in seconds

        Returns:
            RawResponse

        Raises:
            httpx.HTTPStatusError: Only when failing on status is enabled and
                the server answered 4xx/5xx
        """
        url = endpoint or self.endpoint
        should_raise = self.fail_on_status if fail_on_status is None else fail_on_status
        call_timeout = self.timeout if timeout is None else timeout

        start = time.perf_counter()
        try:
            response = await self._http_client.post(
                url,
                json={"query": operation_text},
                headers={"Content-Type": "application/json", **self.headers},
                timeout=_timeout(call_timeout),
            )
        except httpx.TimeoutException as exc:
            logger.warning("Request to %s timed out after %ss", url, call_timeout)
            return RawResponse(
                status_code=NO_RESPONSE_STATUS,
                body=None,
                error=f"Request timed out after {call_timeout}s ({type(exc).__name__})",
                elapsed_ms=_elapsed_ms(start),
            )
        except httpx.RequestError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            return RawResponse(
                status_code=NO_RESPONSE_STATUS,
                body=None,
                error=f"{type(exc).__name__}: {exc}",
                elapsed_ms=_elapsed_ms(start),
            )

        if should_raise:
            response.raise_for_status()

        body, is_json = _decode_body(response)
        elapsed = _elapsed_ms(start)
        logger.debug("POST %s -> %s in %sms", url, response.status_code, elapsed)
        return RawResponse(
            status_code=response.status_code,
            body=body,
            is_json=is_json,
            elapsed_ms=elapsed,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this transport owns it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "TransportClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def _timeout(seconds: float) -> httpx.Timeout:
    """Per-phase timeout; connecting is capped at the connect timeout."""
    return httpx.Timeout(seconds, connect=min(seconds, DEFAULT_CONNECT_TIMEOUT_SECONDS))


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


async def send(
    endpoint: str,
    operation_text: str,
    *,
    fail_on_status: bool = False,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    http_client: Optional[httpx.AsyncClient] = None,
) -> RawResponse:
    """Send a single operation with a one-shot transport client."""
    async with TransportClient(
        endpoint,
        timeout=timeout,
        fail_on_status=fail_on_status,
        http_client=http_client,
    ) as client:
        return await client.send(operation_text)
