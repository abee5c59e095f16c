"""
HTTP Client

Async HTTP client used to fetch published allowlist artifacts.
"""

from __future__ import annotations

import json as jsonlib
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx


logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse response as JSON."""
        return jsonlib.loads(self.content)


class HttpError(Exception):
    """Transport-level failure (refused connection or timeout)."""


class AsyncHttpClient:
    """
    Async HTTP client.

    Requests are cancellable: cancelling the awaiting task aborts the
    request and propagates asyncio.CancelledError.

    Usage:
        async with AsyncHttpClient(timeout=10) as client:
            response = await client.get("https://example.com/merkle/proofs.json")
            if response.ok:
                data = response.json()
    """

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        default_headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds
            default_headers: Headers to include in all requests
            transport: Custom httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.timeout = timeout
        self.default_headers = default_headers or {}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily create the underlying httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self.default_headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Make an HTTP request.

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            HttpError: On transport failures and timeouts
        """
        client = self._get_client()
        effective_timeout = timeout or self.timeout

        try:
            response = await client.request(
                method,
                url,
                headers=headers,
                params=params,
                timeout=effective_timeout,
            )
        except httpx.HTTPError as e:
            logger.debug(f"{method} {url} failed: {e}")
            raise HttpError(str(e) or type(e).__name__) from e

        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
        )

    async def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """Make a GET request."""
        return await self.request(
            "GET", url,
            headers=headers,
            params=params,
            timeout=timeout,
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
