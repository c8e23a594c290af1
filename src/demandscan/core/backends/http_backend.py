"""
HTTP Backend implementation using httpx.

One attempt per request: failures are reported to the caller and retried
only by the next pass.
"""

from __future__ import annotations

from datetime import datetime

import httpx

from .base import Backend, FetchError, FetchResult, RequestSpec

DEFAULT_USER_AGENT = "DemandScanBot/1.0 (respectful-bot)"


class HttpBackend(Backend):
    """HTTP backend using a pooled httpx.AsyncClient.

    Features:
    - Persistent connection pooling
    - Automatic redirect following
    - Identifying user agent on every request
    """

    def __init__(
        self,
        timeout: float | None = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        default_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize HTTP backend.

        Args:
            timeout: Request timeout in seconds (None disables it)
            user_agent: User agent sent with every request
            default_headers: Extra headers for all requests
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

        self.default_headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            **(default_headers or {}),
        }

        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "http"

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers=self.default_headers,
                transport=self.transport,
            )
        return self._client

    async def fetch(self, request: RequestSpec) -> FetchResult:
        """Issue a single GET.

        Returns:
            FetchResult for any HTTP status

        Raises:
            FetchError: On transport errors or invalid URLs
        """
        client = await self._ensure_client()
        start_time = datetime.utcnow()

        try:
            response = await client.get(
                request.url,
                headers=request.headers or None,
                follow_redirects=request.follow_redirects,
            )
        except httpx.TimeoutException as e:
            raise FetchError(f"Timeout: {e}", url=request.url, cause=e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchError(str(e) or type(e).__name__, url=request.url, cause=e) from e

        elapsed_ms = (datetime.utcnow() - start_time).total_seconds() * 1000

        return FetchResult(
            url=request.url,
            final_url=str(response.url),
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=response.text,
            headers=dict(response.headers),
            elapsed_ms=elapsed_ms,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
