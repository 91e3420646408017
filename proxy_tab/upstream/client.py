"""
Upstream HTTP access for all three operations.

Every call builds its own ``httpx.AsyncClient`` with an explicit timeout, so
no connection state is shared between inbound requests.
"""

import logging
from typing import AsyncIterator, Optional

import httpx

from proxy_tab.models import FetchResult
from proxy_tab.vars import UPSTREAM_USER_AGENT

logger = logging.getLogger("uvicorn.error")

DEFAULT_HEADERS = {
    "User-Agent": UPSTREAM_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class UpstreamFetchError(Exception):
    """The remote resource could not be fetched (network, DNS, timeout)."""

    def __init__(self, url: str, kind: str, cause: Optional[Exception] = None):
        self.url = url
        self.kind = kind
        self.cause = cause
        super().__init__(f"Upstream {kind} failure for {url}: {cause}")

    @property
    def status_code(self) -> int:
        return 504 if self.kind == "timeout" else 502


def _wrap_error(url: str, exc: Exception) -> UpstreamFetchError:
    if isinstance(exc, httpx.TimeoutException):
        return UpstreamFetchError(url, "timeout", exc)
    return UpstreamFetchError(url, "transport", exc)


def build_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers=DEFAULT_HEADERS,
    )


class UpstreamStream:
    """
    An open upstream response whose body has not been consumed yet.

    Owns its client; ``aclose`` releases both and may be called any number of
    times, which lets the streaming generator and the response background task
    both call it.
    """

    def __init__(self, url: str, client: httpx.AsyncClient, response: httpx.Response):
        self.url = url
        self._client = client
        self._response = response
        self._closed = False

    @property
    def final_url(self) -> str:
        return str(self._response.url)

    @property
    def content_type(self) -> Optional[str]:
        return self._response.headers.get("content-type")

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def charset_encoding(self) -> Optional[str]:
        """Charset from the content-type header, or None when the header has none."""
        return self._response.charset_encoding

    @property
    def closed(self) -> bool:
        return self._closed

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as e:
            raise _wrap_error(self.url, e) from e

    async def aread(self) -> bytes:
        try:
            return await self._response.aread()
        except httpx.HTTPError as e:
            raise _wrap_error(self.url, e) from e

    async def to_fetch_result(self) -> FetchResult:
        body = await self.aread()
        return FetchResult(
            final_url=self.final_url,
            content_type=self.content_type or "",
            body=body,
            status_code=self.status_code,
            encoding=self.charset_encoding,
        )

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()


async def open_stream(url: str, timeout: float) -> UpstreamStream:
    """Send a GET for ``url`` and return as soon as the headers arrived."""
    client = build_client(timeout)
    try:
        request = client.build_request("GET", url)
        response = await client.send(request, stream=True)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        await client.aclose()
        raise _wrap_error(url, e) from e

    logger.debug(
        f"[Upstream] {response.status_code} {url} -> {response.url} "
        f"({response.headers.get('content-type', 'no content-type')})"
    )
    return UpstreamStream(url, client, response)

