from typing import Dict, Iterable, Optional

import httpx


def upstream_response(
    url: str,
    status_code: int = 200,
    content_type: Optional[str] = "text/html; charset=utf-8",
    content: bytes = b"",
    chunks: Optional[Iterable[bytes]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> httpx.Response:
    """
    Build a real httpx.Response as if ``url`` had answered.

    ``chunks`` turns the body into an async stream so tests can observe chunked
    relaying; otherwise ``content`` is used as a single buffered body.
    """
    response_headers = dict(headers or {})
    if content_type is not None:
        response_headers["content-type"] = content_type

    request = httpx.Request("GET", url)
    if chunks is None:
        return httpx.Response(
            status_code, headers=response_headers, content=content, request=request
        )
    return httpx.Response(
        status_code,
        headers=response_headers,
        stream=ChunkStream(chunks),
        request=request,
    )


class ChunkStream(httpx.AsyncByteStream):
    """Async body that records whether the consumer closed it."""

    def __init__(self, chunks: Iterable[bytes]):
        self.chunks = list(chunks)
        self.yielded = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            self.yielded += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


class FailingStream(httpx.AsyncByteStream):
    """Async body that breaks after its first chunk."""

    def __init__(self, first_chunk: bytes = b"partial"):
        self.first_chunk = first_chunk
        self.closed = False

    async def __aiter__(self):
        yield self.first_chunk
        raise httpx.ReadError("connection reset")

    async def aclose(self) -> None:
        self.closed = True
