import logging
from typing import AsyncIterator

from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from proxy_tab.upstream.client import UpstreamFetchError, UpstreamStream, open_stream
from proxy_tab.utils.exception_logging import log_exception_with_details
from proxy_tab.vars import ASSET_TIMEOUT

logger = logging.getLogger("uvicorn.error")


async def forward_chunks(stream: UpstreamStream) -> AsyncIterator[bytes]:
    """
    Yield upstream chunks as they arrive.

    The upstream response is closed when the generator finishes, fails or is
    cancelled because the client went away, so an abandoned download is not
    drained to the end.
    """
    sent = 0
    try:
        async for chunk in stream.aiter_bytes():
            sent += len(chunk)
            yield chunk
    except UpstreamFetchError as e:
        # Headers are already out; aborting the body is all that is left
        log_exception_with_details(
            logger, f"[Asset] Stream aborted after {sent} bytes:", e, logging.WARNING
        )
        raise
    finally:
        await stream.aclose()


def relay_stream(stream: UpstreamStream) -> StreamingResponse:
    """
    Wrap an open upstream response into a streaming response.

    Status code is relayed as-is and the content-type only when the upstream
    declared one.
    """
    return StreamingResponse(
        forward_chunks(stream),
        status_code=stream.status_code,
        media_type=stream.content_type or None,
        background=BackgroundTask(stream.aclose),
    )


async def relay_asset(url: str, timeout: float = ASSET_TIMEOUT) -> StreamingResponse:
    """Open ``url`` and relay its bytes; raises UpstreamFetchError before any byte is sent."""
    stream = await open_stream(url, timeout)
    return relay_stream(stream)
