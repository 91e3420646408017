import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from opentelemetry import trace

from proxy_tab.models import PageMetadata, is_html_content_type
from proxy_tab.relay.asset_relay import relay_asset, relay_stream
from proxy_tab.rewriting.endpoints import Endpoint
from proxy_tab.rewriting.metadata import extract_metadata
from proxy_tab.rewriting.page_rewriter import PageRewriteError, rewrite_page
from proxy_tab.upstream.client import UpstreamFetchError, open_stream
from proxy_tab.utils.exception_logging import (
    describe_upstream_error,
    format_exception_message,
    log_exception_with_details,
)
from proxy_tab.utils.traced_requests import traced_request
from proxy_tab.vars import ASSET_TIMEOUT, BASE_PATH, META_TIMEOUT, PAGE_TIMEOUT, SHOW_BANNER

router = APIRouter(prefix=BASE_PATH)
tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")

URL_QUERY = Query(None, description="Absolute URL of the remote resource")


def _missing_url() -> PlainTextResponse:
    return PlainTextResponse("No url", status_code=400)


@router.get("/meta", response_model=PageMetadata)
async def page_metadata(url: Optional[str] = URL_QUERY):
    """
    Title and favicon for a tab. Degrades to the URL itself instead of failing.
    """
    if not url:
        return JSONResponse({"error": "missing url"}, status_code=400)

    with traced_request(tracer, "page_metadata", url, "[Meta] Looking up") as span:
        try:
            stream = await open_stream(url, META_TIMEOUT)
            try:
                span.set_attribute("proxy.status_code", stream.status_code)
                if not is_html_content_type(stream.content_type):
                    # Videos and binaries are never downloaded just for a title
                    return extract_metadata("", stream.final_url, fallback_title=url)
                page = await stream.to_fetch_result()
            finally:
                await stream.aclose()
            return extract_metadata(
                page.body, page.final_url, fallback_title=url, encoding=page.encoding
            )
        except Exception as e:
            span.set_attribute("proxy.error", describe_upstream_error(e))
            logger.warning(f"[Meta] Falling back for {url}: {format_exception_message(e)}")
            return PageMetadata(title=url, favicon=None)


@router.get(f"/{Endpoint.ASSET.value}")
async def asset(url: Optional[str] = URL_QUERY) -> Response:
    """Relay a resource's bytes unchanged."""
    if not url:
        return _missing_url()

    with traced_request(tracer, "asset_relay", url, "[Asset] Relaying") as span:
        try:
            response = await relay_asset(url, ASSET_TIMEOUT)
        except UpstreamFetchError as e:
            span.set_attribute("proxy.error", describe_upstream_error(e))
            log_exception_with_details(logger, "[Asset]", e)
            return PlainTextResponse("Asset fetch failed", status_code=e.status_code)
        span.set_attribute("proxy.status_code", response.status_code)
        return response


@router.get(f"/{Endpoint.NAVIGATE.value}")
async def proxy_page(url: Optional[str] = URL_QUERY) -> Response:
    """
    Load a page. HTML is rewritten to stay inside the proxy; anything else is
    relayed as-is from the same upstream response.
    """
    if not url:
        return _missing_url()

    with traced_request(tracer, "proxy_page", url, "[Proxy] Loading") as span:
        try:
            stream = await open_stream(url, PAGE_TIMEOUT)
        except UpstreamFetchError as e:
            span.set_attribute("proxy.error", describe_upstream_error(e))
            log_exception_with_details(logger, "[Proxy]", e)
            return PlainTextResponse("Proxy failed", status_code=e.status_code)

        content_type = stream.content_type or ""
        span.set_attribute("proxy.status_code", stream.status_code)
        span.set_attribute("proxy.content_type", content_type)

        if not is_html_content_type(content_type):
            return relay_stream(stream)

        try:
            body = await stream.aread()
            rewritten = rewrite_page(
                body,
                stream.final_url,
                show_banner=SHOW_BANNER,
                encoding=stream.charset_encoding,
            )
        except (UpstreamFetchError, PageRewriteError) as e:
            span.set_attribute("proxy.error", describe_upstream_error(e))
            log_exception_with_details(logger, "[Proxy]", e)
            status_code = e.status_code if isinstance(e, UpstreamFetchError) else 502
            return PlainTextResponse("Proxy failed", status_code=status_code)
        finally:
            await stream.aclose()

        return HTMLResponse(
            rewritten,
            status_code=stream.status_code,
            media_type="text/html; charset=utf-8",
        )
