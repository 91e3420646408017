import logging
from typing import Optional
from contextlib import contextmanager

from opentelemetry.trace import Tracer

from proxy_tab.utils import shorten_url

logger = logging.getLogger("uvicorn.error")


@contextmanager
def traced_request(
    tracer: Tracer,
    operation: str,
    target_url: Optional[str],
    start_message: str,
):
    """Context manager to create a span, set common attributes, and log a start message."""
    with tracer.start_as_current_span(operation) as span:
        span.set_attribute("proxy.operation", operation)
        if target_url:
            span.set_attribute("proxy.target_url", target_url)
        logger.info(f"{start_message} {shorten_url(target_url)}")
        yield span
