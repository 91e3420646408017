"""
Resolution of references found in fetched pages into absolute http(s) URLs.
"""

from typing import Optional
from urllib.parse import urljoin, urlsplit

ALLOWED_SCHEMES = ("http", "https")


def is_fragment_or_script(ref: str) -> bool:
    """
    Detect in-page anchors and javascript: pseudo-URLs.

    Neither is a separately fetchable resource, so callers skip them before
    resolving instead of producing a misleading absolute URL.
    """
    if not ref:
        return False
    value = ref.lstrip()
    return value.startswith("#") or value[:11].lower() == "javascript:"


def resolve(base: str, ref: str) -> Optional[str]:
    """
    Resolve ``ref`` against ``base`` following RFC 3986.

    Returns the absolute URL, or None when the reference is empty, malformed
    or resolves to anything other than an http(s) URL with a host. Never
    raises; a None result means "leave the original value untouched".
    """
    if not isinstance(ref, str) or not isinstance(base, str):
        return None

    ref = ref.strip()
    if not ref:
        return None

    try:
        absolute = urljoin(base, ref)
        parts = urlsplit(absolute)
        # Accessing the port validates it (e.g. "http://host:99999/")
        parts.port
    except ValueError:
        return None

    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.hostname:
        return None
    return absolute


def origin_of(url: str) -> Optional[str]:
    """Return ``scheme://host[:port]`` for an absolute http(s) URL."""
    if not isinstance(url, str):
        return None
    try:
        parts = urlsplit(url.strip())
        parts.port
    except ValueError:
        return None
    if parts.scheme.lower() not in ALLOWED_SCHEMES or not parts.hostname:
        return None
    # netloc may carry credentials; the origin never does
    host = parts.netloc.rsplit("@", 1)[-1]
    return f"{parts.scheme.lower()}://{host}"
