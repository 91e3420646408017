from typing import Optional


def shorten_url(url: Optional[str], limit: int = 120) -> str:
    """Keep log lines readable when pages link to very long URLs."""
    if not url:
        return "<empty>"
    if len(url) <= limit:
        return url
    return f"{url[:limit]}...(+{len(url) - limit} chars)"
