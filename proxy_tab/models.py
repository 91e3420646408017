from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel


class PageMetadata(BaseModel):
    """Display information for a tab: title and favicon URL."""

    title: str
    favicon: Optional[str] = None


@dataclass(frozen=True)
class FetchResult:
    """A fully buffered upstream response."""

    final_url: str
    content_type: str
    body: bytes
    status_code: int
    # Charset declared in the content-type header, if any
    encoding: Optional[str] = None


def is_html_content_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and "text/html" in content_type.lower()
