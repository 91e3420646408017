from typing import Optional

from bs4 import BeautifulSoup

from proxy_tab.models import PageMetadata
from proxy_tab.rewriting.markup import Markup, is_blank, parse_markup
from proxy_tab.rewriting.url_resolver import origin_of, resolve

# Checked in order; each must match the whole rel value
FAVICON_RELS = ("icon", "shortcut icon", "apple-touch-icon")


def _rel_value(tag) -> str:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return " ".join(rel).lower()


def _find_icon_href(soup: BeautifulSoup) -> Optional[str]:
    links = soup.find_all("link", href=True)
    for rel in FAVICON_RELS:
        for link in links:
            if _rel_value(link) == rel and link["href"]:
                return link["href"]
    return None


def _find_title(soup: BeautifulSoup) -> Optional[str]:
    og_title = soup.find("meta", attrs={"property": "og:title"})
    if og_title is not None:
        content = (og_title.get("content") or "").strip()
        if content:
            return content

    title = soup.find("title")
    if title is not None:
        text = title.get_text().strip()
        if text:
            return text
    return None


def extract_metadata(
    html: Markup,
    base_url: str,
    fallback_title: Optional[str] = None,
    encoding: Optional[str] = None,
) -> PageMetadata:
    """
    Extract a tab title and favicon URL from ``html``. Raw bytes are decoded
    like a rewritten page: header ``encoding`` first, then the document itself.

    The title falls back to ``fallback_title`` (or ``base_url``) and is never
    empty. Without an icon link the favicon is guessed as
    ``{origin}/favicon.ico``; it is not fetched to check that it exists.
    """
    soup = None if is_blank(html) else parse_markup(html, encoding)

    title = (soup is not None and _find_title(soup)) or fallback_title or base_url

    icon_href = _find_icon_href(soup) if soup is not None else None
    if icon_href is not None:
        favicon = resolve(base_url, icon_href)
    else:
        origin = origin_of(base_url)
        favicon = f"{origin}/favicon.ico" if origin else None

    return PageMetadata(title=title, favicon=favicon)
