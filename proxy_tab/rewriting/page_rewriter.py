"""
Rewrites a fetched HTML page so that every reference routes back through the
proxy endpoints.

The page is parsed into a BeautifulSoup tree with the tolerant lxml parser,
the rule table from ``rules`` is applied in one traversal, a banner is
prepended to <body> and the whole document is serialized again.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from proxy_tab.rewriting.markup import Markup, is_blank, parse_markup
from proxy_tab.rewriting.rules import REWRITE_RULES, RewriteRule
from proxy_tab.rewriting.url_resolver import resolve
from proxy_tab.vars import BANNER_TEXT, SHOW_BANNER

logger = logging.getLogger(__name__)

BANNER_STYLE = (
    "position:fixed;left:0;right:0;top:0;background:rgba(0,0,0,0.55);"
    "color:#fff;padding:6px;z-index:99999;font-family:system-ui;font-size:12px;"
)
BANNER_LINK_STYLE = "color:#9cf;"


class PageRewriteError(Exception):
    """The parser could not build any tree from the fetched markup."""


@dataclass
class PageContext:
    """State of one rewrite call; never shared between requests."""

    # URL the page was fetched from (post-redirect)
    page_url: str
    # URL relative references resolve against; differs when the page has <base href>
    base_url: str
    document: BeautifulSoup


def parse_page(
    html: Markup, page_url: str, encoding: Optional[str] = None
) -> PageContext:
    # An empty upstream body still yields a document with a body
    if is_blank(html):
        html = "<html><head></head><body></body></html>"
    try:
        document = parse_markup(html, encoding)
    except ParserRejectedMarkup as e:
        raise PageRewriteError(f"Could not parse page from {page_url}: {e}") from e
    return PageContext(page_url=page_url, base_url=page_url, document=document)


def apply_base_element(context: PageContext) -> None:
    """
    Honor <base href> for resolution, then drop its href.

    Rewritten references are root-relative; left in place, a remote <base>
    would make the browser resolve them against the remote origin.
    """
    base = context.document.find("base", href=True)
    if base is None:
        return
    resolved = resolve(context.page_url, base["href"])
    if resolved:
        context.base_url = resolved
    del base["href"]


def apply_rules(context: PageContext, rules: Sequence[RewriteRule] = REWRITE_RULES) -> int:
    """Apply every rule to every element; returns the number of rewritten attributes."""
    rewritten = 0
    for tag in context.document.find_all(True):
        for rule in rules:
            if not rule.applies_to(tag):
                continue
            value = tag.get(rule.attribute)
            if not isinstance(value, str):
                continue
            new_value = rule.rewrite(tag, value, context.base_url)
            if new_value is None or new_value == value:
                continue
            tag[rule.attribute] = new_value
            rewritten += 1
    return rewritten


def inject_banner(context: PageContext, text: str = BANNER_TEXT) -> bool:
    """Prepend the proxied-page banner to <body>; False when there is no body."""
    body = context.document.body
    if body is None:
        return False

    document = context.document
    banner = document.new_tag("div", attrs={"style": BANNER_STYLE})
    banner.append(f"{text} | ")
    link = document.new_tag(
        "a",
        attrs={
            "href": context.page_url,
            "style": BANNER_LINK_STYLE,
            "target": "_blank",
            "rel": "noopener noreferrer",
        },
    )
    link.string = "Open original"
    banner.append(link)
    body.insert(0, banner)
    return True


def rewrite_page(
    html: Markup,
    base_url: str,
    show_banner: bool = SHOW_BANNER,
    encoding: Optional[str] = None,
) -> str:
    """
    Return the full rewritten document for ``html`` fetched from ``base_url``.

    ``html`` may be the raw response body; ``encoding`` is then the charset
    declared by the response header, if any.
    """
    context = parse_page(html, base_url, encoding)
    apply_base_element(context)
    rewritten = apply_rules(context)
    # Injected after the rules so the banner link keeps pointing at the original
    if show_banner:
        inject_banner(context)
    logger.debug(f"Rewrote {rewritten} references for {base_url}")
    return str(context.document)
