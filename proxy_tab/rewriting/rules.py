"""
Attribute rewrite rules applied to every element of a proxied page.

Each rule maps (element, attribute value, base URL) to the rewritten value, or
to None when the value must stay as written. Rules are stateless and touch
disjoint (element, attribute) slots, so the order of the table is irrelevant.
"""

import re
from typing import Callable, NamedTuple, Optional, Tuple
from urllib.parse import urlsplit

from bs4 import Tag

from proxy_tab.rewriting.endpoints import Endpoint, endpoint_reference
from proxy_tab.rewriting.url_resolver import is_fragment_or_script, resolve

# url(...) with single, double or no quotes; the reference is group 2
CSS_URL_PATTERN = re.compile(r"""url\(\s*(['"]?)(.*?)\1\s*\)""", re.IGNORECASE | re.DOTALL)


def _reference(endpoint: Endpoint, raw: str, base_url: str) -> Optional[str]:
    absolute = resolve(base_url, raw)
    if absolute is None:
        return None
    return endpoint_reference(endpoint, absolute)


def link_endpoint(tag: Tag, absolute_url: str) -> Endpoint:
    """Stylesheets go to the asset relay, every other <link> is navigable."""
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    if "stylesheet" in (token.lower() for token in rel):
        return Endpoint.ASSET
    if urlsplit(absolute_url).path.lower().endswith(".css"):
        return Endpoint.ASSET
    return Endpoint.NAVIGATE


def rewrite_anchor_href(tag: Tag, value: str, base_url: str) -> Optional[str]:
    if is_fragment_or_script(value):
        return None
    return _reference(Endpoint.NAVIGATE, value, base_url)


def rewrite_asset_src(tag: Tag, value: str, base_url: str) -> Optional[str]:
    return _reference(Endpoint.ASSET, value, base_url)


def rewrite_link_href(tag: Tag, value: str, base_url: str) -> Optional[str]:
    absolute = resolve(base_url, value)
    if absolute is None:
        return None
    return endpoint_reference(link_endpoint(tag, absolute), absolute)


def rewrite_inline_style(tag: Tag, value: str, base_url: str) -> Optional[str]:
    def replace(match: re.Match) -> str:
        reference = _reference(Endpoint.ASSET, match.group(2), base_url)
        if reference is None:
            return match.group(0)
        return f"url('{reference}')"

    rewritten = CSS_URL_PATTERN.sub(replace, value)
    return rewritten if rewritten != value else None


def rewrite_srcset(tag: Tag, value: str, base_url: str) -> Optional[str]:
    candidates = []
    for candidate in value.split(","):
        candidate = candidate.strip()
        if not candidate:
            continue
        url, *descriptor = candidate.split(None, 1)
        reference = _reference(Endpoint.ASSET, url, base_url)
        if reference is None:
            candidates.append(candidate)
        elif descriptor:
            candidates.append(f"{reference} {descriptor[0]}")
        else:
            candidates.append(reference)
    return ", ".join(candidates)


class RewriteRule(NamedTuple):
    # None matches any element
    tag_names: Optional[Tuple[str, ...]]
    attribute: str
    rewrite: Callable[[Tag, str, str], Optional[str]]

    def applies_to(self, tag: Tag) -> bool:
        if self.tag_names is not None and tag.name not in self.tag_names:
            return False
        return tag.has_attr(self.attribute)


REWRITE_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule(("a",), "href", rewrite_anchor_href),
    RewriteRule(("img", "script"), "src", rewrite_asset_src),
    RewriteRule(("link",), "href", rewrite_link_href),
    RewriteRule(("img", "source"), "srcset", rewrite_srcset),
    RewriteRule(None, "style", rewrite_inline_style),
)
