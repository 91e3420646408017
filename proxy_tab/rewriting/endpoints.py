from enum import Enum
from urllib.parse import quote

from proxy_tab.vars import BASE_PATH


class Endpoint(str, Enum):
    """The two indirection routes every rewritten reference points at."""

    # Re-enters the page-load pipeline (hyperlinks, non-asset documents)
    NAVIGATE = "proxy"
    # Opaque byte relay (images, scripts, stylesheets, fonts)
    ASSET = "asset"

    @property
    def path(self) -> str:
        return f"{BASE_PATH}/{self.value}"


def endpoint_reference(endpoint: Endpoint, absolute_url: str) -> str:
    """Build the same-origin reference carrying ``absolute_url`` as ``url``."""
    return f"{endpoint.path}?url={quote(absolute_url, safe='')}"
