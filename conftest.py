# Ensure tests import modules from this service directory first, so that
# `import proxy_tab.*` works without installing the package.
import os
import sys
from unittest.mock import AsyncMock, patch

import httpx
import pytest

SERVICE_ROOT = os.path.dirname(__file__)

if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)


@pytest.fixture
def mock_upstream():
    """
    Patch httpx so every upstream GET is answered from a URL -> response map.

    Values may be httpx.Response objects or exceptions to raise. Requests for
    unknown URLs fail with a ConnectError.
    """
    responses = {}

    def _send(request, **kwargs):
        answer = responses.get(str(request.url))
        if answer is None:
            raise httpx.ConnectError("unknown host", request=request)
        if isinstance(answer, Exception):
            raise answer
        return answer

    with patch.object(httpx.AsyncClient, "send", new_callable=AsyncMock) as send:
        send.side_effect = _send
        send.responses = responses
        yield send
