import logging

import httpx

from proxy_tab.upstream.client import UpstreamFetchError
from proxy_tab.utils import shorten_url
from proxy_tab.utils.exception_logging import (
    describe_upstream_error,
    find_exception_in_exception_groups,
    format_exception_message,
    log_exception_with_details,
)


class BrokenStr(Exception):
    def __str__(self):
        raise RuntimeError("no str for you")


def test_log_regular_exception(caplog):
    logger = logging.getLogger("test.exception_logging")
    with caplog.at_level(logging.ERROR, logger="test.exception_logging"):
        log_exception_with_details(logger, "[Asset]", ValueError("boom"))
    assert "[Asset] Exception: boom" in caplog.text


def test_log_exception_group(caplog):
    logger = logging.getLogger("test.exception_logging")
    group = ExceptionGroup("stream failed", [ValueError("a"), KeyError("b")])
    with caplog.at_level(logging.WARNING, logger="test.exception_logging"):
        log_exception_with_details(logger, "[Proxy]", group, logging.WARNING)
    assert "2 sub-exceptions" in caplog.text
    assert "Sub-exception 1: ValueError: a" in caplog.text
    assert "Sub-exception 2: KeyError" in caplog.text


def test_log_none(caplog):
    logger = logging.getLogger("test.exception_logging")
    with caplog.at_level(logging.ERROR, logger="test.exception_logging"):
        log_exception_with_details(logger, "[Meta]", None)
    assert "[Meta] Exception: None" in caplog.text


def test_format_handles_broken_str():
    assert "BrokenStr" in format_exception_message(BrokenStr())


def test_format_exception_group():
    group = ExceptionGroup("outer", [ValueError("inner")])
    assert format_exception_message(group).endswith("(Sub-exceptions: ValueError: inner)")


def test_find_nested_exception():
    timeout = httpx.ReadTimeout("slow")
    group = ExceptionGroup("outer", [ExceptionGroup("inner", [timeout])])
    assert find_exception_in_exception_groups(group, httpx.TimeoutException) is timeout
    assert find_exception_in_exception_groups(group, KeyError) is None


def test_describe_upstream_error():
    assert describe_upstream_error(httpx.ConnectTimeout("x")) == "timeout"
    assert describe_upstream_error(httpx.ConnectError("x")) == "connection_failed"
    wrapped = UpstreamFetchError("https://x/", "transport", httpx.ConnectError("x"))
    assert describe_upstream_error(wrapped) == "connection_failed"
    assert describe_upstream_error(KeyError("k")) == "KeyError"


def test_shorten_url():
    assert shorten_url(None) == "<empty>"
    assert shorten_url("https://a/") == "https://a/"
    long_url = "https://example.com/" + "x" * 500
    shortened = shorten_url(long_url, limit=50)
    assert shortened.startswith(long_url[:50])
    assert shortened.endswith("(+470 chars)")
