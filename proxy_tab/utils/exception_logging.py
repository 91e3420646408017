"""
Exception logging helpers for upstream and rewrite failures.

Streaming responses run inside task groups, so failures may arrive wrapped in
exception groups; these helpers unpack them for the log.
"""

import logging
from typing import Optional

import httpx


def _safe_str(obj) -> str:
    """
    Convert an object to string, falling back when __str__ itself fails.

    Args:
        obj: The object to convert to string

    Returns:
        A string representation of the object
    """
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object (string conversion failed)>"


def _sub_exceptions(exception) -> list:
    try:
        return list(getattr(exception, "exceptions", None) or [])
    except Exception:
        return []


def find_exception_in_exception_groups(exception: BaseException, target_type):
    """
    Recursively search an exception and its sub-exceptions for ``target_type``.

    Args:
        exception: The exception to search through
        target_type: The exception type to look for

    Returns:
        The first exception matching the target type, or None if not found
    """
    if isinstance(exception, target_type):
        return exception
    for sub_exc in _sub_exceptions(exception):
        found = find_exception_in_exception_groups(sub_exc, target_type)
        if found is not None:
            return found
    return None


def describe_upstream_error(exception: BaseException) -> str:
    """Short, human-readable reason for an httpx failure."""
    timeout = find_exception_in_exception_groups(exception, httpx.TimeoutException)
    if timeout is not None:
        return "timeout"
    connect = find_exception_in_exception_groups(exception, httpx.ConnectError)
    if connect is not None:
        return "connection_failed"
    cause = getattr(exception, "cause", None) or exception.__cause__
    if cause is not None and cause is not exception:
        return describe_upstream_error(cause)
    return type(exception).__name__


def log_exception_with_details(
    logger: logging.Logger,
    prefix: str,
    exception: Optional[BaseException],
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception including the sub-exceptions of exception groups.

    Args:
        logger: The logger instance to use
        prefix: Prefix for the log message (e.g., "[Asset]", "[Proxy]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
    """
    if exception is None:
        logger.log(level, f"{prefix} Exception: None")
        return

    sub_exceptions = _sub_exceptions(exception)
    if not sub_exceptions:
        logger.log(
            level,
            f"{prefix} Exception: {_safe_str(exception)}",
            exc_info=exception,
        )
        return

    logger.log(
        level,
        f"{prefix} Exception with {len(sub_exceptions)} sub-exceptions: "
        f"{_safe_str(exception)}",
    )
    for i, sub_exc in enumerate(sub_exceptions):
        logger.log(
            level,
            f"{prefix} Sub-exception {i+1}: {type(sub_exc).__name__}: {_safe_str(sub_exc)}",
            exc_info=sub_exc,
        )


def format_exception_message(exception: Optional[BaseException]) -> str:
    """
    Format an exception message, including sub-exceptions of exception groups.

    Args:
        exception: The exception to format

    Returns:
        A formatted string describing the exception
    """
    if exception is None:
        return "None"
    sub_exceptions = _sub_exceptions(exception)
    if not sub_exceptions:
        return _safe_str(exception)
    joined = "; ".join(
        f"{type(sub_exc).__name__}: {_safe_str(sub_exc)}" for sub_exc in sub_exceptions
    )
    return f"{_safe_str(exception)} (Sub-exceptions: {joined})"
