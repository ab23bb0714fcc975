"""
Performance logging utilities.

Provides a timing context manager and decorator that log to the
"cityscape.perf" category with the current cycle ID.

Usage:
    with log_timing("partition", extra={"leaves": n}):
        layout = partition_tree(root, config)

    @timed("derive")
    def derive(...):
        ...

Use for pass-level operations (partition, derive, render). Do not wrap
per-leaf codec calls; they run thousands of times per frame.

Threshold guidelines:
- Partition: warn=50ms, error=250ms
- Derive: warn=20ms, error=100ms
"""

from __future__ import annotations

import functools
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional

from .trace_context import get_cycle_id

_perf_logger: Optional[logging.Logger] = None


def get_perf_logger() -> logging.Logger:
    """Get or create the performance logger."""
    global _perf_logger
    if _perf_logger is None:
        _perf_logger = logging.getLogger("cityscape.perf")
    return _perf_logger


def set_perf_logger(logger: logging.Logger) -> None:
    """Set the performance logger (for testing or custom configuration)."""
    global _perf_logger
    _perf_logger = logger


@contextmanager
def log_timing(
    operation: str,
    warn_threshold_ms: float = 50.0,
    error_threshold_ms: float = 250.0,
    extra: Optional[dict] = None,
) -> Generator[dict, None, None]:
    """
    Context manager to log operation timing.

    Escalates the log level to WARNING/ERROR above the thresholds.

    Args:
        operation: Name of the operation being timed.
        warn_threshold_ms: Duration above which to log as WARNING.
        error_threshold_ms: Duration above which to log as ERROR.
        extra: Additional fields appended to the log line.

    Yields:
        Dict that receives "duration_ms" on exit; callers may add fields.
    """
    timing_info: dict = dict(extra or {})
    start = time.perf_counter()
    try:
        yield timing_info
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        timing_info["duration_ms"] = duration_ms

        if duration_ms >= error_threshold_ms:
            level = logging.ERROR
        elif duration_ms >= warn_threshold_ms:
            level = logging.WARNING
        else:
            level = logging.DEBUG

        fields = " ".join(
            f"{k}={v}" for k, v in timing_info.items() if k != "duration_ms"
        )
        message = f"[{get_cycle_id()}] {operation} took {duration_ms:.2f}ms"
        if fields:
            message = f"{message} ({fields})"
        get_perf_logger().log(level, message)


def timed(
    operation: Optional[str] = None,
    warn_threshold_ms: float = 50.0,
    error_threshold_ms: float = 250.0,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator form of log_timing.

    Args:
        operation: Name to log; defaults to the function's qualified name.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = operation or func.__qualname__

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with log_timing(name, warn_threshold_ms, error_threshold_ms):
                return func(*args, **kwargs)

        return wrapper

    return decorator
