"""Utility modules."""

from .logging_setup import (
    JSONFormatter,
    ConsoleFormatter,
    setup_logging,
    flush_all_loggers,
    get_category_for_module,
    get_category_loggers,
    set_log_timezone,
    get_log_timezone,
    get_current_timestamp,
    get_logger,
)
from .trace_context import (
    get_cycle_id,
    set_cycle_id,
    new_cycle,
    generate_cycle_id,
)
from .perf_logger import (
    log_timing,
    timed,
)

__all__ = [
    # Logging setup
    "JSONFormatter",
    "ConsoleFormatter",
    "setup_logging",
    "flush_all_loggers",
    "get_category_for_module",
    "get_category_loggers",
    "set_log_timezone",
    "get_log_timezone",
    "get_current_timestamp",
    "get_logger",
    # Trace context
    "get_cycle_id",
    "set_cycle_id",
    "new_cycle",
    "generate_cycle_id",
    # Performance logging
    "log_timing",
    "timed",
]
