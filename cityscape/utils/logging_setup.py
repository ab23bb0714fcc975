"""
Logging setup with categories and cycle ID support.

Provides:
- Log categories: system, layout, encoding, render, presentation, data, perf
- Automatic module -> category routing
- Cycle ID correlation in all log lines
- Console output (colored text or JSON) and optional file output
- Configurable timezone for log timestamps

Categories:
- system: Startup, config, CLI
- layout: Space partitioning
- encoding: Metric selection and codec fallbacks
- render: Render-state derivation and cache reuse
- presentation: Adapters, hover/pick state, terminal view
- data: Tree loading, snapshot merges, mock sources
- perf: Timing of partition/derive passes
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from config.models import LoggingConfig

from .trace_context import get_cycle_id

ROOT_LOGGER_NAME = "cityscape"

CATEGORIES = ["system", "layout", "encoding", "render", "presentation", "data", "perf"]

# Global timezone setting for log timestamps (None = local time)
_log_timezone: Optional[ZoneInfo] = None

# Module path -> category routing. More specific paths come first.
MODULE_ROUTING: List[tuple[str, str]] = [
    ("cityscape.domain.layout", "layout"),
    ("cityscape.domain.encoding", "encoding"),
    ("cityscape.domain.render", "render"),
    ("cityscape.infrastructure.adapters", "presentation"),
    ("cityscape.tui", "presentation"),
    ("cityscape.infrastructure.sources", "data"),
    ("cityscape.models", "data"),
    ("cityscape.utils.perf_logger", "perf"),
    ("cityscape", "system"),
    ("config", "system"),
]


def get_category_for_module(module_name: str) -> str:
    """
    Determine the log category for a given module name.

    Args:
        module_name: Full module path (e.g., "cityscape.domain.layout.partitioner").

    Returns:
        Category name; "system" when no prefix matches.
    """
    for prefix, category in MODULE_ROUTING:
        if module_name == prefix or module_name.startswith(prefix + "."):
            return category
    return "system"


# =============================================================================
# TIMEZONE SUPPORT
# =============================================================================

def set_log_timezone(tz: Optional[str] = None) -> None:
    """
    Set the timezone for log timestamps.

    Args:
        tz: Timezone name (e.g., "America/New_York", "UTC").
            None or "local" uses local system time.
    """
    global _log_timezone
    if tz is None or tz == "local":
        _log_timezone = None
    else:
        _log_timezone = ZoneInfo(tz)


def get_log_timezone() -> Optional[ZoneInfo]:
    """Get the current log timezone setting."""
    return _log_timezone


def get_current_timestamp() -> str:
    """ISO-format timestamp in the configured log timezone."""
    if _log_timezone is not None:
        return datetime.now(_log_timezone).isoformat()
    return datetime.now().isoformat()


# =============================================================================
# FORMATTERS
# =============================================================================

class JSONFormatter(logging.Formatter):
    """
    Single-line JSON formatter.

    Fields: ts, level, cat, cycle, msg, plus "data" when the record carries
    an extra ``data`` attribute and "exception" when exc_info is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": get_current_timestamp(),
            "level": record.levelname,
            "cat": self._get_category(record.name),
            "cycle": get_cycle_id(),
            "msg": record.getMessage(),
        }

        if hasattr(record, "data") and record.data:
            log_entry["data"] = record.data

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)

    def _get_category(self, logger_name: str) -> str:
        parts = logger_name.split(".")
        if len(parts) >= 2 and parts[0] == ROOT_LOGGER_NAME and parts[1] in CATEGORIES:
            return parts[1]
        return "system"


class ConsoleFormatter(logging.Formatter):
    """
    Console formatter with cycle ID and color support.

    Format: [LEVEL] [cycle] message
    """

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        cycle_id = get_cycle_id()
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            return f"{color}[{level:7}]{self.RESET} [{cycle_id}] {record.getMessage()}"
        return f"[{level:7}] [{cycle_id}] {record.getMessage()}"


# =============================================================================
# LOGGER FACTORY
# =============================================================================

def get_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for the given module, routed to its category logger.

    Args:
        module_name: Module name (typically __name__).

    Returns:
        The "cityscape.<category>" logger.

    Example:
        from cityscape.utils.logging_setup import get_logger
        logger = get_logger(__name__)
        logger.info("Partitioning...")
    """
    category = get_category_for_module(module_name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{category}")


# =============================================================================
# SETUP
# =============================================================================

def setup_logging(config: LoggingConfig, use_colors: bool = True) -> logging.Logger:
    """
    Configure the "cityscape" root logger from a LoggingConfig.

    Category loggers propagate into it, so one set of handlers covers all of
    them. Calling this again replaces the previous handlers.

    Returns:
        The configured root logger.
    """
    set_log_timezone(config.timezone)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    if config.json:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = ConsoleFormatter(use_colors=use_colors)

    if config.console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(filename=str(log_path), mode="a", encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def get_category_loggers() -> Dict[str, logging.Logger]:
    """All category loggers, keyed by category name."""
    return {c: logging.getLogger(f"{ROOT_LOGGER_NAME}.{c}") for c in CATEGORIES}


def flush_all_loggers() -> None:
    """Flush all handlers on the root logger."""
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        handler.flush()
