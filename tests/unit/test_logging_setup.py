"""
Unit tests for logging setup, cycle context and perf timing.
"""

import json
import logging

import pytest

from config.models import LoggingConfig
from cityscape.utils import (
    ConsoleFormatter,
    JSONFormatter,
    get_category_for_module,
    get_cycle_id,
    get_logger,
    log_timing,
    new_cycle,
    setup_logging,
    timed,
)
from cityscape.utils.trace_context import NO_CYCLE, get_cycle_counter, reset_cycle_counter


def make_record(name: str = "cityscape.layout", msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)


class TestCategoryRouting:
    """Tests for module -> category routing."""

    @pytest.mark.parametrize(
        "module,category",
        [
            ("cityscape.domain.layout.partitioner", "layout"),
            ("cityscape.domain.encoding.codec", "encoding"),
            ("cityscape.domain.render.engine", "render"),
            ("cityscape.infrastructure.adapters.extruded", "presentation"),
            ("cityscape.tui.heatmap_panel", "presentation"),
            ("cityscape.infrastructure.sources.snapshot_loader", "data"),
            ("cityscape.utils.perf_logger", "perf"),
            ("cityscape.main", "system"),
            ("config.config_manager", "system"),
            ("somewhere.else", "system"),
        ],
    )
    def test_routing(self, module, category) -> None:
        """Prefix table picks the category."""
        assert get_category_for_module(module) == category

    def test_prefix_must_end_at_dot(self) -> None:
        """"cityscape.domain.layoutx" is not the layout package."""
        assert get_category_for_module("cityscape.domain.layoutx") == "system"

    def test_get_logger_name(self) -> None:
        """Loggers are named cityscape.<category>."""
        assert get_logger("cityscape.domain.layout.squarify").name == "cityscape.layout"


class TestCycleContext:
    """Tests for cycle ids."""

    def test_no_cycle(self) -> None:
        """Outside a cycle the placeholder is returned."""
        assert get_cycle_id() == NO_CYCLE

    def test_new_cycle_sets_and_restores(self) -> None:
        """Cycle id is set inside the block and restored after."""
        reset_cycle_counter()
        with new_cycle() as outer:
            assert get_cycle_id() == outer
            assert len(outer) == 6
            with new_cycle() as inner:
                assert get_cycle_id() == inner
            assert get_cycle_id() == outer
        assert get_cycle_id() == NO_CYCLE
        assert get_cycle_counter() == 2


class TestFormatters:
    """Tests for the log formatters."""

    def test_json_formatter(self) -> None:
        """JSON lines carry level, category, cycle and message."""
        record = make_record()
        record.data = {"leaves": 3}
        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["cat"] == "layout"
        assert entry["cycle"] == NO_CYCLE
        assert entry["msg"] == "hello"
        assert entry["data"] == {"leaves": 3}

    def test_json_unknown_category(self) -> None:
        """Foreign logger names fall back to system."""
        entry = json.loads(JSONFormatter().format(make_record(name="other.logger")))
        assert entry["cat"] == "system"

    def test_console_formatter(self) -> None:
        """Plain console line shows level and cycle."""
        with new_cycle() as cycle_id:
            line = ConsoleFormatter(use_colors=False).format(make_record())
        assert line == f"[INFO   ] [{cycle_id}] hello"


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_console_handler_and_level(self) -> None:
        """Console handler installed at the configured level."""
        logger = setup_logging(LoggingConfig(level="WARNING"), use_colors=False)

        assert logger.name == "cityscape"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, ConsoleFormatter)

    def test_reconfigure_replaces_handlers(self) -> None:
        """Calling twice does not stack handlers."""
        setup_logging(LoggingConfig())
        logger = setup_logging(LoggingConfig(json=True))
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_file_handler_writes_json(self, tmp_path) -> None:
        """File output is JSON lines."""
        log_file = tmp_path / "logs" / "cityscape.log"
        setup_logging(LoggingConfig(level="INFO", console=False, file=str(log_file)))

        get_logger("cityscape.domain.render.engine").info("snapshot")
        for handler in logging.getLogger("cityscape").handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["cat"] == "render"
        assert entry["msg"] == "snapshot"


class TestPerfLogging:
    """Tests for log_timing and timed."""

    def test_log_timing_records_duration(self, caplog) -> None:
        """Duration and extra fields are logged on the perf logger."""
        with caplog.at_level(logging.DEBUG, logger="cityscape.perf"):
            with log_timing("partition", extra={"leaves": 4}) as timing:
                timing["excluded"] = 1

        assert timing["duration_ms"] >= 0.0
        record = caplog.records[-1]
        assert record.name == "cityscape.perf"
        assert record.levelno == logging.DEBUG
        assert "partition took" in record.getMessage()
        assert "leaves=4" in record.getMessage()
        assert "excluded=1" in record.getMessage()

    def test_slow_operation_escalates(self, caplog) -> None:
        """Above the warn threshold the level rises."""
        with caplog.at_level(logging.DEBUG, logger="cityscape.perf"):
            with log_timing("derive", warn_threshold_ms=0.0, error_threshold_ms=1e9):
                pass
        assert caplog.records[-1].levelno == logging.WARNING

    def test_timed_decorator(self, caplog) -> None:
        """Decorated calls are timed under the given name."""

        @timed("flat_export")
        def work(x: int) -> int:
            return x * 2

        with caplog.at_level(logging.DEBUG, logger="cityscape.perf"):
            assert work(21) == 42
        assert "flat_export took" in caplog.records[-1].getMessage()
