"""Pytest configuration and fixtures."""

import logging
from typing import Iterator

import pytest

from config.models import AppConfig, LayoutConfig
from cityscape.models.market_node import MarketNode


@pytest.fixture(autouse=True)
def restore_cityscape_logger() -> Iterator[None]:
    """Undo setup_logging side effects so caplog keeps seeing records."""
    logger = logging.getLogger("cityscape")
    handlers = logger.handlers[:]
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            handler.close()
            logger.removeHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def app_config() -> AppConfig:
    """Default application config."""
    return AppConfig()


@pytest.fixture
def unpadded_layout() -> LayoutConfig:
    """Layout config with no padding (exact tiling)."""
    return LayoutConfig(extent=100.0, padding=0.0)


@pytest.fixture
def two_leaf_tree() -> MarketNode:
    """Root with A(300) and B(100)."""
    return MarketNode(
        name="Root",
        ticker="ROOT",
        weight=12345.0,
        children=(
            MarketNode(name="Alpha", ticker="A", weight=300.0),
            MarketNode(name="Beta", ticker="B", weight=100.0),
        ),
    )


@pytest.fixture
def market_tree() -> MarketNode:
    """Two sectors, mixed attributes, one malformed leaf."""
    tech = MarketNode(
        name="Technology",
        ticker="TECH",
        children=(
            MarketNode(
                name="Apple Inc.",
                ticker="AAPL",
                weight=3.0e12,
                performance_ratio=0.04,
                pe_ratio=29.5,
                pb_ratio=45.0,
                dividend_yield=0.005,
                debt_to_equity=1.8,
                relative_volume=1.2,
            ),
            MarketNode(
                name="Microsoft",
                ticker="MSFT",
                weight=2.8e12,
                performance_ratio=-0.005,
                pe_ratio=35.0,
                pb_ratio=12.0,
                dividend_yield=0.008,
                debt_to_equity=0.4,
                relative_volume=0.9,
            ),
            MarketNode(name="Nvidia", ticker="NVDA", weight=1.2e12, performance_ratio=0.021, pe_ratio=200.0),
        ),
    )
    finance = MarketNode(
        name="Finance",
        ticker="FIN",
        children=(
            MarketNode(
                name="JPMorgan",
                ticker="JPM",
                weight=5.0e11,
                performance_ratio=-0.035,
                pe_ratio=11.0,
                dividend_yield=0.025,
                debt_to_equity=2.5,
            ),
            MarketNode(name="Visa", ticker="V", weight=4.5e11, performance_ratio=0.0),
            MarketNode(name="Broken", ticker="BRK", weight=float("nan")),
            MarketNode(name="Shorted", ticker="SHRT", weight=-10.0),
        ),
    )
    return MarketNode(name="S&P 500", ticker="SPX", weight=1.0, children=(tech, finance))
