"""Configuration data models."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, Tuple


@dataclass(frozen=True)
class MetricDomain:
    """Clamp domain for a single metric (inclusive bounds)."""
    min: float
    max: float


@dataclass(frozen=True)
class LayoutConfig:
    """Space partitioner configuration."""
    extent: float = 100.0
    padding: float = 0.003  # Fraction of the cell's shorter side, inset per edge
    epsilon: float = 1e-6  # Minimum side length after padding


@dataclass(frozen=True)
class EncodingConfig:
    """Metric codec configuration."""
    height_range: Tuple[float, float] = (1.0, 20.0)
    domains: Dict[str, MetricDomain] = field(default_factory=lambda: {
        "pe": MetricDomain(5.0, 60.0),
        "pb": MetricDomain(0.5, 10.0),
        "yield": MetricDomain(0.0, 8.0),  # Dividend yield in percent
        "relative_volume": MetricDomain(0.5, 10.0),
    })
    market_cap_domain: MetricDomain = MetricDomain(1e9, 2e12)
    market_cap_height_range: Tuple[float, float] = (2.0, 20.0)
    market_cap_scale: str = "linear"  # "linear" or "log"
    default_height_metric: str = "pe"
    default_color_metric: str = "performance"

    # Performance bands (fractional change)
    medium_threshold: float = 0.01
    strong_threshold: float = 0.03
    palette: Dict[str, str] = field(default_factory=lambda: {
        "strong_positive": "#16a34a",
        "medium_positive": "#22c55e",
        "light_positive": "#4ade80",
        "light_negative": "#f87171",
        "medium_negative": "#ef4444",
        "strong_negative": "#dc2626",
        "neutral": "#475569",
    })

    # Yield: teal hue, lightness ramps with yield
    yield_hue: float = 0.5
    yield_saturation: float = 1.0
    yield_domain: MetricDomain = MetricDomain(0.0, 0.08)
    yield_lightness: Tuple[float, float] = (0.1, 0.9)

    # Debt: blue (low) -> red (high)
    debt_domain: MetricDomain = MetricDomain(0.0, 3.0)
    debt_hue: Tuple[float, float] = (0.6, 0.0)
    debt_saturation: float = 0.8
    debt_lightness: float = 0.5


@dataclass(frozen=True)
class RenderConfig:
    """Render-state deriver configuration."""
    shrink: float = 0.9  # Visual gap factor applied to block width/depth


@dataclass(frozen=True)
class PresentationConfig:
    """Presentation adapter policy."""
    min_label_size: float = 3.0  # Both width and depth must reach this
    label_font_divisor: float = 3.5
    hover_lift: float = 1.0
    nested_levels: int = 2
    header_height: float = 2.4


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    json: bool = False
    file: str = ""
    console: bool = True
    timezone: str = "local"  # Timezone for log timestamps (e.g., "UTC" or "local")


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    encoding: EncodingConfig = field(default_factory=EncodingConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    presentation: PresentationConfig = field(default_factory=PresentationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    raw: Dict[str, Any] = field(default_factory=dict)  # Raw merged config dict
