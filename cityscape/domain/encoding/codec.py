"""
Metric Codec - financial attributes -> bounded visual channels.

Two independent pure function families:

- ``height_value``: read the metric from the node (absent -> 0), clamp it to
  the metric's configured domain, then map linearly onto the height range.
  Ratios such as P/E are unbounded; the clamp keeps one outlier from
  flattening every other block. Domains are fixed policy, not derived from
  the current dataset.
- ``color_value``: performance uses discrete heat bands; yield and debt use
  a continuous HSL ramp over a clamped domain.

Both are total (every node yields a value) and deterministic, so results
can be memoized by (node, metric).
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Dict, Optional, Tuple, Union

from config.models import EncodingConfig, MetricDomain

from ...models.color import Color
from ...models.market_node import MarketNode
from ..exceptions import ConfigurationError
from .metrics import ColorMetric, HeightMetric, PerformanceTier

DEFAULT_ENCODING = EncodingConfig()

# Height metric -> (attribute, multiplier applied before clamping)
HEIGHT_ATTRIBUTES: Dict[HeightMetric, Tuple[str, float]] = {
    HeightMetric.PE: ("pe_ratio", 1.0),
    HeightMetric.PB: ("pb_ratio", 1.0),
    HeightMetric.YIELD: ("dividend_yield", 100.0),  # Fraction -> percent
    HeightMetric.RELATIVE_VOLUME: ("relative_volume", 1.0),
}

COLOR_ATTRIBUTES: Dict[ColorMetric, str] = {
    ColorMetric.PERFORMANCE: "performance_ratio",
    ColorMetric.YIELD: "dividend_yield",
    ColorMetric.DEBT: "debt_to_equity",
}


# =============================================================================
# Numeric helpers
# =============================================================================

def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def map_linear(value: float, in_low: float, in_high: float, out_low: float, out_high: float) -> float:
    """Linear remap of ``value`` from [in_low, in_high] to [out_low, out_high]."""
    return out_low + (value - in_low) * (out_high - out_low) / (in_high - in_low)


def clamped_map(value: float, domain: MetricDomain, out_range: Tuple[float, float]) -> float:
    """
    Clamp to ``domain`` then remap onto ``out_range`` (which may descend).

    Raises:
        ConfigurationError: If the domain is empty or inverted.
    """
    if not domain.min < domain.max:
        raise ConfigurationError(f"Metric domain must satisfy min < max (got: {domain!r})")
    bounded = clamp(value, domain.min, domain.max)
    return map_linear(bounded, domain.min, domain.max, out_range[0], out_range[1])


# =============================================================================
# Height
# =============================================================================

def height_source(node: MarketNode, metric: HeightMetric) -> Optional[float]:
    """Raw value behind the height channel (None when the attribute is absent)."""
    if metric is HeightMetric.MARKET_CAP:
        return node.layout_weight
    attribute, _ = HEIGHT_ATTRIBUTES[metric]
    return node.attribute(attribute)


def height_value(
    node: MarketNode,
    metric: Union[HeightMetric, str],
    config: EncodingConfig = DEFAULT_ENCODING,
) -> float:
    """
    Block height for ``node`` under ``metric``.

    Market-cap mode maps the leaf weight on its own fixed domain; every
    other metric goes through the clamped attribute path.
    """
    metric = HeightMetric.parse(metric, config.default_height_metric)
    if metric is HeightMetric.MARKET_CAP:
        return market_cap_height(node.layout_weight, config)

    attribute, multiplier = HEIGHT_ATTRIBUTES[metric]
    raw = node.attribute(attribute)
    value = (raw if raw is not None else 0.0) * multiplier
    domain = config.domains.get(metric.value)
    if domain is None:
        raise ConfigurationError(f"No clamp domain configured for height metric {metric.value!r}")
    return clamped_map(value, domain, config.height_range)


def market_cap_height(weight: float, config: EncodingConfig = DEFAULT_ENCODING) -> float:
    """
    Height for size-only mode.

    Uses the absolute market-cap domain so heights stay comparable across
    refreshes; weights outside the domain pin to the range ends.
    """
    domain = config.market_cap_domain
    bounded = clamp(weight, domain.min, domain.max)
    if config.market_cap_scale == "log":
        low, high = math.log10(domain.min), math.log10(domain.max)
        return map_linear(math.log10(bounded), low, high, *config.market_cap_height_range)
    return map_linear(bounded, domain.min, domain.max, *config.market_cap_height_range)


# =============================================================================
# Color
# =============================================================================

def performance_tier(ratio: Optional[float], config: EncodingConfig = DEFAULT_ENCODING) -> PerformanceTier:
    """
    Heat band for a signed fractional change.

    Bands (defaults): > 3% strong, > 1% medium, otherwise light; mirrored for
    losses. Zero counts as a light gain; an unknown change is neutral.
    """
    if ratio is None:
        return PerformanceTier.NEUTRAL
    if ratio >= 0:
        if ratio > config.strong_threshold:
            return PerformanceTier.STRONG_POSITIVE
        if ratio > config.medium_threshold:
            return PerformanceTier.MEDIUM_POSITIVE
        return PerformanceTier.LIGHT_POSITIVE
    if ratio < -config.strong_threshold:
        return PerformanceTier.STRONG_NEGATIVE
    if ratio < -config.medium_threshold:
        return PerformanceTier.MEDIUM_NEGATIVE
    return PerformanceTier.LIGHT_NEGATIVE


def color_source(node: MarketNode, metric: ColorMetric) -> Optional[float]:
    """Raw value behind the color channel (None when the attribute is absent)."""
    return node.attribute(COLOR_ATTRIBUTES[metric])


def color_value(
    node: MarketNode,
    metric: Union[ColorMetric, str],
    config: EncodingConfig = DEFAULT_ENCODING,
) -> Color:
    """Block color for ``node`` under ``metric``."""
    metric = ColorMetric.parse(metric, config.default_color_metric)

    if metric is ColorMetric.PERFORMANCE:
        tier = performance_tier(node.attribute("performance_ratio"), config)
        return palette_color(config.palette[tier.value])

    if metric is ColorMetric.YIELD:
        dividend_yield = node.attribute("dividend_yield") or 0.0
        lightness = clamped_map(dividend_yield, config.yield_domain, config.yield_lightness)
        return Color.from_hsl(config.yield_hue, config.yield_saturation, lightness)

    debt = node.attribute("debt_to_equity") or 0.0
    hue = clamped_map(debt, config.debt_domain, config.debt_hue)
    return Color.from_hsl(hue, config.debt_saturation, config.debt_lightness)


@lru_cache(maxsize=64)
def palette_color(hex_color: str) -> Color:
    return Color.from_hex(hex_color)
