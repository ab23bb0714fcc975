"""Metric selections for the height and color channels."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from ...utils.logging_setup import get_logger

logger = get_logger(__name__)


class HeightMetric(Enum):
    """Metric used to extrude blocks."""

    PE = "pe"
    PB = "pb"
    YIELD = "yield"
    MARKET_CAP = "market_cap"  # Size-only mode: height follows the leaf weight
    RELATIVE_VOLUME = "relative_volume"

    @classmethod
    def parse(
        cls,
        value: Union[str, "HeightMetric", None],
        default: Union[str, "HeightMetric"] = "pe",
    ) -> "HeightMetric":
        """Resolve a selection, falling back to ``default`` with a warning."""
        return _parse(cls, value, default)


class ColorMetric(Enum):
    """Metric used to color blocks."""

    PERFORMANCE = "performance"
    YIELD = "yield"
    DEBT = "debt"

    @classmethod
    def parse(
        cls,
        value: Union[str, "ColorMetric", None],
        default: Union[str, "ColorMetric"] = "performance",
    ) -> "ColorMetric":
        """Resolve a selection, falling back to ``default`` with a warning."""
        return _parse(cls, value, default)


class PerformanceTier(Enum):
    """Discrete heat bands for the performance color scale."""

    STRONG_POSITIVE = "strong_positive"
    MEDIUM_POSITIVE = "medium_positive"
    LIGHT_POSITIVE = "light_positive"
    LIGHT_NEGATIVE = "light_negative"
    MEDIUM_NEGATIVE = "medium_negative"
    STRONG_NEGATIVE = "strong_negative"
    NEUTRAL = "neutral"  # Performance unknown


def _lookup(cls, value) -> Optional[Enum]:
    if isinstance(value, cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for member in cls:
            if member.value == key or member.name.lower() == key:
                return member
    return None


def _parse(cls, value, default):
    member = _lookup(cls, value)
    if member is not None:
        return member

    fallback = _lookup(cls, default)
    if fallback is None:
        fallback = next(iter(cls))
    logger.warning(
        f"Unsupported {cls.__name__} {value!r}; falling back to {fallback.value!r}"
    )
    return fallback
