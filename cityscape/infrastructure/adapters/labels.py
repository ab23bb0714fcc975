"""
Label and hover text formatting.

Formats:
- color line: "+1.23%" (performance), "Div: 2.10%" (yield), "D/E: 1.40" (debt)
- height line: "P/E: 23.4", "P/B: 3.1", "Yield: 2.10%", "RVol: 1.75x",
  "Cap: $215.0B"
Absent values print as "n/a".
"""

from __future__ import annotations

from typing import List, Optional

from ...models.encoded_node import EncodedNode
from ...models.layout import LayoutRect

MISSING = "n/a"


def should_label(rect: LayoutRect, min_size: float) -> bool:
    """Labels only on rectangles at least ``min_size`` wide and deep."""
    return rect.width >= min_size and rect.depth >= min_size


def label_font_size(rect: LayoutRect, divisor: float) -> float:
    return min(rect.width, rect.depth) / divisor


def format_percent(ratio: Optional[float], signed: bool = True) -> str:
    if ratio is None:
        return MISSING
    return f"{ratio * 100:+.2f}%" if signed else f"{ratio * 100:.2f}%"


def format_market_cap(weight: Optional[float]) -> str:
    if weight is None:
        return MISSING
    return f"${weight / 1e9:.1f}B"


def _fixed(value: Optional[float], digits: int, suffix: str = "") -> str:
    if value is None:
        return MISSING
    return f"{value:.{digits}f}{suffix}"


def color_text(node: EncodedNode) -> str:
    """Value behind the node's color channel."""
    value = node.color_source
    if node.color_metric == "performance":
        return format_percent(value)
    if node.color_metric == "yield":
        return f"Div: {format_percent(value, signed=False)}"
    if node.color_metric == "debt":
        return f"D/E: {_fixed(value, 2)}"
    return MISSING


def height_text(node: EncodedNode) -> str:
    """Value behind the node's height channel."""
    value = node.height_source
    metric = node.height_metric
    if metric == "pe":
        return f"P/E: {_fixed(value, 1)}"
    if metric == "pb":
        return f"P/B: {_fixed(value, 1)}"
    if metric == "yield":
        return f"Yield: {format_percent(value, signed=False)}"
    if metric == "relative_volume":
        return f"RVol: {_fixed(value, 2, 'x')}"
    if metric == "market_cap":
        return f"Cap: {format_market_cap(value)}"
    return MISSING


def hover_text(node: EncodedNode) -> str:
    """Three-line hover label: ticker, color value, height value."""
    return "\n".join((node.ticker, color_text(node), height_text(node)))


def tooltip_lines(node: EncodedNode) -> List[str]:
    """Tooltip block for the 2D views."""
    leaf = node.leaf
    title = f"{node.name} ({node.ticker})" if node.name != node.ticker else node.ticker
    return [
        title,
        f"Market Cap: {format_market_cap(node.weight)}",
        f"Performance: {format_percent(leaf.attribute('performance_ratio'))}",
        f"P/E Ratio: {_fixed(leaf.attribute('pe_ratio'), 1)}",
    ]
