"""
Terminal rendering of a planar scene.

Rasterises the flat rectangles onto a character grid: each cell takes the
background color of the block covering it, and block tickers are written
on the block's middle row where they fit.
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

from rich.panel import Panel
from rich.text import Text

from ..infrastructure.adapters.planar import PlanarScene, RectPrimitive

GAP_STYLE = "on #0c0f14"


def _text_color(fill: str) -> str:
    """Black or white, whichever reads better on ``fill``."""
    r, g, b = (int(fill[i:i + 2], 16) for i in (1, 3, 5))
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return "#000000" if luminance > 150 else "#ffffff"


def _span(low: float, high: float, extent: float, cells: int) -> Tuple[int, int]:
    start = int(math.floor(low / extent * cells))
    end = int(math.ceil(high / extent * cells))
    start = min(max(start, 0), cells - 1)
    end = min(max(end, start + 1), cells)
    return start, end


def rasterize(scene: PlanarScene, width: int, height: int) -> List[List[Tuple[str, str]]]:
    """Grid of (char, style) cells, ``height`` rows of ``width`` columns."""
    grid = [[(" ", GAP_STYLE) for _ in range(width)] for _ in range(height)]
    if scene.extent <= 0:
        return grid

    for primitive in scene.primitives:
        _paint(grid, primitive, scene.extent, width, height, primitive.index == scene.active_index)
    return grid


def _paint(
    grid: List[List[Tuple[str, str]]],
    primitive: RectPrimitive,
    extent: float,
    width: int,
    height: int,
    active: bool,
) -> None:
    c0, c1 = _span(primitive.rect.x0, primitive.rect.x1, extent, width)
    r0, r1 = _span(primitive.rect.y0, primitive.rect.y1, extent, height)
    style = f"{_text_color(primitive.fill)} on {primitive.fill}"
    if active:
        style = f"bold reverse {style}"
    for row in range(r0, r1):
        for col in range(c0, c1):
            grid[row][col] = (" ", style)

    if primitive.label is None:
        return
    ticker = primitive.label.split("\n", 1)[0]
    if len(ticker) > c1 - c0:
        return
    row = (r0 + r1 - 1) // 2
    start = c0 + (c1 - c0 - len(ticker)) // 2
    for offset, char in enumerate(ticker):
        grid[row][start + offset] = (char, style)


def render_heatmap(
    scene: PlanarScene,
    width: int = 80,
    height: int = 24,
    title: str = "Market Map",
    subtitle: Optional[str] = None,
) -> Panel:
    """
    Render a planar scene as a rich Panel.

    Args:
        scene: Output of PlanarAdapter.render.
        width: Grid columns.
        height: Grid rows.
    """
    if not scene.primitives:
        return Panel(Text("No data", style="dim"), title=title, border_style="dim")

    text = Text()
    for i, row in enumerate(rasterize(scene, width, height)):
        for char, style in row:
            text.append(char, style=style)
        if i < height - 1:
            text.append("\n")
    return Panel(text, title=title, subtitle=subtitle, border_style="cyan", expand=False)
