"""
Squarified treemap primitive.

Lays out a list of weights (already sorted, largest first) inside one
rectangle. Rows are placed along the shorter side of the remaining space and
grow while adding the next item does not worsen the row's worst aspect
ratio (Bruls, Huizing, van Wijk).

The last row always takes the full remaining thickness and the last cell of
each row ends exactly on the row's far edge, so cells tile the rectangle
without floating-point gaps.
"""

from __future__ import annotations

from typing import List, Sequence

from ...models.layout import LayoutRect


def worst_ratio(row: Sequence[float], side: float) -> float:
    """
    Worst (largest) aspect ratio of a row of areas laid along ``side``.

    Returns inf for an empty row or a degenerate side.
    """
    if not row or side <= 0:
        return float("inf")
    row_area = sum(row)
    if row_area <= 0:
        return float("inf")
    side_sq = side * side
    area_sq = row_area * row_area
    return max(side_sq * max(row) / area_sq, area_sq / (side_sq * min(row)))


def squarify(values: Sequence[float], rect: LayoutRect) -> List[LayoutRect]:
    """
    Partition ``rect`` into one cell per value, areas proportional to values.

    Args:
        values: Positive weights, sorted descending.
        rect: Box to fill.

    Returns:
        Cells in the same order as ``values``; empty when there is nothing
        to lay out or the box has no area.
    """
    total = sum(values)
    if not values or total <= 0 or rect.width <= 0 or rect.depth <= 0:
        return []

    scale = rect.area / total
    areas = [v * scale for v in values]

    x0, y0, x1, y1 = rect.x0, rect.y0, rect.x1, rect.y1
    cells: List[LayoutRect] = []
    i = 0
    n = len(areas)

    while i < n:
        # Wide remaining space -> place a column on the left; tall -> a row on top
        is_horizontal = (x1 - x0) > (y1 - y0)
        side = (y1 - y0) if is_horizontal else (x1 - x0)

        row = [areas[i]]
        j = i + 1
        while j < n and worst_ratio(row + [areas[j]], side) <= worst_ratio(row, side):
            row.append(areas[j])
            j += 1

        row_area = sum(row)
        is_last_row = j == n

        if is_horizontal:
            far = x1 if is_last_row else min(x0 + row_area / side, x1)
            for lo, hi in _split_span(row, row_area, y0, y1):
                cells.append(LayoutRect(x0, lo, far, hi))
            x0 = far
        else:
            far = y1 if is_last_row else min(y0 + row_area / side, y1)
            for lo, hi in _split_span(row, row_area, x0, x1):
                cells.append(LayoutRect(lo, y0, hi, far))
            y0 = far

        i = j

    return cells


def _split_span(row: Sequence[float], row_area: float, low: float, high: float) -> List[tuple]:
    """Split [low, high] proportionally to the row's areas; last piece ends at high."""
    spans = []
    length = high - low
    cursor = low
    for k, area in enumerate(row):
        end = high if k == len(row) - 1 else cursor + length * area / row_area
        spans.append((cursor, end))
        cursor = end
    return spans
