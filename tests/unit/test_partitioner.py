"""
Unit tests for the space partitioner.

Tests:
- Two-leaf example split
- Area proportionality and non-overlap on generated trees
- Deterministic ordering
- Malformed weights, empty trees and single-leaf trees
- Configuration misuse
"""

import itertools
import math

import pytest

from config.models import LayoutConfig
from cityscape.domain.exceptions import ConfigurationError
from cityscape.domain.layout import partition, partition_tree, squarify, worst_ratio
from cityscape.infrastructure.sources.mock_data import generate_market_tree
from cityscape.models.layout import LayoutRect
from cityscape.models.market_node import MarketNode

REL_TOL = 1e-6


def _children_areas(layout, group):
    leaf_area = sum(e.rect.area for e in layout.leaves if e.path == group.key)
    group_area = sum(g.rect.area for g in layout.groups if g.path == group.key)
    return leaf_area + group_area


class TestExampleSplit:
    """Tests for the A=300 / B=100 scenario."""

    def test_tiles_full_square(self, two_leaf_tree, unpadded_layout) -> None:
        """A and B cover the whole 100x100 extent."""
        entries = partition(two_leaf_tree, unpadded_layout)

        assert [e.leaf.ticker for e in entries] == ["A", "B"]
        total = sum(e.rect.area for e in entries)
        assert total == pytest.approx(100.0 * 100.0, rel=REL_TOL)

    def test_three_to_one_ratio(self, two_leaf_tree, unpadded_layout) -> None:
        """A's area is three times B's."""
        a, b = partition(two_leaf_tree, unpadded_layout)
        assert a.rect.area / b.rect.area == pytest.approx(3.0, rel=REL_TOL)

    def test_expected_rectangles(self, two_leaf_tree, unpadded_layout) -> None:
        """Square extent splits top/bottom."""
        a, b = partition(two_leaf_tree, unpadded_layout)
        assert a.rect == LayoutRect(0.0, 0.0, 100.0, 75.0)
        assert b.rect == LayoutRect(0.0, 75.0, 100.0, 100.0)

    def test_root_weight_ignored(self, two_leaf_tree, unpadded_layout) -> None:
        """Group weight does not influence the layout."""
        entries = partition(two_leaf_tree, unpadded_layout)
        assert sum(e.weight for e in entries) == 400.0


class TestAreaProportionality:
    """Tests that children fill their parent's content box by weight."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    @pytest.mark.parametrize("padding", [0.0, 0.003, 0.02])
    def test_children_fill_content_box(self, seed, padding) -> None:
        """Sum of child cells equals the parent's padded box."""
        layout = partition_tree(generate_market_tree(seed), LayoutConfig(padding=padding))

        assert layout.groups
        for group in layout.groups:
            assert _children_areas(layout, group) == pytest.approx(group.content.area, rel=REL_TOL)

    @pytest.mark.parametrize("seed", [3, 11])
    def test_sibling_area_per_weight_is_constant(self, seed, unpadded_layout) -> None:
        """Within one parent, area / weight is the same for every leaf."""
        layout = partition_tree(generate_market_tree(seed), unpadded_layout)

        for key, entries in itertools.groupby(layout.leaves, key=lambda e: e.path):
            ratios = [e.rect.area / e.weight for e in entries]
            for ratio in ratios:
                assert ratio == pytest.approx(ratios[0], rel=REL_TOL)

    def test_padding_separates_groups(self, market_tree) -> None:
        """Leaf cells lie inside their group's content box."""
        layout = partition_tree(market_tree, LayoutConfig(padding=0.01))
        content = {g.key: g.content for g in layout.groups}

        for entry in layout.leaves:
            box = content[entry.path]
            assert box.x0 - 1e-9 <= entry.rect.x0 and entry.rect.x1 <= box.x1 + 1e-9
            assert box.y0 - 1e-9 <= entry.rect.y0 and entry.rect.y1 <= box.y1 + 1e-9


class TestNonOverlap:
    """Tests that leaf rectangles never overlap."""

    @pytest.mark.parametrize("seed", [2, 5, 99])
    @pytest.mark.parametrize("padding", [0.0, 0.003])
    def test_leaves_disjoint(self, seed, padding) -> None:
        """No pair of leaf cells shares interior area."""
        entries = partition(generate_market_tree(seed), LayoutConfig(padding=padding))

        for first, second in itertools.combinations(entries, 2):
            assert first.rect.overlap_area(second.rect) <= 1e-9

    def test_leaves_inside_extent(self, market_tree) -> None:
        """Every cell lies within [0, E] x [0, E]."""
        for entry in partition(market_tree):
            rect = entry.rect
            assert 0.0 <= rect.x0 <= rect.x1 <= 100.0 + 1e-9
            assert 0.0 <= rect.y0 <= rect.y1 <= 100.0 + 1e-9


class TestDeterminism:
    """Tests for reproducible ordering."""

    def test_same_tree_same_output(self, market_tree) -> None:
        """Partitioning twice yields identical entries."""
        assert partition(market_tree) == partition(market_tree)

    def test_descending_weight_depth_first(self, market_tree) -> None:
        """Heavier siblings first; leaves grouped by sector."""
        tickers = [e.leaf.ticker for e in partition(market_tree)]
        assert tickers == ["AAPL", "MSFT", "NVDA", "JPM", "V"]

    def test_ties_keep_insertion_order(self, unpadded_layout) -> None:
        """Equal weights are laid out in input order."""
        root = MarketNode(
            name="Root",
            ticker="R",
            children=tuple(MarketNode(name=t, ticker=t, weight=10.0) for t in ("X", "Y", "Z")),
        )
        assert [e.leaf.ticker for e in partition(root, unpadded_layout)] == ["X", "Y", "Z"]

    def test_paths_hold_ancestors(self, market_tree) -> None:
        """Each entry's path is root-first ancestor tickers."""
        entries = {e.leaf.ticker: e for e in partition(market_tree)}
        assert entries["AAPL"].path == ("SPX", "TECH")
        assert entries["V"].path == ("SPX", "FIN")
        assert entries["V"].depth == 2


class TestMalformedAndEdgeCases:
    """Tests for dirty data and degenerate trees."""

    def test_malformed_weights_excluded(self, market_tree) -> None:
        """NaN and negative leaves get no rectangle and no error."""
        layout = partition_tree(market_tree)

        tickers = {e.leaf.ticker for e in layout.leaves}
        assert "BRK" not in tickers
        assert "SHRT" not in tickers
        assert layout.excluded == 2

    def test_infinite_weight_excluded(self, unpadded_layout) -> None:
        """An infinite weight counts as zero."""
        root = MarketNode(
            name="Root",
            ticker="R",
            children=(
                MarketNode(name="Inf", ticker="INF", weight=float("inf")),
                MarketNode(name="Ok", ticker="OK", weight=1.0),
            ),
        )
        entries = partition(root, unpadded_layout)
        assert [e.leaf.ticker for e in entries] == ["OK"]
        assert entries[0].rect.area == pytest.approx(100.0 * 100.0)

    def test_extreme_ratio_drops_collapsed_leaf(self, unpadded_layout) -> None:
        """A sibling too small to get any thickness is excluded, not degenerate."""
        root = MarketNode(
            name="Root",
            ticker="R",
            children=(
                MarketNode(name="Big", ticker="BIG", weight=1e18),
                MarketNode(name="Tiny", ticker="T", weight=1.0),
            ),
        )
        layout = partition_tree(root, unpadded_layout)

        assert [e.leaf.ticker for e in layout.leaves] == ["BIG"]
        assert layout.excluded == 1
        for entry in layout.leaves:
            assert entry.rect.x0 < entry.rect.x1
            assert entry.rect.y0 < entry.rect.y1

    @pytest.mark.parametrize("seed", [4, 8])
    def test_every_cell_has_area(self, seed) -> None:
        """Emitted leaf rectangles always have positive width and depth."""
        for entry in partition(generate_market_tree(seed)):
            assert entry.rect.width > 0
            assert entry.rect.depth > 0

    def test_empty_tree_yields_nothing(self) -> None:
        """All-zero tree is a valid, empty partition."""
        root = MarketNode(
            name="Root",
            ticker="R",
            children=(MarketNode(name="Zero", ticker="Z", weight=0.0),),
        )
        layout = partition_tree(root)
        assert layout.leaves == ()
        assert len(layout) == 0

    def test_group_without_children_yields_nothing(self) -> None:
        """A bare zero-weight root is empty, not an error."""
        assert partition(MarketNode(name="Root", ticker="R")) == ()

    def test_zero_weight_group_gets_no_cell(self, unpadded_layout) -> None:
        """Groups whose leaves are all excluded do not take space."""
        root = MarketNode(
            name="Root",
            ticker="R",
            children=(
                MarketNode(name="Empty", ticker="E", children=(MarketNode(name="z", ticker="Z", weight=0.0),)),
                MarketNode(name="Full", ticker="F", children=(MarketNode(name="a", ticker="A", weight=5.0),)),
            ),
        )
        layout = partition_tree(root, unpadded_layout)
        assert [g.node.ticker for g in layout.groups] == ["R", "F"]
        assert layout.leaves[0].rect.area == pytest.approx(100.0 * 100.0)

    def test_single_leaf_gets_padded_extent(self) -> None:
        """A lone leaf fills the extent minus root padding."""
        config = LayoutConfig(extent=100.0, padding=0.003)
        entries = partition(MarketNode(name="Solo", ticker="S", weight=5.0), config)

        assert len(entries) == 1
        rect = entries[0].rect
        assert rect.x0 == pytest.approx(0.3)
        assert rect.x1 == pytest.approx(99.7)
        assert rect.y0 == pytest.approx(0.3)
        assert rect.y1 == pytest.approx(99.7)
        assert entries[0].path == ()

    def test_degenerate_cell_collapses_to_epsilon(self) -> None:
        """Padding larger than a thin side never inverts the rectangle."""
        rect = LayoutRect(0.0, 0.0, 1e-7, 10.0).inset(1e-3, 1e-6)

        assert rect.width >= 0.0
        assert rect.width <= 1e-6
        assert rect.center[0] == pytest.approx(0.5e-7)
        assert rect.depth == pytest.approx(10.0 - 2e-3)


class TestConfigurationMisuse:
    """Tests that invalid layout parameters fail fast."""

    @pytest.mark.parametrize("extent", [0.0, -5.0, math.nan, math.inf])
    def test_bad_extent_raises(self, market_tree, extent) -> None:
        """Non-positive or non-finite extent is a programming error."""
        with pytest.raises(ConfigurationError):
            partition(market_tree, LayoutConfig(extent=extent))

    @pytest.mark.parametrize("padding", [-0.1, 0.5, 0.9])
    def test_bad_padding_raises(self, market_tree, padding) -> None:
        """Padding outside [0, 0.5) is rejected."""
        with pytest.raises(ConfigurationError):
            partition(market_tree, LayoutConfig(padding=padding))


class TestSquarify:
    """Tests for the squarify primitive."""

    def test_worst_ratio_of_square(self) -> None:
        """A single square cell has ratio 1."""
        assert worst_ratio([25.0], 5.0) == pytest.approx(1.0)

    def test_worst_ratio_empty_row(self) -> None:
        """Empty row or side is infinitely bad."""
        assert worst_ratio([], 5.0) == math.inf
        assert worst_ratio([1.0], 0.0) == math.inf

    def test_empty_input(self) -> None:
        """Nothing to lay out yields no cells."""
        assert squarify([], LayoutRect(0, 0, 10, 10)) == []
        assert squarify([1.0], LayoutRect(0, 0, 0, 10)) == []

    def test_cells_tile_rectangle(self) -> None:
        """Cells cover the box and end on its far edges."""
        rect = LayoutRect(10.0, 20.0, 70.0, 50.0)
        cells = squarify([6.0, 6.0, 4.0, 3.0, 2.0, 2.0, 1.0], rect)

        assert len(cells) == 7
        assert sum(c.area for c in cells) == pytest.approx(rect.area, rel=REL_TOL)
        assert max(c.x1 for c in cells) == rect.x1
        assert max(c.y1 for c in cells) == rect.y1

    def test_single_value_fills_box(self) -> None:
        """One value takes the whole box."""
        rect = LayoutRect(0.0, 0.0, 4.0, 2.0)
        assert squarify([3.0], rect) == [rect]
