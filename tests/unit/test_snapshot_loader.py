"""
Unit tests for tree loading, frame grouping and snapshot merging.
"""

import json

import pandas as pd
import pytest
import yaml

from cityscape.domain.exceptions import DataSourceError, RecoverableError
from cityscape.infrastructure.sources import apply_snapshot_rows, build_market_tree, load_tree

TREE = {
    "name": "Market",
    "ticker": "MKT",
    "children": [
        {
            "name": "Technology",
            "ticker": "TECH",
            "children": [
                {"name": "Apple", "ticker": "AAPL", "value": 3e12, "performance": 0.01, "pe_ratio": 30},
                {"name": "Microsoft", "ticker": "MSFT", "value": 2.8e12, "performance": -0.02},
            ],
        }
    ],
}


class TestLoadTree:
    """Tests for load_tree()."""

    def test_json(self, tmp_path) -> None:
        """JSON files load into MarketNode trees."""
        path = tmp_path / "tree.json"
        path.write_text(json.dumps(TREE))

        tree = load_tree(path)
        assert tree.ticker == "MKT"
        assert [n.ticker for n in tree.iter_leaves()] == ["AAPL", "MSFT"]
        assert tree.find("AAPL").pe_ratio == 30.0

    def test_yaml(self, tmp_path) -> None:
        """.yaml files go through the YAML parser."""
        path = tmp_path / "tree.yaml"
        path.write_text(yaml.safe_dump(TREE))
        assert load_tree(path).find("MSFT").performance_ratio == -0.02

    def test_missing_file(self, tmp_path) -> None:
        """Missing file raises DataSourceError."""
        with pytest.raises(DataSourceError):
            load_tree(tmp_path / "absent.json")

    def test_bad_json(self, tmp_path) -> None:
        """Unparsable content raises DataSourceError."""
        path = tmp_path / "tree.json"
        path.write_text("{not json")
        with pytest.raises(RecoverableError):
            load_tree(path)

    def test_non_mapping(self, tmp_path) -> None:
        """A top-level list is rejected."""
        path = tmp_path / "tree.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(DataSourceError):
            load_tree(path)


class TestBuildMarketTree:
    """Tests for build_market_tree()."""

    @pytest.fixture
    def frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "ticker": ["JPM", "AAPL", "V", "MSFT"],
                "name": ["JPMorgan", "Apple", None, "Microsoft"],
                "sector": ["Finance", "Technology", "Finance", "Technology"],
                "market_cap": [5e11, 3e12, 4.5e11, 2.8e12],
                "change_percent": [0.01, -0.02, None, 0.005],
                "peRatio": [11.0, 30.0, 28.0, None],
            }
        )

    def test_groups_by_sector(self, frame) -> None:
        """Sectors keep first-appearance order; leaves keep row order."""
        tree = build_market_tree(frame)

        assert tree.ticker == "MKT"
        assert [s.name for s in tree.children] == ["Finance", "Technology"]
        assert [n.ticker for n in tree.iter_leaves()] == ["JPM", "V", "AAPL", "MSFT"]

    def test_aliases_and_missing(self, frame) -> None:
        """Column aliases map to fields; NaN becomes None."""
        tree = build_market_tree(frame)
        aapl = tree.find("AAPL")

        assert aapl.weight == 3e12
        assert aapl.performance_ratio == -0.02
        assert aapl.pe_ratio == 30.0
        assert tree.find("V").performance_ratio is None
        assert tree.find("MSFT").pe_ratio is None
        assert tree.find("V").name == "V"

    def test_sector_weights(self, frame) -> None:
        """Group weights are the sums of their leaves."""
        tree = build_market_tree(frame, name="US", ticker="US")
        assert tree.find("FINANCE").weight == pytest.approx(9.5e11)
        assert tree.weight == pytest.approx(9.5e11 + 5.8e12)

    def test_missing_columns(self) -> None:
        """ticker and sector are required."""
        with pytest.raises(DataSourceError):
            build_market_tree(pd.DataFrame({"ticker": ["A"]}))


class TestApplySnapshotRows:
    """Tests for apply_snapshot_rows()."""

    def test_updates_performance_only(self, market_tree) -> None:
        """change_percent replaces performance; fundamentals untouched."""
        rows = [{"ticker": "AAPL", "price": 190.0, "change_percent": -0.015, "last_updated": "2024-01-09"}]
        updated = apply_snapshot_rows(market_tree, rows)

        aapl = updated.find("AAPL")
        assert aapl.performance_ratio == -0.015
        assert aapl.pe_ratio == 29.5
        assert aapl.weight == 3.0e12

    def test_returns_new_tree(self, market_tree) -> None:
        """Input is not modified; untouched subtrees are shared."""
        updated = apply_snapshot_rows(market_tree, [{"ticker": "JPM", "change_percent": 0.02}])

        assert updated is not market_tree
        assert market_tree.find("JPM").performance_ratio == -0.035
        assert updated.children[0] is market_tree.children[0]

    def test_unknown_and_malformed_rows(self, market_tree) -> None:
        """Unknown tickers and bad rows are ignored."""
        rows = [
            {"ticker": "ZZZZ", "change_percent": 0.5},
            {"ticker": "AAPL", "change_percent": "n/a"},
            {"change_percent": 0.1},
        ]
        assert apply_snapshot_rows(market_tree, rows) is market_tree
