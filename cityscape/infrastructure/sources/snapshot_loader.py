"""
Tree builders and loaders.

- ``load_tree``: nested JSON or YAML file -> MarketNode
- ``build_market_tree``: flat pandas frame (one row per instrument) ->
  market -> sector -> instrument tree
- ``apply_snapshot_rows``: merge price-snapshot rows into an existing tree
"""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
import yaml

from ...domain.exceptions import DataSourceError
from ...models.market_node import ATTRIBUTE_FIELDS, FIELD_ALIASES, MarketNode, finite_or_none
from ...utils.logging_setup import get_logger
from ...utils.perf_logger import log_timing

logger = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
REQUIRED_COLUMNS = ("ticker", "sector")


def load_tree(path: Union[str, Path]) -> MarketNode:
    """
    Read a nested tree file (JSON, or YAML by suffix).

    Raises:
        DataSourceError: If the file is missing, unparsable or not a mapping.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as e:
        raise DataSourceError(f"Cannot read tree file {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DataSourceError(f"Cannot parse tree file {path}: {e}") from e

    if not isinstance(data, Mapping):
        raise DataSourceError(f"Tree file {path} must contain a mapping at the top level")

    tree = MarketNode.from_dict(data)
    logger.info(f"Loaded tree {tree.ticker!r} from {path} ({sum(1 for _ in tree.iter_leaves())} leaves)")
    return tree


def build_market_tree(
    frame: pd.DataFrame,
    name: str = "Market",
    ticker: str = "MKT",
) -> MarketNode:
    """
    Group a flat instrument frame into market -> sector -> instrument.

    Required columns: ticker, sector. Weight comes from ``weight`` /
    ``market_cap`` / ``value`` / ``marketCap``; attributes accept the same
    aliases as ``MarketNode.from_dict``. Sectors keep first-appearance order.

    Raises:
        DataSourceError: If a required column is missing.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise DataSourceError(f"Instrument frame missing columns: {', '.join(missing)}")

    columns = {c: FIELD_ALIASES.get(c, c) for c in frame.columns}
    renamed = frame.rename(columns=columns)
    # Several aliases can land on one field; keep the first
    renamed = renamed.loc[:, ~renamed.columns.duplicated()]

    with log_timing("build_market_tree", extra={"rows": len(renamed)}):
        sectors: List[MarketNode] = []
        for sector, rows in renamed.groupby("sector", sort=False):
            leaves = tuple(_row_to_leaf(row) for row in rows.to_dict("records"))
            sector_name = str(sector)
            sectors.append(
                MarketNode(
                    name=sector_name,
                    ticker=sector_name.upper(),
                    weight=sum(leaf.layout_weight for leaf in leaves),
                    children=leaves,
                )
            )

    tree = MarketNode(
        name=name,
        ticker=ticker,
        weight=sum(s.weight for s in sectors),
        children=tuple(sectors),
    )
    logger.debug(f"Built tree {ticker!r}: {len(sectors)} sectors, {len(renamed)} instruments")
    return tree


def _row_to_leaf(row: Mapping[str, Any]) -> MarketNode:
    ticker = str(row["ticker"])
    values: Dict[str, Any] = {field: finite_or_none(row.get(field)) for field in ATTRIBUTE_FIELDS}
    weight = finite_or_none(row.get("weight"))
    raw_name = row.get("name")
    name = str(raw_name) if isinstance(raw_name, str) and raw_name else ticker
    return MarketNode(name=name, ticker=ticker, weight=weight if weight is not None else 0.0, **values)


def apply_snapshot_rows(tree: MarketNode, rows: Iterable[Mapping[str, Any]]) -> MarketNode:
    """
    New tree with leaf performance replaced from snapshot rows.

    Rows look like {ticker, price, change_percent, last_updated}, with
    change_percent as a fraction. Only ``performance_ratio`` changes;
    fundamentals are untouched, unknown tickers are ignored and rows
    without a ticker or a finite change are skipped. The input tree is not
    modified; unchanged subtrees are shared with it.
    """
    changes: Dict[str, float] = {}
    skipped = 0
    for row in rows:
        ticker = row.get("ticker")
        change = finite_or_none(row.get("change_percent"))
        if not ticker or change is None:
            skipped += 1
            continue
        changes[str(ticker)] = change

    if skipped:
        logger.debug(f"Skipped {skipped} malformed snapshot rows")

    updated = _merge(tree, changes)
    logger.info(f"Applied snapshot: {len(changes)} rows")
    return updated if updated is not None else tree


def _merge(node: MarketNode, changes: Mapping[str, float]) -> Optional[MarketNode]:
    """Updated copy of ``node``, or None when nothing beneath it changed."""
    if node.is_leaf:
        if node.ticker in changes:
            return replace(node, performance_ratio=changes[node.ticker])
        return None

    children = []
    touched = False
    for child in node.children:
        merged = _merge(child, changes)
        touched = touched or merged is not None
        children.append(merged if merged is not None else child)
    return node.with_children(tuple(children)) if touched else None
