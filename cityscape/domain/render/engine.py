"""
MapEngine - owns the cached (partition, render-state) pair.

Change detection:
- a new tree snapshot (by identity) invalidates the partition and the
  render state
- a new metric selection invalidates only the render state; the cached
  partition is reused

The engine is synchronous. A newer snapshot submitted before the previous
render state was read simply replaces it (last snapshot wins).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from config.config_manager import validate_config
from config.models import AppConfig

from ...models.encoded_node import EncodedNode
from ...models.layout import TreeLayout
from ...models.market_node import MarketNode
from ...utils.logging_setup import get_logger
from ...utils.trace_context import get_cycle_id
from ..encoding.metrics import ColorMetric, HeightMetric
from ..layout.partitioner import partition_tree
from .deriver import derive

logger = get_logger(__name__)


@dataclass
class EngineStats:
    """Counters for cache behaviour."""

    snapshots: int = 0
    partition_runs: int = 0
    derive_runs: int = 0
    render_cache_hits: int = 0


class MapEngine:
    """
    Layout + encoding pipeline for one map.

    Usage:
        engine = MapEngine(config)
        engine.submit(tree)
        nodes = engine.encode("pe", "performance")
        nodes = engine.encode(color_metric="debt")  # partition reused
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        """
        Raises:
            ConfigurationError: If ``config`` fails validation.
        """
        self._config = config or AppConfig()
        validate_config(self._config)
        self._tree: Optional[MarketNode] = None
        self._layout: Optional[TreeLayout] = None
        self._height_metric = HeightMetric.parse(self._config.encoding.default_height_metric)
        self._color_metric = ColorMetric.parse(self._config.encoding.default_color_metric)
        self._render_key: Optional[Tuple[int, HeightMetric, ColorMetric]] = None
        self._render_state: Tuple[EncodedNode, ...] = ()
        self.stats = EngineStats()

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def tree(self) -> Optional[MarketNode]:
        return self._tree

    @property
    def height_metric(self) -> HeightMetric:
        return self._height_metric

    @property
    def color_metric(self) -> ColorMetric:
        return self._color_metric

    def submit(self, tree: MarketNode) -> bool:
        """
        Hand the engine a new tree snapshot.

        Returns:
            False if ``tree`` is the snapshot already held (nothing to redo).
        """
        if tree is self._tree:
            return False
        self._tree = tree
        self._layout = None
        self._render_key = None
        self._render_state = ()
        self.stats.snapshots += 1
        logger.info(f"[{get_cycle_id()}] New tree snapshot {tree.ticker!r}")
        return True

    def select(
        self,
        height_metric: Union[HeightMetric, str, None] = None,
        color_metric: Union[ColorMetric, str, None] = None,
    ) -> Tuple[HeightMetric, ColorMetric]:
        """Change the active metrics; None keeps the current selection."""
        encoding = self._config.encoding
        if height_metric is not None:
            self._height_metric = HeightMetric.parse(height_metric, encoding.default_height_metric)
        if color_metric is not None:
            self._color_metric = ColorMetric.parse(color_metric, encoding.default_color_metric)
        return self._height_metric, self._color_metric

    def layout(self) -> TreeLayout:
        """Partition of the current snapshot (computed once per snapshot)."""
        if self._tree is None:
            return TreeLayout(extent=self._config.layout.extent, leaves=(), groups=())
        if self._layout is None:
            self._layout = partition_tree(self._tree, self._config.layout)
            self.stats.partition_runs += 1
        return self._layout

    def encode(
        self,
        height_metric: Union[HeightMetric, str, None] = None,
        color_metric: Union[ColorMetric, str, None] = None,
    ) -> Tuple[EncodedNode, ...]:
        """
        Render state for the current snapshot and metric selection.

        Passing metrics also makes them the active selection.
        """
        self.select(height_metric, color_metric)
        layout = self.layout()
        key = (id(layout), self._height_metric, self._color_metric)
        if key == self._render_key:
            self.stats.render_cache_hits += 1
            return self._render_state

        self._render_state = derive(
            layout.leaves,
            self._height_metric,
            self._color_metric,
            layout.extent,
            self._config.encoding,
            self._config.render,
        )
        self._render_key = key
        self.stats.derive_runs += 1
        logger.debug(
            f"[{get_cycle_id()}] Derived {len(self._render_state)} nodes "
            f"(height={self._height_metric.value}, color={self._color_metric.value})"
        )
        return self._render_state

    def resolve(self, index: int) -> Optional[EncodedNode]:
        """EncodedNode at ``index`` in the current render state, if any."""
        state = self.encode()
        if 0 <= index < len(state):
            return state[index]
        return None
