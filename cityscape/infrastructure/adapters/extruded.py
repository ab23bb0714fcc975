"""
Extruded (3D) adapter - one instanced box per EncodedNode.

Instance ``i`` of the mesh is ``nodes[i]``; a raycast that reports an
instance id resolves back to its node by position. Transforms are stored
as column-vector 4x4 matrices (translation in the last column), the layout
used by instanced-mesh renderers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from config.models import PresentationConfig

from ...models.encoded_node import EncodedNode
from ...utils.logging_setup import get_logger
from .interaction import HoverAdapter
from .labels import hover_text, label_font_size, should_label

logger = get_logger(__name__)

ROOF_OFFSET = 0.1  # Roof labels sit just above the block top
ROOF_ROTATION = (-math.pi / 2, 0.0, 0.0)  # Flat on the roof


@dataclass(frozen=True)
class RoofLabel:
    index: int
    text: str
    position: Tuple[float, float, float]
    font_size: float
    rotation: Tuple[float, float, float] = ROOF_ROTATION


@dataclass(frozen=True)
class HoverLabel:
    """Billboard label floating above the hovered block."""

    index: int
    text: str
    position: Tuple[float, float, float]


@dataclass(frozen=True)
class ExtrudedScene:
    matrices: np.ndarray  # (n, 4, 4) float64
    colors: np.ndarray  # (n, 3) float32, linear 0..1
    roof_labels: Tuple[RoofLabel, ...]
    hover: Optional[HoverLabel] = None

    @property
    def count(self) -> int:
        return int(self.matrices.shape[0])


def instance_matrices(nodes: Sequence[EncodedNode]) -> np.ndarray:
    """Scale-then-translate transform per node."""
    count = len(nodes)
    positions = np.array([n.placement.position for n in nodes], dtype=np.float64).reshape(count, 3)
    scales = np.array([n.placement.scale for n in nodes], dtype=np.float64).reshape(count, 3)

    matrices = np.zeros((count, 4, 4), dtype=np.float64)
    for axis in range(3):
        matrices[:, axis, axis] = scales[:, axis]
    matrices[:, :3, 3] = positions
    matrices[:, 3, 3] = 1.0
    return matrices


def instance_colors(nodes: Sequence[EncodedNode]) -> np.ndarray:
    return np.array([n.color.rgb for n in nodes], dtype=np.float32).reshape(len(nodes), 3)


class ExtrudedAdapter(HoverAdapter):
    """
    3D cityscape view.

    Usage:
        adapter = ExtrudedAdapter(config.presentation)
        scene = adapter.render(engine.encode())
        adapter.handle(PointerEvent(PointerKind.ENTER, instance_id=7))
        label = adapter.hover_label()
    """

    def __init__(self, config: Optional[PresentationConfig] = None) -> None:
        super().__init__()
        self._config = config or PresentationConfig()
        self._matrices = np.zeros((0, 4, 4), dtype=np.float64)
        self._colors = np.zeros((0, 3), dtype=np.float32)
        self._roof_labels: Tuple[RoofLabel, ...] = ()

    @property
    def matrices(self) -> np.ndarray:
        return self._matrices

    def render(self, nodes: Sequence[EncodedNode]) -> ExtrudedScene:
        self._hover.bind(nodes)
        nodes = self._hover.nodes
        self._matrices = instance_matrices(nodes)
        self._colors = instance_colors(nodes)
        self._roof_labels = tuple(
            self._roof_label(position, node)
            for position, node in enumerate(nodes)
            if should_label(node.rect, self._config.min_label_size)
        )
        logger.debug(
            f"Extruded render: {len(nodes)} instances, {len(self._roof_labels)} roof labels"
        )
        return self.scene()

    def scene(self) -> ExtrudedScene:
        return ExtrudedScene(self._matrices, self._colors, self._roof_labels, self.hover_label())

    def _roof_label(self, position: int, node: EncodedNode) -> RoofLabel:
        x, _, z = node.placement.position
        return RoofLabel(
            index=position,
            text=node.ticker,
            position=(x, node.height_value + ROOF_OFFSET, z),
            font_size=label_font_size(node.rect, self._config.label_font_divisor),
        )

    def hover_label(self) -> Optional[HoverLabel]:
        """Label for the active instance, placed from its instance matrix."""
        index = self._hover.active_index
        if index is None:
            return None
        matrix = self._matrices[index]
        x, y, z = (float(v) for v in matrix[:3, 3])
        height = float(np.linalg.norm(matrix[:3, 1]))
        return HoverLabel(
            index=index,
            text=hover_text(self._hover.nodes[index]),
            position=(x, y + height / 2 + self._config.hover_lift, z),
        )

