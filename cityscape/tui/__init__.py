"""Terminal views."""

from .heatmap_panel import rasterize, render_heatmap

__all__ = ["rasterize", "render_heatmap"]
