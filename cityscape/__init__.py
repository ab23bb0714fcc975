"""Hierarchical visual encoding engine for market treemaps and cityscapes."""

__version__ = "0.1.0"
