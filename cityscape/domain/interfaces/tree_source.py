"""Tree data source protocol (external collaborator)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ...models.market_node import MarketNode


@runtime_checkable
class TreeDataSource(Protocol):
    """
    Producer of complete tree snapshots.

    The engine never awaits anything itself; the caller awaits the source
    and hands the finished snapshot to ``MapEngine.submit``.

    Implementations:
    - MockTreeSource

    Usage:
        tree = await source.fetch_tree()
        engine.submit(tree)
    """

    async def fetch_tree(self) -> MarketNode:
        """
        Fetch a full tree snapshot.

        Raises:
            DataSourceError: If the snapshot cannot be produced.
        """
        ...
