"""
Market Cityscape - Main Entry Point

Usage:
    python main.py                                   # Planar view of the mock market
    python main.py --view extruded --height pb       # 3D instance summary
    python main.py --view nested --dataset etf       # Nested treemap
    python main.py --view bubble --dataset commodities # Commodity bubbles
    python main.py --tree snapshot.json --color debt # Tree from file
"""

from __future__ import annotations
import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

import config as config_package
from config.config_manager import ConfigManager
from config.models import AppConfig
from cityscape.domain.encoding.metrics import ColorMetric, HeightMetric
from cityscape.domain.exceptions import CityscapeError
from cityscape.domain.render.engine import MapEngine
from cityscape.infrastructure.adapters import (
    BubbleAdapter,
    ExtrudedAdapter,
    NestedTreemapAdapter,
    PlanarAdapter,
    group_names_from,
    hover_text,
)
from cityscape.infrastructure.sources import DATASETS, MockTreeSource, load_tree
from cityscape.models.market_node import MarketNode
from cityscape.tui import render_heatmap
from cityscape.utils import flush_all_loggers, get_logger, new_cycle, setup_logging

logger = get_logger("cityscape.main")

DEFAULT_CONFIG_DIR = str(Path(config_package.__file__).resolve().parent)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Market Cityscape - hierarchical market map",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --dataset commodities --height relative_volume
  python main.py --view extruded --height market_cap --color yield
  python main.py --view bubble --dataset commodities
        """
    )

    parser.add_argument("--config-dir", type=str, default=DEFAULT_CONFIG_DIR,
                        help="Directory holding base.yaml and environment overrides "
                             "(default: the installed config package)")
    parser.add_argument("--env", type=str, default="dev",
                        help="Environment override file to merge (default: dev)")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--dataset", type=str, default="market", choices=list(DATASETS),
                        help="Mock dataset to render (default: market)")
    source.add_argument("--tree", type=str, help="JSON or YAML tree file to render")

    parser.add_argument("--height", type=str, default=None,
                        help=f"Height metric: {', '.join(m.value for m in HeightMetric)}")
    parser.add_argument("--color", type=str, default=None,
                        help=f"Color metric: {', '.join(m.value for m in ColorMetric)}")
    parser.add_argument("--view", type=str, default="planar",
                        choices=["planar", "extruded", "nested", "bubble"],
                        help="Presentation variant (default: planar)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for mock data")
    parser.add_argument("--width", type=int, default=96, help="Terminal grid columns")
    parser.add_argument("--height-rows", type=int, default=28, help="Terminal grid rows")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging (DEBUG level)")
    return parser.parse_args(argv)


async def fetch_tree(args: argparse.Namespace) -> MarketNode:
    if args.tree:
        return load_tree(args.tree)
    source = MockTreeSource(args.dataset, seed=args.seed)
    return await source.fetch_tree()


def show_planar(console: Console, engine: MapEngine, args: argparse.Namespace) -> None:
    adapter = PlanarAdapter(engine.config.presentation)
    scene = adapter.render(engine.encode(), extent=engine.layout().extent)
    subtitle = f"height={engine.height_metric.value} color={engine.color_metric.value}"
    console.print(render_heatmap(scene, args.width, args.height_rows, engine.tree.name, subtitle))


def show_nested(console: Console, engine: MapEngine, args: argparse.Namespace) -> None:
    adapter = NestedTreemapAdapter(engine.config.presentation, group_names_from(engine.tree))
    scene = adapter.render(engine.encode(), extent=engine.layout().extent)
    console.print(render_heatmap(scene.leaves, args.width, args.height_rows, engine.tree.name))

    table = Table(title="Groups", show_lines=False)
    table.add_column("Group", style="cyan")
    table.add_column("Level", justify="right")
    table.add_column("Value ($B)", justify="right")
    flat = adapter.to_flat()
    values = dict(zip(flat["ids"], flat["values"]))
    for group in scene.groups:
        table.add_row(group.label, str(group.level), f"{values.get(group.id, 0.0) / 1e9:,.1f}")
    console.print(table)


def show_extruded(console: Console, engine: MapEngine, args: argparse.Namespace) -> None:
    adapter = ExtrudedAdapter(engine.config.presentation)
    nodes = engine.encode()
    scene = adapter.render(nodes)

    table = Table(title=f"{engine.tree.name} - {scene.count} blocks, {len(scene.roof_labels)} roof labels")
    table.add_column("#", justify="right")
    table.add_column("Ticker", style="cyan")
    table.add_column("Height", justify="right")
    table.add_column("Color")
    table.add_column("Position (x, y, z)")
    tallest = sorted(range(len(nodes)), key=lambda i: nodes[i].height_value, reverse=True)
    for i in tallest[:10]:
        node = nodes[i]
        x, y, z = node.placement.position
        hex_color = node.color.to_hex()
        table.add_row(str(i), node.ticker, f"{node.height_value:.2f}",
                      f"[on {hex_color}]  [/] {hex_color}", f"{x:.1f}, {y:.1f}, {z:.1f}")
    console.print(table)

    if tallest:
        adapter.pointer_enter(tallest[0])
        console.print(hover_text(adapter.resolve(tallest[0])))


def show_bubble(console: Console, engine: MapEngine, args: argparse.Namespace) -> None:
    adapter = BubbleAdapter(group_names_from(engine.tree))
    scene = adapter.render(engine.encode())

    table = Table(title=f"{engine.tree.name} - performance vs relative volume "
                        f"(avg {scene.average_volume:.2f}x)")
    table.add_column("Ticker", style="cyan")
    table.add_column("Sector")
    table.add_column("Perf %", justify="right")
    table.add_column("RVol", justify="right")
    table.add_column("Size", justify="right")
    by_volume = sorted(scene.primitives, key=lambda p: (p.y, abs(p.x)), reverse=True)
    for bubble in by_volume:
        table.add_row(f"[{bubble.fill}]\u25cf[/] {bubble.ticker}", bubble.sector, f"{bubble.x:+.2f}",
                      f"{bubble.y:.2f}x", f"{bubble.size:.0f}")
    console.print(table)


async def main_async(args: argparse.Namespace) -> int:
    """Main async entry point."""
    config: AppConfig = ConfigManager(config_dir=args.config_dir, env=args.env).load()
    logging_config = config.logging
    if args.verbose:
        logging_config = replace(logging_config, level="DEBUG")
    setup_logging(logging_config)

    engine = MapEngine(config)
    engine.select(args.height, args.color)

    with new_cycle():
        tree = await fetch_tree(args)
        engine.submit(tree)

        console = Console()
        if args.view == "extruded":
            show_extruded(console, engine, args)
        elif args.view == "nested":
            show_nested(console, engine, args)
        elif args.view == "bubble":
            show_bubble(console, engine, args)
        else:
            show_planar(console, engine, args)

    logger.info(
        f"Rendered {len(engine.encode())} blocks "
        f"({engine.layout().excluded} excluded, {engine.stats.partition_runs} partition runs)"
    )
    return 0


def main() -> None:
    """Main entry point."""
    args = parse_args()
    try:
        exit_code = asyncio.run(main_async(args))
    except KeyboardInterrupt:
        print("Shutdown requested")
        exit_code = 0
    except (CityscapeError, FileNotFoundError) as e:
        print(f"Fatal error: {e}")
        exit_code = 1
    finally:
        flush_all_loggers()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
