"""
Trace context for correlating logs across a single snapshot refresh.

Provides:
- Unique cycle IDs (6-char hex), one per tree snapshot handed to the engine
- Context propagation via contextvars
- Easy access to the current cycle ID from any module

Usage:
    with new_cycle():
        engine.submit(tree)
        nodes = engine.encode(height, color)

    from cityscape.utils.trace_context import get_cycle_id
    logger.info(f"[{get_cycle_id()}] Deriving...")
"""

from __future__ import annotations

import secrets
from contextvars import ContextVar
from contextlib import contextmanager
from typing import Optional, Generator

_cycle_id: ContextVar[Optional[str]] = ContextVar("cycle_id", default=None)

# Cycles started in this session
_cycle_counter: int = 0

NO_CYCLE = "------"


def generate_cycle_id() -> str:
    """Generate a new 6-character hex cycle ID (e.g., "a7f3b2")."""
    return secrets.token_hex(3)


def get_cycle_id() -> str:
    """
    Get the current cycle ID.

    Returns:
        Current cycle ID, or "------" if no cycle is active.
    """
    cycle_id = _cycle_id.get()
    return cycle_id if cycle_id else NO_CYCLE


def set_cycle_id(cycle_id: Optional[str]) -> None:
    """Set (or clear, with None) the current cycle ID."""
    _cycle_id.set(cycle_id)


@contextmanager
def new_cycle() -> Generator[str, None, None]:
    """
    Run the enclosed block under a fresh cycle ID.

    The previous cycle ID (if any) is restored on exit.

    Yields:
        The new cycle ID.
    """
    global _cycle_counter
    _cycle_counter += 1

    cycle_id = generate_cycle_id()
    token = _cycle_id.set(cycle_id)
    try:
        yield cycle_id
    finally:
        _cycle_id.reset(token)


def get_cycle_counter() -> int:
    """Total number of cycles created in this session."""
    return _cycle_counter


def reset_cycle_counter() -> None:
    """Reset the cycle counter (for testing)."""
    global _cycle_counter
    _cycle_counter = 0
