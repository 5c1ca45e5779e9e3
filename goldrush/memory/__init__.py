"""Persistent knowledge of the grid built up from the per-turn views."""

from .world import MAX_GRID, WorldModel

__all__ = [
    "MAX_GRID",
    "WorldModel",
]
