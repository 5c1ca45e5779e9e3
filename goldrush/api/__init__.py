"""Game vocabulary, grid search and the game engine connection."""

from .environment import GameConnection
from .exploration import find_revealing_tile, spiral_offsets
from .models import (
    ORIGIN,
    Heading,
    Inventory,
    PathResult,
    PathStopReason,
    Position,
    ResourceRegistry,
    TargetResult,
)
from .pathfinding import find_path, is_reachable, reachable_region, shortest_path
from .tiles import Action, Tile, parse_view, rotate_clockwise

__all__ = [
    # Vocabulary
    "Action",
    "Tile",
    "parse_view",
    "rotate_clockwise",
    # Models
    "ORIGIN",
    "Heading",
    "Inventory",
    "PathResult",
    "PathStopReason",
    "Position",
    "ResourceRegistry",
    "TargetResult",
    # Search
    "find_path",
    "find_revealing_tile",
    "is_reachable",
    "reachable_region",
    "shortest_path",
    "spiral_offsets",
    # Transport
    "GameConnection",
]
