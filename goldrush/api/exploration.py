"""
Exploration target selection.

Scans outward from the player in a square spiral and picks the first
known, passable, reachable cell from which the 5x5 view would reveal at
least one unknown tile. Walking to that cell is guaranteed to teach the
agent something new, and because the cell has already been checked for
reachability it can be handed straight to the path planner.
"""

import logging
from typing import Iterator, TYPE_CHECKING

from .models import PathStopReason, Position, TargetResult
from .pathfinding import reachable_region
from .tiles import Tile, VIEW_RADIUS

if TYPE_CHECKING:
    from goldrush.memory.world import WorldModel

logger = logging.getLogger(__name__)

# Every cell of the view around a position except the position itself
VIEW_OFFSETS = tuple(
    (dx, dy)
    for dx in range(-VIEW_RADIUS, VIEW_RADIUS + 1)
    for dy in range(-VIEW_RADIUS, VIEW_RADIUS + 1)
    if not (dx == 0 and dy == 0)
)


def spiral_offsets(max_radius: int) -> Iterator[tuple[int, int]]:
    """
    Yield (dx, dy) offsets in an expanding square spiral.

    Starts at (0, 0), then walks each ring as four straight runs before
    moving out to the next ring. Ring r is finished before ring r + 1
    starts, and exactly the (2 * max_radius + 1) ** 2 offsets with
    max(|dx|, |dy|) <= max_radius are produced.
    """
    x = y = 0
    dx, dy = 0, -1
    side = 2 * max_radius + 1

    for _ in range(side * side):
        yield x, y
        # Turn at the corners of the current ring
        if x == y or (x < 0 and x == -y) or (x > 0 and x == 1 - y):
            dx, dy = -dy, dx
        x += dx
        y += dy


def reveals_unknown(world: "WorldModel", pos: Position) -> bool:
    """Whether standing at pos would bring an unknown tile into view."""
    for dx, dy in VIEW_OFFSETS:
        neighbor = Position(pos.x + dx, pos.y + dy)
        if world.in_bounds(neighbor) and world.get_tile(neighbor) is Tile.UNKNOWN:
            return True
    return False


def find_revealing_tile(
    world: "WorldModel",
    origin: Position,
    has_key: bool = False,
    has_axe: bool = False,
) -> TargetResult:
    """
    Find the nearest (in spiral order) tile worth walking to.

    A candidate must be a known tile other than the origin, passable with
    the given inventory, have an unknown tile within view range, and be
    reachable from the origin.

    The spiral only needs to extend as far as the reachable region does,
    which keeps the scan bounded by the world's extent.

    Returns:
        TargetResult with the chosen position, or the origin itself with
        reason NO_TARGET_FOUND
    """
    region = reachable_region(world, origin, has_key, has_axe)
    max_radius = max(
        max(abs(pos.x - origin.x), abs(pos.y - origin.y)) for pos in region
    )

    for dx, dy in spiral_offsets(max_radius):
        candidate = Position(origin.x + dx, origin.y + dy)

        if candidate == origin:
            continue
        if candidate not in region:
            continue
        if not world.get_tile(candidate).is_known:
            continue
        if not world.get_tile(candidate).is_passable(has_key, has_axe):
            continue
        if not reveals_unknown(world, candidate):
            continue

        logger.debug(f"find_revealing_tile: from {origin}, selected {candidate}")
        return TargetResult(candidate, PathStopReason.SUCCESS)

    logger.debug(f"find_revealing_tile: nothing left to reveal from {origin}")
    return TargetResult(origin, PathStopReason.NO_TARGET_FOUND, "No reachable tile reveals unknown territory")
