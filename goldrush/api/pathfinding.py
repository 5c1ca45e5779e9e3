"""
Reachability and pathfinding over the world model.

Two searches share one passability predicate (Tile.is_passable):

- A breadth-first flood fill answers "can I get there?" cheaply and is
  re-run with hypothetical inventories ("could I get there with a key?").
- A* with a Manhattan heuristic produces the actual shortest route once
  a destination is known to be reachable.

Both accept a set of extra `crossable` coordinates which are treated as
passable regardless of their tile, used to test hypothetical stepping
stone placements without touching the map.
"""

import heapq
import logging
from collections import deque
from typing import Iterable, Optional, TYPE_CHECKING

from .models import PathResult, PathStopReason, Position

if TYPE_CHECKING:
    from goldrush.memory.world import WorldModel

logger = logging.getLogger(__name__)


def _is_open(
    world: "WorldModel",
    pos: Position,
    has_key: bool,
    has_axe: bool,
    crossable: frozenset[Position],
) -> bool:
    """Whether a neighbour can be entered during a search."""
    if not world.in_bounds(pos):
        return False
    if pos in crossable:
        return True
    return world.get_tile(pos).is_passable(has_key, has_axe)


def reachable_region(
    world: "WorldModel",
    origin: Position,
    has_key: bool = False,
    has_axe: bool = False,
    crossable: Iterable[Position] = (),
    goal: Optional[Position] = None,
) -> set[Position]:
    """
    Flood fill the area connected to origin.

    The origin itself is always part of the region. Neighbours are the
    4 orthogonal cells and are admitted only if passable with the given
    (possibly hypothetical) inventory.

    Args:
        world: World model to search
        origin: Starting position
        has_key: Treat doors as passable
        has_axe: Treat trees as passable
        crossable: Extra positions to treat as passable (hypothetical stones)
        goal: Stop as soon as this position is dequeued

    Returns:
        Set of positions connected to origin
    """
    crossable = frozenset(crossable)
    visited = {origin}
    queue = deque([origin])

    while queue:
        current = queue.popleft()
        if current == goal:
            break

        for neighbor in current.adjacent():
            if neighbor in visited:
                continue
            if not _is_open(world, neighbor, has_key, has_axe, crossable):
                continue
            visited.add(neighbor)
            queue.append(neighbor)

    return visited


def is_reachable(
    world: "WorldModel",
    origin: Position,
    goal: Position,
    has_key: bool = False,
    has_axe: bool = False,
    crossable: Iterable[Position] = (),
) -> bool:
    """
    Check whether goal can be reached from origin.

    Does not modify the world, so it can be called repeatedly with
    different hypothetical inventories against the same map.
    """
    if goal == origin:
        return True
    if not world.in_bounds(goal):
        return False
    region = reachable_region(world, origin, has_key, has_axe, crossable, goal=goal)
    return goal in region


def shortest_path(
    world: "WorldModel",
    origin: Position,
    goal: Position,
    has_key: bool = False,
    has_axe: bool = False,
    crossable: Iterable[Position] = (),
) -> list[Position]:
    """
    A* search with unit edge costs and a Manhattan heuristic.

    The heuristic never overestimates on a 4-connected unit grid, so the
    first time the goal is popped its cost is optimal. Nodes are moved to
    the closed set when popped; an open neighbour is re-pushed only when a
    strictly cheaper route to it is found, stale heap entries are skipped.

    Args:
        world: World model to search
        origin: Starting position
        goal: Target position
        has_key: Treat doors as passable
        has_axe: Treat trees as passable
        crossable: Extra positions to treat as passable

    Returns:
        Positions from goal back to origin (both included), or an empty
        list if the goal cannot be reached
    """
    crossable = frozenset(crossable)

    if goal == origin:
        return [origin]
    if not _is_open(world, goal, has_key, has_axe, crossable):
        return []

    # Priority queue: (f_score, counter, position)
    # Counter gives a deterministic first-in-first-out order among equal f_scores
    counter = 0
    open_set = [(goal.manhattan_distance(origin), counter, origin)]
    came_from: dict[Position, Position] = {}
    g_score: dict[Position, int] = {origin: 0}
    closed: set[Position] = set()

    while open_set:
        _, _, current = heapq.heappop(open_set)

        if current in closed:
            continue

        if current == goal:
            # Reconstruct path
            path = [current]
            while current in came_from:
                current = came_from[current]
                path.append(current)
            return path

        closed.add(current)

        for neighbor in current.adjacent():
            if neighbor in closed:
                continue
            if not _is_open(world, neighbor, has_key, has_axe, crossable):
                continue

            tentative_g = g_score[current] + 1

            if neighbor not in g_score or tentative_g < g_score[neighbor]:
                came_from[neighbor] = current
                g_score[neighbor] = tentative_g
                counter += 1
                f_score = tentative_g + neighbor.manhattan_distance(goal)
                heapq.heappush(open_set, (f_score, counter, neighbor))

    return []  # No path found


def find_path(
    world: "WorldModel",
    target: Position,
    origin: Optional[Position] = None,
    has_key: Optional[bool] = None,
    has_axe: Optional[bool] = None,
) -> PathResult:
    """
    Find a path from the player (or origin) to target.

    Inventory defaults to what the player is actually carrying.

    Returns:
        PathResult with the positions to walk through, origin excluded,
        in walking order
    """
    start = world.position if origin is None else origin
    has_key = world.inventory.has_key if has_key is None else has_key
    has_axe = world.inventory.has_axe if has_axe is None else has_axe

    if start == target:
        return PathResult([], PathStopReason.ALREADY_AT_TARGET, "Already at target position")

    if not world.in_bounds(target):
        return PathResult([], PathStopReason.TARGET_OUT_OF_BOUNDS, f"Target {target} is out of map bounds")

    target_tile = world.get_tile(target)
    if not target_tile.is_passable(has_key, has_axe):
        logger.debug(f"find_path: target {target} is unwalkable ({target_tile.name})")
        return PathResult([], PathStopReason.TARGET_UNWALKABLE, f"Target {target} is {target_tile.name}")

    path = shortest_path(world, start, target, has_key, has_axe)

    if not path:
        logger.debug(f"find_path: A* found no path from {start} to {target} (key={has_key}, axe={has_axe})")
        return PathResult([], PathStopReason.NO_PATH_EXISTS, f"No path through known territory from {start} to {target}")

    path.reverse()
    return PathResult(path[1:], PathStopReason.SUCCESS)
