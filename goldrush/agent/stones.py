"""
Stepping stone placement search.

When every reachable resource has been collected and nothing is left to
explore, the only way forward is to drop stones into water. Given an
unreachable goal, the solver tries groups of water tiles of growing size
(1, 2, ... up to the stones held) and keeps the groups that would make the
goal reachable. Only groups whose tiles touch each other can open a new
route, so disconnected groups are thrown away before the comparatively
expensive flood fill over the map.
"""

import logging
from itertools import combinations
from typing import Iterable, Iterator, Sequence

from goldrush.api.models import Position
from goldrush.api.pathfinding import is_reachable
from goldrush.api.tiles import Tile
from goldrush.memory.world import WorldModel

from .actions import enqueue_path
from .context import PlannerContext

logger = logging.getLogger(__name__)


def is_connected_group(group: Sequence[Position]) -> bool:
    """
    Check that every tile in group can be reached from every other one
    by stepping only between orthogonally adjacent members.
    """
    if len(group) <= 1:
        return True

    members = set(group)
    seen = {group[0]}
    stack = [group[0]]
    while stack:
        current = stack.pop()
        for neighbor in current.adjacent():
            if neighbor in members and neighbor not in seen:
                seen.add(neighbor)
                stack.append(neighbor)
    return len(seen) == len(members)


def connected_water_groups(waters: Sequence[Position], size: int) -> Iterator[tuple[Position, ...]]:
    """Yield every unordered group of `size` water tiles that is connected."""
    for group in combinations(waters, size):
        if is_connected_group(group):
            yield group


def total_distance(group: Iterable[Position], points: Sequence[Position]) -> int:
    """Sum of Manhattan distances from every tile in group to every point."""
    return sum(tile.manhattan_distance(point) for tile in group for point in points)


def choose_placement(world: WorldModel, solutions: list[tuple[Position, ...]]) -> tuple[Position, ...]:
    """
    Pick the most useful of several equally small placements.

    Preference order:
    1. Groups sharing a row or column with the gold, closest to it
    2. Groups closest to the known stepping stones
    3. Groups closest to the known keys
    4. Groups closest to the known axes
    5. The first group found
    """
    gold = world.gold_location
    if gold is not None:
        on_the_way = [
            group for group in solutions
            if any(tile.x == gold.x or tile.y == gold.y for tile in group)
        ]
        if on_the_way:
            return min(on_the_way, key=lambda group: total_distance(group, [gold]))

    for registry in (world.stones, world.keys, world.axes):
        points = list(registry)
        if points:
            return min(solutions, key=lambda group: total_distance(group, points))

    return solutions[0]


def find_stone_placements(ctx: PlannerContext, goal: Position) -> list[tuple[Position, ...]]:
    """
    Find the smallest groups of water tiles that open a route to goal.

    Returns:
        All connected groups of the smallest working size, in enumeration
        order, or an empty list if no group within the stone budget works
    """
    world = ctx.world
    inventory = ctx.inventory

    budget = inventory.stones
    if ctx.max_stone_depth is not None:
        budget = min(budget, ctx.max_stone_depth)

    # Tiles already reserved as temporary water are passable; don't pay twice
    waters = [pos for pos in world.waters if world.get_tile(pos) is Tile.WATER]

    for size in range(1, min(budget, len(waters)) + 1):
        solutions = [
            group for group in connected_water_groups(waters, size)
            if is_reachable(
                world, world.position, goal,
                inventory.has_key, inventory.has_axe,
                crossable=group,
            )
        ]
        if solutions:
            logger.debug(f"find_stone_placements: {len(solutions)} placements of {size} stone(s) reach {goal}")
            return solutions

    return []


def place_stones_toward_goal(ctx: PlannerContext, goal: Position) -> bool:
    """
    Reserve water tiles for stepping stones so goal becomes reachable.

    The chosen tiles are marked as temporary water, which the planner
    treats as passable and the world model turns into placed stones when
    the player actually steps on them. A path to goal is committed
    whether or not a new placement was needed.

    Returns:
        True if a new placement was found
    """
    solutions = find_stone_placements(ctx, goal)

    if solutions:
        placement = choose_placement(ctx.world, solutions)
        for pos in placement:
            ctx.world.set_tile(pos, Tile.TEMPORARY_WATER)
        logger.info(f"Reserving stepping stones at {list(placement)} toward {goal}")

    enqueue_path(ctx, goal)
    return bool(solutions)
