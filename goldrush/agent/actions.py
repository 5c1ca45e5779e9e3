"""
Translation of planned paths into game actions.

The game has no "move north" command: the player turns on the spot and
then moves forward, so each step of a path becomes the turns needed to
face the next cell, an optional chop or unlock, and a forward move.
"""

import logging
from typing import Optional

from goldrush.api.models import Heading, Position
from goldrush.api.pathfinding import find_path
from goldrush.api.tiles import Action, Tile
from goldrush.memory.world import WorldModel

from .context import PlannerContext

logger = logging.getLogger(__name__)


def alignment_moves(current: Heading, target: Heading) -> list[Action]:
    """
    Turns needed to go from facing `current` to facing `target`.

    Picks whichever of left or right needs fewer turns, preferring left
    on a tie, so the result never has more than two actions.
    """
    right_turns = (target - current) % 4
    left_turns = (current - target) % 4

    if right_turns == 0:
        return []
    if left_turns <= right_turns:
        return [Action.TURN_LEFT] * left_turns
    return [Action.TURN_RIGHT] * right_turns


def path_to_actions(world: WorldModel, path: list[Position], heading: Heading) -> list[Action]:
    """
    Convert a walking-order path (starting cell first) into actions.

    Args:
        world: World model, used to spot trees and doors on the way
        path: Consecutive orthogonally adjacent positions
        heading: Facing at the start of the path

    Returns:
        Actions that walk the path from its first cell to its last
    """
    actions: list[Action] = []

    for current, following in zip(path, path[1:]):
        step = current.heading_to(following)
        if step is None:
            raise ValueError(f"Path positions {current} and {following} are not adjacent")

        actions.extend(alignment_moves(heading, step))
        heading = step

        tile = world.get_tile(following)
        if tile is Tile.TREE:
            actions.append(Action.CHOP)
        elif tile is Tile.DOOR:
            actions.append(Action.UNLOCK)

        actions.append(Action.FORWARD)

    return actions


def enqueue_path(
    ctx: PlannerContext,
    goal: Position,
    has_key: Optional[bool] = None,
    has_axe: Optional[bool] = None,
) -> bool:
    """
    Plan a route from the player to goal and commit its actions.

    Callers are expected to have checked reachability first.

    Returns:
        True if any actions were added to the pending queue
    """
    world = ctx.world
    result = find_path(world, goal, has_key=has_key, has_axe=has_axe)
    if not result:
        logger.debug(f"enqueue_path: nothing to commit for {goal} ({result.reason.value})")
        return False

    actions = path_to_actions(world, [world.position, *result.path], world.heading)
    ctx.pending.extend(actions)
    logger.debug(
        f"enqueue_path: {len(result)} steps to {goal} as "
        f"{''.join(action.value for action in actions)}"
    )
    return True
