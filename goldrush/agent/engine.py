"""
Turn-by-turn decision policy.

The engine keeps a queue of committed actions. While the queue has
moves left it simply plays them; once it runs dry a fixed-priority policy
picks the next destination and commits the moves to get there:

1. Holding the gold: go home to the origin.
2. Gold sighted: go to it if reachable, otherwise work out whether a key
   and/or an axe would open the way.
3. A needed key, axe or stepping stone is reachable: go and get it.
4. Explore: walk to the nearest tile that reveals unknown territory.
5. Nothing left to explore: flag any reachable resource as needed and
   go back to step 3.
6. Spend stepping stones on water to open a route toward the gold,
   another stone, a key, an axe, or any open ground.
7. Disaster: head home and hope to recover.
"""

import logging
from typing import Iterator, Optional, Sequence, Union

import numpy as np

from goldrush.api.exploration import find_revealing_tile
from goldrush.api.models import ORIGIN, Position, ResourceRegistry
from goldrush.api.pathfinding import is_reachable, reachable_region
from goldrush.api.tiles import Action, Tile
from goldrush.config import AgentConfig
from goldrush.memory.world import WorldModel

from .actions import enqueue_path
from .context import PlannerContext
from .stones import place_stones_toward_goal

logger = logging.getLogger(__name__)


def _available(world: WorldModel, registry: ResourceRegistry, tile: Tile) -> Iterator[Position]:
    """Registered locations that still hold the resource."""
    for pos in registry:
        if world.get_tile(pos) is tile:
            yield pos


def _reachable_now(ctx: PlannerContext, goal: Position) -> bool:
    inventory = ctx.inventory
    return is_reachable(ctx.world, ctx.position, goal, inventory.has_key, inventory.has_axe)


# =============================================================================
# Policy stages
# =============================================================================
# Each stage returns True once it has committed moves to the pending queue.


def stage_return_home(ctx: PlannerContext) -> bool:
    if not ctx.inventory.has_gold:
        return False
    logger.debug("stage_return_home: holding gold, heading to origin")
    return enqueue_path(ctx, ORIGIN)


def stage_pursue_gold(ctx: PlannerContext) -> bool:
    """Go for the gold, or record which missing tools would make it reachable."""
    world = ctx.world
    if not world.gold_visible:
        return False

    gold = world.gold_location
    inventory = ctx.inventory

    if _reachable_now(ctx, gold):
        logger.debug(f"stage_pursue_gold: gold at {gold} is reachable")
        return enqueue_path(ctx, gold)

    # Theoretical reachability: what if we had the missing tools?
    has_key, has_axe = inventory.has_key, inventory.has_axe
    key_alone = not has_key and is_reachable(world, ctx.position, gold, True, has_axe)
    axe_alone = not has_axe and is_reachable(world, ctx.position, gold, has_key, True)
    if key_alone:
        ctx.needs.key = True
    if axe_alone:
        ctx.needs.axe = True
    # Only ask for both tools when neither one opens the way by itself
    if (
        not key_alone
        and not axe_alone
        and not has_key
        and not has_axe
        and is_reachable(world, ctx.position, gold, True, True)
    ):
        ctx.needs.key = True
        ctx.needs.axe = True

    logger.debug(f"stage_pursue_gold: gold unreachable, needs={ctx.needs}")
    return False


def stage_collect_needed(ctx: PlannerContext) -> bool:
    """Fetch the first reachable copy of a resource we have flagged as needed."""
    world = ctx.world
    inventory = ctx.inventory
    wanted = (
        (ctx.needs.key and not inventory.has_key, world.keys, Tile.KEY),
        (ctx.needs.axe and not inventory.has_axe, world.axes, Tile.AXE),
        (ctx.needs.stones, world.stones, Tile.STONE),
    )

    for needed, registry, tile in wanted:
        if not needed:
            continue
        for location in _available(world, registry, tile):
            if _reachable_now(ctx, location):
                logger.debug(f"stage_collect_needed: fetching {tile.name} at {location}")
                return enqueue_path(ctx, location)

    return False


def stage_explore(ctx: PlannerContext) -> bool:
    inventory = ctx.inventory
    result = find_revealing_tile(ctx.world, ctx.position, inventory.has_key, inventory.has_axe)
    if not result:
        return False
    logger.debug(f"stage_explore: exploring toward {result.position}")
    return enqueue_path(ctx, result.position)


def stage_flag_resources(ctx: PlannerContext) -> bool:
    """
    Flag reachable resources nobody asked for yet.

    Returns:
        True if a flag was raised, meaning the collect stage now has work
    """
    world = ctx.world
    inventory = ctx.inventory
    needs = ctx.needs
    flagged = False

    if not needs.key and not inventory.has_key:
        if any(_reachable_now(ctx, pos) for pos in _available(world, world.keys, Tile.KEY)):
            needs.key = True
            flagged = True

    if not needs.axe and not inventory.has_axe:
        if any(_reachable_now(ctx, pos) for pos in _available(world, world.axes, Tile.AXE)):
            needs.axe = True
            flagged = True

    if not needs.stones:
        if any(_reachable_now(ctx, pos) for pos in _available(world, world.stones, Tile.STONE)):
            needs.stones = True
            flagged = True

    if flagged:
        logger.debug(f"stage_flag_resources: needs={needs}")
    return flagged


def _stone_goals(ctx: PlannerContext) -> Iterator[Position]:
    """Destinations worth spending stones on, in order of preference."""
    world = ctx.world
    inventory = ctx.inventory

    if world.gold_visible:
        yield world.gold_location

    yield from _available(world, world.stones, Tile.STONE)

    if not inventory.has_key:
        yield from _available(world, world.keys, Tile.KEY)

    if not inventory.has_axe:
        yield from _available(world, world.axes, Tile.AXE)

    region = reachable_region(world, ctx.position, inventory.has_key, inventory.has_axe)
    spaces = [pos for pos in world.known_tiles(Tile.SPACE) if pos in region]
    spaces.sort(key=lambda pos: pos.manhattan_distance(ctx.position))
    yield from spaces


def stage_place_stones(ctx: PlannerContext) -> bool:
    if ctx.inventory.stones == 0:
        return False

    for goal in _stone_goals(ctx):
        if place_stones_toward_goal(ctx, goal):
            logger.debug(f"stage_place_stones: stones open a route toward {goal}")
            return True
        # Each goal is planned from the current position; drop the stale route
        ctx.pending.clear()

    return False


def stage_disaster(ctx: PlannerContext) -> bool:
    """Head home; if even that is impossible, wait a turn."""
    logger.warning(f"Disaster stage reached at {ctx.position}, heading to origin")
    if not enqueue_path(ctx, ORIGIN):
        ctx.pending.append(Action.UNLOCK)
    return True


# =============================================================================
# Engine
# =============================================================================


class DecisionEngine:
    """
    Chooses one action per turn.

    Example usage:
        engine = DecisionEngine()
        while game_running:
            action = engine.make_move(view)
    """

    def __init__(
        self,
        world: Optional[WorldModel] = None,
        config: Optional[AgentConfig] = None,
        log_map: bool = False,
    ):
        """
        Initialize the engine.

        Args:
            world: World model to plan with (a fresh one by default)
            config: Planner configuration
            log_map: Log the rendered map at DEBUG every turn
        """
        self.config = config or AgentConfig()
        world = world or WorldModel(self.config.max_grid)
        self.ctx = PlannerContext(world=world, max_stone_depth=self.config.max_stone_depth)
        self.log_map = log_map

    @property
    def world(self) -> WorldModel:
        return self.ctx.world

    @property
    def pending(self) -> list[Action]:
        """Committed actions not yet played."""
        return list(self.ctx.pending)

    def make_move(self, view: Union[np.ndarray, Sequence[str], bytes]) -> Action:
        """
        Integrate the latest view and return the action to play.

        Args:
            view: 5x5 view in the player's facing frame

        Returns:
            The action, already applied to the world model
        """
        self.world.integrate_view(view)
        if self.log_map:
            logger.debug(f"World map:\n{self.world.render()}")

        if not self.ctx.pending:
            self.plan()

        action = self._next_action()
        self.world.apply_action(action)
        return action

    def plan(self) -> None:
        """Run the policy until something is committed."""
        ctx = self.ctx

        while not ctx.pending:
            if stage_return_home(ctx):
                break
            if stage_pursue_gold(ctx):
                break
            if stage_collect_needed(ctx):
                break
            if stage_explore(ctx):
                break
            if stage_flag_resources(ctx):
                continue
            if stage_place_stones(ctx):
                break
            stage_disaster(ctx)

    def _next_action(self) -> Action:
        """Pop the next committed action, swapping out moves that would end the game."""
        ctx = self.ctx
        action = ctx.pop_action()
        if action is not Action.FORWARD:
            return action

        tile = self.world.get_tile(self.world.position_in_front())

        if tile is Tile.KEY:
            ctx.needs.key = False
        elif tile is Tile.AXE:
            ctx.needs.axe = False
        elif tile is Tile.STONE:
            ctx.needs.stones = False
        elif tile is Tile.BOUNDARY or (tile.is_water and ctx.inventory.stones == 0):
            # Certain death; wait a turn instead and re-plan
            logger.warning(f"Refusing to walk into {tile.name} at {self.world.position_in_front()}")
            ctx.pending.clear()
            return Action.UNLOCK

        return action
