"""Planner state shared by every stage of the decision policy."""

from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from goldrush.api.models import Inventory, Position
from goldrush.api.tiles import Action
from goldrush.memory.world import WorldModel


@dataclass
class NeedFlags:
    """Resources the policy has decided to go and collect."""

    key: bool = False
    axe: bool = False
    stones: bool = False


@dataclass
class PlannerContext:
    """
    Everything a policy stage reads or writes.

    Stages receive the context, inspect the world model and, when they
    settle on a destination, append the translated moves to `pending`.
    """

    world: WorldModel
    pending: deque[Action] = field(default_factory=deque)
    needs: NeedFlags = field(default_factory=NeedFlags)
    max_stone_depth: Optional[int] = None  # Cap on stones tried per placement search

    @property
    def position(self) -> Position:
        return self.world.position

    @property
    def inventory(self) -> Inventory:
        return self.world.inventory

    def pop_action(self) -> Action:
        """
        Take the next committed action.

        Raises:
            RuntimeError: If nothing has been planned
        """
        if not self.pending:
            raise RuntimeError("No committed plan. Run the decision policy first.")
        return self.pending.popleft()
