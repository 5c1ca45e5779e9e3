"""
Main game loop.

Ties the decision engine to a game connection: read a view, pick an
action, send it, until the game engine closes the stream.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

from goldrush.api.environment import GameConnection
from goldrush.api.models import ORIGIN
from goldrush.api.tiles import Action
from goldrush.config import AgentConfig
from goldrush.memory.world import WorldModel

from .engine import DecisionEngine

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Summary of a finished game."""

    moves: int = 0
    has_gold: bool = False
    returned_home: bool = False
    stones_left: int = 0


class GoldAgent:
    """
    Agent that finds the gold and brings it back to the start.

    Example usage:
        agent = GoldAgent()

        # Play a full game
        with GameConnection(host, port) as connection:
            moves = agent.play(connection)

        # Or drive it turn by turn
        action = agent.get_action(view)
    """

    def __init__(self, config: Optional[AgentConfig] = None, log_map: bool = False):
        """
        Initialize the agent.

        Args:
            config: Planner configuration
            log_map: Log the rendered world map every turn
        """
        self.config = config or AgentConfig()
        self.engine = DecisionEngine(config=self.config, log_map=log_map)

    @property
    def world(self) -> WorldModel:
        return self.engine.world

    def get_action(self, view: Union[np.ndarray, Sequence[str], bytes]) -> Action:
        """Decide the action for the current view."""
        return self.engine.make_move(view)

    def play(self, connection: GameConnection) -> int:
        """
        Play until the game engine ends the game.

        Args:
            connection: Open connection to the game engine

        Returns:
            Number of moves sent
        """
        moves = 0
        while True:
            view = connection.read_view()
            if view is None:
                break

            action = self.get_action(view)
            connection.send_action(action)
            moves += 1

        result = self.result()
        logger.info(
            f"Game over: moves={result.moves}, gold={result.has_gold}, "
            f"home={result.returned_home}, stones_left={result.stones_left}"
        )
        return moves

    def result(self) -> GameResult:
        """Snapshot of how the game went so far."""
        world = self.world
        return GameResult(
            moves=world.total_moves,
            has_gold=world.inventory.has_gold,
            returned_home=world.inventory.has_gold and world.position == ORIGIN,
            stones_left=world.inventory.stones,
        )
