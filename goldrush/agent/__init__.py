"""Agent orchestration - decision policy and main game loop."""

from .actions import alignment_moves, enqueue_path, path_to_actions
from .agent import GameResult, GoldAgent
from .context import NeedFlags, PlannerContext
from .engine import DecisionEngine
from .stones import choose_placement, find_stone_placements, place_stones_toward_goal

__all__ = [
    # Context
    "NeedFlags",
    "PlannerContext",
    # Actions
    "alignment_moves",
    "enqueue_path",
    "path_to_actions",
    # Stones
    "choose_placement",
    "find_stone_placements",
    "place_stones_toward_goal",
    # Engine
    "DecisionEngine",
    # Agent
    "GameResult",
    "GoldAgent",
]
