"""
Tile and action vocabulary for the gold-retrieval game.

The game engine speaks in single characters: every map cell is one tile
character and every move is one action character. These enums keep the
exact protocol characters as their values so conversion at the socket
boundary is a plain lookup, while the rest of the agent works with
members instead of raw characters.
"""

from enum import Enum
from typing import Sequence, Union

import numpy as np

VIEW_SIZE = 5
VIEW_RADIUS = VIEW_SIZE // 2


class Tile(Enum):
    """Classification of a single map cell."""

    SPACE = " "
    TREE = "T"
    DOOR = "-"
    WATER = "~"
    WALL = "*"
    UNKNOWN = "?"
    BOUNDARY = "."
    STONE_PLACED = "O"
    TEMPORARY_WATER = "#"  # Water we have committed a stone to, not yet crossed
    AXE = "a"
    KEY = "k"
    STONE = "o"
    GOLD = "g"
    PLAYER_UP = "^"
    PLAYER_RIGHT = ">"
    PLAYER_DOWN = "v"
    PLAYER_LEFT = "<"

    @classmethod
    def from_char(cls, char: str) -> "Tile":
        """Convert a protocol character to a Tile."""
        try:
            return cls(char)
        except ValueError:
            raise ValueError(f"Unknown tile character: {char!r}") from None

    @property
    def is_known(self) -> bool:
        return self is not Tile.UNKNOWN

    @property
    def is_water(self) -> bool:
        """Water the player cannot cross without committing a stone."""
        return self is Tile.WATER

    def is_passable(self, has_key: bool = False, has_axe: bool = False) -> bool:
        """
        Whether the player can stand on this tile.

        Doors need the key and trees need the axe; everything that is not
        explicitly listed (walls, water, boundary, unknown) is impassable.
        """
        rule = _PASSABILITY[self]
        if rule is _NEEDS_KEY:
            return has_key
        if rule is _NEEDS_AXE:
            return has_axe
        return rule


_NEEDS_KEY = object()
_NEEDS_AXE = object()

# One entry per Tile member
_PASSABILITY = {
    Tile.SPACE: True,
    Tile.TREE: _NEEDS_AXE,
    Tile.DOOR: _NEEDS_KEY,
    Tile.WATER: False,
    Tile.WALL: False,
    Tile.UNKNOWN: False,
    Tile.BOUNDARY: False,
    Tile.STONE_PLACED: True,
    Tile.TEMPORARY_WATER: True,
    Tile.AXE: True,
    Tile.KEY: True,
    Tile.STONE: True,
    Tile.GOLD: True,
    Tile.PLAYER_UP: True,
    Tile.PLAYER_RIGHT: True,
    Tile.PLAYER_DOWN: True,
    Tile.PLAYER_LEFT: True,
}


class Action(Enum):
    """Moves the agent can send to the game engine."""

    TURN_LEFT = "L"
    TURN_RIGHT = "R"
    FORWARD = "F"
    CHOP = "C"
    UNLOCK = "U"

    @classmethod
    def from_char(cls, char: str) -> "Action":
        """Convert an action character (either case) to an Action."""
        try:
            return cls(char.upper())
        except ValueError:
            raise ValueError(f"Unknown action character: {char!r}") from None

    def encode(self) -> bytes:
        """Wire representation: a single ASCII byte."""
        return self.value.encode("ascii")


def parse_view(rows: Union[Sequence[str], bytes]) -> np.ndarray:
    """
    Build a 5x5 view array of Tiles.

    Accepts either five strings of five characters (the center character
    is ignored, whatever it is) or the 24 raw bytes sent by the game engine,
    which skip the center cell. The center of the result is always
    Tile.UNKNOWN since the player's own cell is never transmitted.

    Args:
        rows: Five row strings, or 24 bytes in row-major order

    Returns:
        (5, 5) numpy object array of Tile members
    """
    view = np.full((VIEW_SIZE, VIEW_SIZE), Tile.UNKNOWN, dtype=object)

    if isinstance(rows, (bytes, bytearray)):
        expected = VIEW_SIZE * VIEW_SIZE - 1
        if len(rows) != expected:
            raise ValueError(f"Expected {expected} view bytes, got {len(rows)}")
        chars = iter(rows.decode("ascii"))
        for i in range(VIEW_SIZE):
            for j in range(VIEW_SIZE):
                if i == VIEW_RADIUS and j == VIEW_RADIUS:
                    continue
                view[i, j] = Tile.from_char(next(chars))
        return view

    if len(rows) != VIEW_SIZE or any(len(row) != VIEW_SIZE for row in rows):
        raise ValueError(f"View must be {VIEW_SIZE} rows of {VIEW_SIZE} characters")

    for i, row in enumerate(rows):
        for j, char in enumerate(row):
            if i == VIEW_RADIUS and j == VIEW_RADIUS:
                continue
            view[i, j] = Tile.from_char(char)
    return view


def rotate_clockwise(view: np.ndarray, times: int = 1) -> np.ndarray:
    """Rotate a view clockwise by 90 degrees `times` times."""
    return np.rot90(view, k=-(times % 4))
