"""Shared test helpers: hand-drawn maps and a tiny stand-in for the game engine."""

import numpy as np
import pytest

from goldrush.api.models import Heading, Position
from goldrush.api.tiles import VIEW_RADIUS, VIEW_SIZE, Action, Tile
from goldrush.memory.world import WorldModel

MARKER_HEADINGS = {"^": Heading.UP, ">": Heading.RIGHT, "v": Heading.DOWN, "<": Heading.LEFT}


def _find_player(picture: list[str]) -> tuple[int, int, Heading]:
    for row, line in enumerate(picture):
        for col, char in enumerate(line):
            if char in MARKER_HEADINGS:
                return row, col, MARKER_HEADINGS[char]
    raise ValueError("Picture has no player marker")


def build_world(picture: list[str], **inventory) -> WorldModel:
    """
    Build a world model from a map picture, north at the top.

    The player marker's cell becomes the origin. Cells outside the picture
    stay unknown. Keyword arguments are copied onto the inventory.
    """
    world = WorldModel()
    prow, pcol, heading = _find_player(picture)
    world.heading = heading

    for row, line in enumerate(picture):
        for col, char in enumerate(line):
            pos = Position(col - pcol, prow - row)
            tile = Tile.from_char(char)
            world.set_tile(pos, tile)
            if tile is Tile.GOLD:
                world.gold_location = pos
            elif tile is Tile.KEY:
                world.keys.add(pos)
            elif tile is Tile.AXE:
                world.axes.add(pos)
            elif tile is Tile.STONE:
                world.stones.add(pos)
            elif tile is Tile.WATER:
                world.waters.add(pos)

    for name, value in inventory.items():
        setattr(world.inventory, name, value)

    # Pretend the picture came from earlier views
    world.turn = 1
    return world


class GameSimulator:
    """
    Minimal game engine following the same rules as the real one.

    Cells outside the picture read as boundary. Walking into water
    without a stone or onto the boundary kills the player.
    """

    def __init__(self, picture: list[str]):
        self.row, self.col, self.heading = _find_player(picture)
        self.start = (self.row, self.col)
        self.grid = [list(line) for line in picture]
        self.grid[self.row][self.col] = " "

        self.has_axe = False
        self.has_key = False
        self.has_gold = False
        self.stones = 0
        self.dead = False
        self.actions: list[Action] = []

    def tile(self, row: int, col: int) -> str:
        if 0 <= row < len(self.grid) and 0 <= col < len(self.grid[row]):
            return self.grid[row][col]
        return "."

    def view(self) -> list[str]:
        """The 5x5 view in the player's facing frame."""
        aligned = np.empty((VIEW_SIZE, VIEW_SIZE), dtype=object)
        for i in range(VIEW_SIZE):
            for j in range(VIEW_SIZE):
                aligned[i, j] = self.tile(self.row + i - VIEW_RADIUS, self.col + j - VIEW_RADIUS)
        aligned[VIEW_RADIUS, VIEW_RADIUS] = "^"
        # Undo the clockwise alignment the agent applies
        facing = np.rot90(aligned, k=int(self.heading))
        return ["".join(row) for row in facing]

    def _ahead(self) -> tuple[int, int]:
        dx, dy = self.heading.delta
        return self.row - dy, self.col + dx

    def apply(self, action: Action) -> None:
        self.actions.append(action)
        row, col = self._ahead()
        ahead = self.tile(row, col)

        if action is Action.TURN_LEFT:
            self.heading = self.heading.turned_left()
        elif action is Action.TURN_RIGHT:
            self.heading = self.heading.turned_right()
        elif action is Action.CHOP:
            if ahead == "T" and self.has_axe:
                self.grid[row][col] = " "
        elif action is Action.UNLOCK:
            if ahead == "-" and self.has_key:
                self.grid[row][col] = " "
        elif action is Action.FORWARD:
            if ahead in ("*", "T", "-"):
                return
            if ahead == ".":
                self.dead = True
                return
            if ahead == "~":
                if self.stones == 0:
                    self.dead = True
                    return
                self.stones -= 1
                self.grid[row][col] = "O"
            elif ahead in ("a", "k", "o", "g"):
                if ahead == "a":
                    self.has_axe = True
                elif ahead == "k":
                    self.has_key = True
                elif ahead == "o":
                    self.stones += 1
                else:
                    self.has_gold = True
                self.grid[row][col] = " "
            self.row, self.col = row, col

    @property
    def won(self) -> bool:
        return self.has_gold and (self.row, self.col) == self.start

    def run(self, engine, max_moves: int = 500) -> int:
        """Play until the game is won, lost, or max_moves runs out."""
        while not self.won and not self.dead and len(self.actions) < max_moves:
            self.apply(engine.make_move(self.view()))
        return len(self.actions)


@pytest.fixture
def open_world():
    """A 7x7 room of open ground with the player in the middle, facing up."""
    return build_world([
        "*******",
        "*     *",
        "*     *",
        "*  ^  *",
        "*     *",
        "*     *",
        "*******",
    ])
