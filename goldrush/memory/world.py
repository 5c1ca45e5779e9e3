"""
World model for tracking what the agent has seen.

Maintains a map of the environment built up from the 5x5 views the game
engine sends each turn, together with the player's pose and inventory
and the locations of every tool, stone and water tile sighted so far.

The starting cell is the origin (0, 0) and the player initially
considers itself to be facing UP. Every other coordinate is an offset
from there, with y increasing northward.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from goldrush.api.models import (
    ORIGIN,
    Heading,
    Inventory,
    Position,
    ResourceRegistry,
)
from goldrush.api.tiles import VIEW_RADIUS, VIEW_SIZE, Action, Tile, parse_view, rotate_clockwise

logger = logging.getLogger(__name__)

# The environment is no larger than 80 by 80
MAX_GRID = 80

# Moving forward into these is a no-op; chop/unlock must clear them first
_BLOCKING_TILES = (Tile.WALL, Tile.DOOR, Tile.TREE)


class WorldModel:
    """
    Accumulated knowledge of the grid.

    The map covers every coordinate the player could possibly observe:
    starting from the origin the player can wander up to MAX_GRID cells in
    any direction and sees VIEW_RADIUS cells beyond that. Lookups outside
    this square are programming errors and raise IndexError.

    Example usage:
        world = WorldModel()

        # Each turn
        world.integrate_view(view)
        action = decide(world)
        world.apply_action(action)
    """

    def __init__(self, max_grid: int = MAX_GRID):
        """
        Initialize an empty world.

        Args:
            max_grid: Largest possible environment dimension
        """
        self.max_grid = max_grid
        self.extent = max_grid + VIEW_RADIUS
        size = 2 * self.extent + 1

        # Tile grid indexed [y + extent, x + extent]
        self._tiles = np.full((size, size), Tile.UNKNOWN, dtype=object)

        # Pose
        self.position: Position = ORIGIN
        self.heading: Heading = Heading.UP
        self.set_tile(ORIGIN, self.heading.marker)

        self.inventory = Inventory()

        # Resource locations
        self.gold_location: Optional[Position] = None
        self.axes = ResourceRegistry()
        self.keys = ResourceRegistry()
        self.stones = ResourceRegistry()
        self.waters = ResourceRegistry()

        # Statistics
        self.turn = 0
        self.total_moves = 0  # Includes no-op, chop and unlock moves

    # -------------------------------------------------------------------------
    # Map access
    # -------------------------------------------------------------------------

    def in_bounds(self, pos: Position) -> bool:
        """Check if a coordinate lies inside the tracked square."""
        return -self.extent <= pos.x <= self.extent and -self.extent <= pos.y <= self.extent

    def get_tile(self, pos: Position) -> Tile:
        """Get the tile at a coordinate."""
        if not self.in_bounds(pos):
            raise IndexError(f"Position {pos} is outside the world map (extent {self.extent})")
        return self._tiles[pos.y + self.extent, pos.x + self.extent]

    def set_tile(self, pos: Position, tile: Tile) -> None:
        """Overwrite the tile at a coordinate."""
        if not self.in_bounds(pos):
            raise IndexError(f"Position {pos} is outside the world map (extent {self.extent})")
        self._tiles[pos.y + self.extent, pos.x + self.extent] = tile

    def known_tiles(self, tile: Tile) -> list[Position]:
        """All coordinates currently holding a given tile type."""
        rows, cols = np.nonzero(self._tiles == tile)
        return [Position(int(col) - self.extent, int(row) - self.extent) for row, col in zip(rows, cols)]

    def position_in_front(
        self,
        pos: Optional[Position] = None,
        heading: Optional[Heading] = None,
    ) -> Position:
        """Coordinate directly ahead of pos (default: the player) when facing heading."""
        pos = self.position if pos is None else pos
        heading = self.heading if heading is None else heading
        return pos.move(heading)

    @property
    def gold_visible(self) -> bool:
        """Whether gold has ever been sighted."""
        return self.gold_location is not None

    @property
    def has_view(self) -> bool:
        return self.turn > 0

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def integrate_view(self, view: Union[np.ndarray, Sequence[str], bytes]) -> None:
        """
        Write a view into the map.

        The view arrives in the player's facing frame, so it is first rotated
        clockwise until it is aligned with the map's UP. After that, view cell
        (i, j) is the world coordinate (x + j - 2, y + 2 - i). The player's
        own cell is never transmitted and is drawn with the facing marker.

        Tiles currently marked as temporary water keep that marking; the
        stone placement logic owns them until the player crosses.

        Args:
            view: 5x5 Tile array (see parse_view), five row strings, or raw bytes
        """
        if not isinstance(view, np.ndarray):
            view = parse_view(view)

        aligned = rotate_clockwise(view, int(self.heading))

        for i in range(VIEW_SIZE):
            for j in range(VIEW_SIZE):
                pos = Position(
                    self.position.x + (j - VIEW_RADIUS),
                    self.position.y + (VIEW_RADIUS - i),
                )

                if i == VIEW_RADIUS and j == VIEW_RADIUS:
                    tile = self.heading.marker
                else:
                    tile = aligned[i, j]

                self._record_resource(pos, tile)

                if self.get_tile(pos) is Tile.TEMPORARY_WATER:
                    continue

                self.set_tile(pos, tile)

        self.turn += 1

    def _record_resource(self, pos: Position, tile: Tile) -> None:
        """Track the first sighting of gold and every tool/water coordinate."""
        if tile is Tile.GOLD:
            if self.gold_location is None:
                self.gold_location = pos
                logger.info(f"Gold sighted at {pos}")
        elif tile is Tile.AXE:
            if self.axes.add(pos):
                logger.debug(f"Axe sighted at {pos}")
        elif tile is Tile.KEY:
            if self.keys.add(pos):
                logger.debug(f"Key sighted at {pos}")
        elif tile is Tile.STONE:
            if self.stones.add(pos):
                logger.debug(f"Stepping stone sighted at {pos}")
        elif tile.is_water:
            self.waters.add(pos)

    def apply_action(self, action: Action) -> None:
        """
        Update pose and inventory for the move the player is about to make.

        Forward into a wall, door or tree is a no-op. Forward into water uses
        a stone; temporary water uses a second one for the placement it was
        reserved with and becomes a placed stone. Chop and unlock only count
        as moves; the next view shows their effect.

        Raises:
            RuntimeError: If no view has been integrated yet
        """
        if not self.has_view:
            raise RuntimeError("No view integrated yet. Call integrate_view() first.")

        self.total_moves += 1

        if action is Action.TURN_LEFT:
            self.heading = self.heading.turned_left()
            self.set_tile(self.position, self.heading.marker)
        elif action is Action.TURN_RIGHT:
            self.heading = self.heading.turned_right()
            self.set_tile(self.position, self.heading.marker)
        elif action is Action.FORWARD:
            self._move_forward()

    def _move_forward(self) -> None:
        ahead = self.position_in_front()
        tile = self.get_tile(ahead)

        if tile in _BLOCKING_TILES:
            logger.debug(f"Forward into {tile.name} at {ahead} is a no-op")
            return

        if tile is Tile.WATER or tile is Tile.TEMPORARY_WATER:
            if self.inventory.stones > 0:
                self.inventory.stones -= 1
            if tile is Tile.TEMPORARY_WATER:
                if self.inventory.stones > 0:
                    self.inventory.stones -= 1
                self.set_tile(ahead, Tile.STONE_PLACED)
            self.waters.discard(ahead)
        elif tile is Tile.STONE:
            self.stones.discard(ahead)
            self.inventory.stones += 1
        elif tile is Tile.AXE:
            self.inventory.has_axe = True
        elif tile is Tile.KEY:
            self.inventory.has_key = True
        elif tile is Tile.GOLD:
            self.inventory.has_gold = True
            logger.info(f"Gold collected at {ahead}")

        self.position = ahead

    # -------------------------------------------------------------------------
    # Debugging
    # -------------------------------------------------------------------------

    def render(self, radius: int = 12) -> str:
        """
        Text picture of the map around the player, north at the top.

        The first line summarizes position and inventory.
        """
        inv = self.inventory
        lines = [
            f"pos=({self.position.x}, {self.position.y}) facing={self.heading.name} "
            f"moves={self.total_moves} gold={inv.has_gold} key={inv.has_key} "
            f"axe={inv.has_axe} stones={inv.stones}"
        ]
        for y in range(self.position.y + radius, self.position.y - radius - 1, -1):
            row = []
            for x in range(self.position.x - radius, self.position.x + radius + 1):
                pos = Position(x, y)
                row.append(self.get_tile(pos).value if self.in_bounds(pos) else " ")
            lines.append("".join(row))
        return "\n".join(lines)
