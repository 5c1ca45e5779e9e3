"""
Data models for the gold-retrieval agent.

These dataclasses represent positions, facing, inventory and search
results in a structured, type-safe way shared by the world model, the
search routines and the decision engine.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .tiles import Tile


class Heading(IntEnum):
    """
    Facing direction.

    Ordered clockwise so a right turn is (d + 1) % 4 and a left turn is
    (d + 3) % 4. World coordinates are y-up: UP increases y.
    """

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for one step in this heading."""
        deltas = {
            Heading.UP: (0, 1),
            Heading.RIGHT: (1, 0),
            Heading.DOWN: (0, -1),
            Heading.LEFT: (-1, 0),
        }
        return deltas[self]

    @property
    def marker(self) -> Tile:
        """Tile used to draw the player facing this way."""
        markers = {
            Heading.UP: Tile.PLAYER_UP,
            Heading.RIGHT: Tile.PLAYER_RIGHT,
            Heading.DOWN: Tile.PLAYER_DOWN,
            Heading.LEFT: Tile.PLAYER_LEFT,
        }
        return markers[self]

    def turned_right(self) -> "Heading":
        return Heading((self + 1) % 4)

    def turned_left(self) -> "Heading":
        return Heading((self + 3) % 4)


@dataclass(frozen=True, order=True)
class Position:
    """A coordinate on the world map, relative to the starting cell."""

    x: int
    y: int

    def manhattan_distance(self, other: "Position") -> int:
        """Number of orthogonal steps between two positions on an open grid."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def heading_to(self, other: "Position") -> Heading | None:
        """Heading toward an orthogonally adjacent position, or None."""
        dx = other.x - self.x
        dy = other.y - self.y
        heading_map = {
            (0, 1): Heading.UP,
            (1, 0): Heading.RIGHT,
            (0, -1): Heading.DOWN,
            (-1, 0): Heading.LEFT,
        }
        return heading_map.get((dx, dy))

    def adjacent(self) -> list["Position"]:
        """Get the 4 orthogonal neighbours (right, left, up, down)."""
        return [
            Position(self.x + 1, self.y),
            Position(self.x - 1, self.y),
            Position(self.x, self.y + 1),
            Position(self.x, self.y - 1),
        ]

    def move(self, heading: Heading) -> "Position":
        """Get position after one step in a heading."""
        dx, dy = heading.delta
        return Position(self.x + dx, self.y + dy)

    def __add__(self, other: tuple[int, int]) -> "Position":
        """Add a delta tuple to position."""
        return Position(self.x + other[0], self.y + other[1])


ORIGIN = Position(0, 0)


@dataclass
class Inventory:
    """What the player is carrying."""

    has_axe: bool = False
    has_key: bool = False
    has_gold: bool = False
    stones: int = 0


class PathStopReason(Enum):
    """Reasons why a search stopped or couldn't start."""
    SUCCESS = "success"
    ALREADY_AT_TARGET = "already_at_target"
    TARGET_UNWALKABLE = "target_unwalkable"
    TARGET_OUT_OF_BOUNDS = "target_out_of_bounds"
    NO_PATH_EXISTS = "no_path_exists"
    NO_TARGET_FOUND = "no_target_found"


@dataclass
class PathResult:
    """Result of a path planning operation."""
    path: list[Position]
    reason: PathStopReason
    message: str = ""

    @property
    def success(self) -> bool:
        """Whether planning succeeded."""
        return self.reason == PathStopReason.SUCCESS

    def __bool__(self) -> bool:
        """Allow `if result:` to check for success."""
        return self.success and len(self.path) > 0

    def __iter__(self):
        """Allow `for position in result:` to walk the path."""
        return iter(self.path)

    def __len__(self) -> int:
        """Number of steps in the path."""
        return len(self.path)

    def __repr__(self) -> str:
        if self.success:
            return f"PathResult(path=[{len(self.path)} steps], reason=SUCCESS)"
        return f"PathResult(path=[], reason={self.reason.value}, message='{self.message}')"


@dataclass
class TargetResult:
    """Result of a target-finding operation (exploration)."""
    position: Position | None
    reason: PathStopReason
    message: str = ""

    @property
    def success(self) -> bool:
        """Whether a target was found."""
        return self.reason == PathStopReason.SUCCESS and self.position is not None

    def __bool__(self) -> bool:
        return self.success

    def __repr__(self) -> str:
        if self.success:
            return f"TargetResult(position={self.position}, reason=SUCCESS)"
        return f"TargetResult(position={self.position}, reason={self.reason.value}, message='{self.message}')"


@dataclass
class ResourceRegistry:
    """
    Insertion-ordered set of coordinates where a resource was seen.

    Duplicate sightings of the same coordinate are ignored.
    """

    positions: list[Position] = field(default_factory=list)

    def add(self, pos: Position) -> bool:
        """Record a sighting. Returns True if the coordinate is new."""
        if pos in self.positions:
            return False
        self.positions.append(pos)
        return True

    def discard(self, pos: Position) -> None:
        if pos in self.positions:
            self.positions.remove(pos)

    def __contains__(self, pos: object) -> bool:
        return pos in self.positions

    def __iter__(self):
        return iter(list(self.positions))

    def __len__(self) -> int:
        return len(self.positions)

    def __bool__(self) -> bool:
        return bool(self.positions)
