"""Tests for the world model."""

import pytest

from goldrush.api.models import ORIGIN, Heading, Position
from goldrush.api.tiles import Action, Tile
from goldrush.memory.world import WorldModel

from conftest import build_world

# Ahead of the player: a key two north, gold one north-east, water at the left edge
FIRST_VIEW = [
    "  k  ",
    "   g ",
    "~ ^  ",
    "     ",
    "*****",
]


class TestWorldModelInit:
    """Tests for a fresh world."""

    def test_starts_at_origin_facing_up(self):
        world = WorldModel()
        assert world.position == ORIGIN
        assert world.heading is Heading.UP
        assert world.get_tile(ORIGIN) is Tile.PLAYER_UP

    def test_everything_else_unknown(self):
        world = WorldModel()
        assert world.get_tile(Position(5, -7)) is Tile.UNKNOWN
        assert world.get_tile(Position(82, 82)) is Tile.UNKNOWN

    def test_out_of_bounds_raises(self):
        world = WorldModel()
        with pytest.raises(IndexError):
            world.get_tile(Position(83, 0))
        with pytest.raises(IndexError):
            world.set_tile(Position(0, -83), Tile.SPACE)

    def test_action_before_first_view(self):
        world = WorldModel()
        with pytest.raises(RuntimeError, match="integrate_view"):
            world.apply_action(Action.FORWARD)


class TestIntegrateView:
    """Tests for writing views into the map."""

    def test_facing_up_maps_directly(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)

        assert world.get_tile(Position(0, 2)) is Tile.KEY
        assert world.get_tile(Position(1, 1)) is Tile.GOLD
        assert world.get_tile(Position(-2, 0)) is Tile.WATER
        assert world.get_tile(Position(0, -2)) is Tile.WALL
        assert world.get_tile(ORIGIN) is Tile.PLAYER_UP
        assert world.turn == 1

    def test_resources_are_recorded(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)

        assert world.gold_visible
        assert world.gold_location == Position(1, 1)
        assert Position(0, 2) in world.keys
        assert Position(-2, 0) in world.waters
        assert not world.axes

    def test_same_view_twice_is_idempotent(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)
        before = world.render()
        world.integrate_view(FIRST_VIEW)

        assert world.render() == before
        assert len(world.keys) == 1
        assert len(world.waters) == 1

    def test_rotated_view_facing_right(self):
        """Facing right, the top row of the view is the column to the east."""
        world = WorldModel()
        world.integrate_view(["     "] * 5)
        world.apply_action(Action.TURN_RIGHT)

        world.integrate_view([
            "    g",
            "     ",
            "  ^  ",
            "     ",
            "*    ",
        ])

        # Top-right corner of a right-facing view is two east, two south
        assert world.get_tile(Position(2, -2)) is Tile.GOLD
        # Bottom-left corner is two west, two north
        assert world.get_tile(Position(-2, 2)) is Tile.WALL
        assert world.get_tile(ORIGIN) is Tile.PLAYER_RIGHT

    def test_rotated_view_facing_down(self):
        world = WorldModel()
        world.integrate_view(["     "] * 5)
        world.apply_action(Action.TURN_RIGHT)
        world.apply_action(Action.TURN_RIGHT)

        world.integrate_view([
            "  k  ",
            "     ",
            "  ^  ",
            "     ",
            "     ",
        ])

        assert world.get_tile(Position(0, -2)) is Tile.KEY

    def test_accepts_raw_bytes(self):
        world = WorldModel()
        raw = "".join(FIRST_VIEW)
        world.integrate_view((raw[:12] + raw[13:]).encode("ascii"))
        assert world.get_tile(Position(0, 2)) is Tile.KEY

    def test_temporary_water_survives_new_views(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)
        world.set_tile(Position(-2, 0), Tile.TEMPORARY_WATER)

        world.integrate_view(FIRST_VIEW)

        assert world.get_tile(Position(-2, 0)) is Tile.TEMPORARY_WATER

    def test_gold_location_is_first_sighting(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)
        world.integrate_view(["g    "] + ["     "] * 4)
        assert world.gold_location == Position(1, 1)


class TestApplyAction:
    """Tests for pose and inventory updates."""

    def test_turns_update_heading_and_marker(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)

        world.apply_action(Action.TURN_LEFT)
        assert world.heading is Heading.LEFT
        assert world.get_tile(ORIGIN) is Tile.PLAYER_LEFT

        world.apply_action(Action.TURN_RIGHT)
        world.apply_action(Action.TURN_RIGHT)
        assert world.heading is Heading.RIGHT
        assert world.total_moves == 3

    def test_forward_onto_space(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)
        world.apply_action(Action.FORWARD)
        assert world.position == Position(0, 1)

    def test_forward_picks_up_key(self):
        world = build_world(["k", "^"])
        world.apply_action(Action.FORWARD)
        assert world.inventory.has_key
        assert world.position == Position(0, 1)

    def test_forward_picks_up_gold(self):
        world = build_world(["g", "^"])
        world.apply_action(Action.FORWARD)
        assert world.inventory.has_gold

    def test_forward_picks_up_stone(self):
        world = build_world(["o", "^"])
        world.apply_action(Action.FORWARD)
        assert world.inventory.stones == 1
        assert Position(0, 1) not in world.stones

    @pytest.mark.parametrize("blocker", ["*", "T", "-"])
    def test_forward_into_blocker_is_noop(self, blocker):
        world = build_world([blocker, "^"])
        world.apply_action(Action.FORWARD)
        assert world.position == ORIGIN
        assert world.total_moves == 1

    def test_forward_into_water_uses_stone(self):
        world = build_world(["~", "^"], stones=2)
        world.apply_action(Action.FORWARD)
        assert world.position == Position(0, 1)
        assert world.inventory.stones == 1
        assert Position(0, 1) not in world.waters

    def test_temporary_water_becomes_placed_stone(self):
        world = build_world(["~", "^"], stones=1)
        world.set_tile(Position(0, 1), Tile.TEMPORARY_WATER)

        world.apply_action(Action.FORWARD)

        assert world.get_tile(Position(0, 1)) is Tile.STONE_PLACED
        assert world.inventory.stones == 0

    def test_temporary_water_stone_count_never_negative(self):
        world = build_world(["~", "^"], stones=0)
        world.set_tile(Position(0, 1), Tile.TEMPORARY_WATER)
        world.apply_action(Action.FORWARD)
        assert world.inventory.stones == 0

    def test_chop_and_unlock_only_count_moves(self):
        world = build_world(["T", "^"], has_axe=True)
        world.apply_action(Action.CHOP)
        world.apply_action(Action.UNLOCK)

        assert world.get_tile(Position(0, 1)) is Tile.TREE
        assert world.position == ORIGIN
        assert world.total_moves == 2


class TestWorldQueries:
    """Tests for read-only helpers."""

    def test_position_in_front(self):
        world = WorldModel()
        assert world.position_in_front() == Position(0, 1)
        assert world.position_in_front(Position(3, 3), Heading.LEFT) == Position(2, 3)

    def test_known_tiles(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)
        walls = world.known_tiles(Tile.WALL)
        assert len(walls) == 5
        assert all(pos.y == -2 for pos in walls)

    def test_render_shows_player_and_inventory(self):
        world = WorldModel()
        world.integrate_view(FIRST_VIEW)
        picture = world.render(radius=2)
        lines = picture.splitlines()

        assert lines[0].startswith("pos=(0, 0) facing=UP")
        assert lines[1:] == ["  k  ", "   g ", "~ ^  ", "     ", "*****"]
