"""Tests for seeding and growing rooms."""

import random
from collections import deque

import numpy as np
import pytest

from roomcrawl.config import MapConfig
from roomcrawl.geometry import Point, orthogonal_neighbors
from roomcrawl.room_growth import NO_ROOM, choose_room_size, generate_rooms, grow_room


def empty_grid(width: int = 40, height: int = 30) -> np.ndarray:
    return np.full((height, width), NO_ROOM, dtype=int)


def is_orthogonally_connected(tiles) -> bool:
    tile_set = set(tiles)
    start = next(iter(tile_set))
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in orthogonal_neighbors(current):
            if neighbor in tile_set and neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return seen == tile_set


class TestGrowRoom:
    """Test growing a single room."""

    def test_horizontal_corridor_is_a_line_of_ten(self):
        """A 10x1 footprint with no collisions gives 10 tiles in one row."""
        grid = empty_grid()
        tiles = grow_room(grid, 0, Point(20, 15), 10, 1)

        assert len(tiles) == 10
        assert {t.y for t in tiles} == {15}
        assert sorted(t.x for t in tiles) == list(range(15, 25))

    def test_vertical_corridor_is_a_column_of_ten(self):
        """A 1x10 footprint with no collisions gives 10 tiles in one column."""
        grid = empty_grid()
        tiles = grow_room(grid, 0, Point(20, 15), 1, 10)

        assert {t.x for t in tiles} == {20}
        assert sorted(t.y for t in tiles) == list(range(10, 20))

    def test_corridor_clamped_at_left_edge_keeps_full_length(self):
        """Near the left edge the footprint shifts right instead of shrinking."""
        grid = empty_grid()
        tiles = grow_room(grid, 0, Point(2, 5), 10, 1)
        assert sorted(t.x for t in tiles) == list(range(0, 10))

    def test_corridor_clamped_at_right_edge(self):
        """Near the right edge the corridor is cut off by the map border."""
        grid = empty_grid()
        tiles = grow_room(grid, 0, Point(38, 5), 10, 1)
        assert sorted(t.x for t in tiles) == list(range(33, 40))

    def test_unobstructed_room_fills_its_rectangle(self):
        """With nothing in the way, a 4x3 room is a full 4x3 rectangle."""
        grid = empty_grid()
        tiles = grow_room(grid, 7, Point(10, 10), 4, 3)

        expected = {Point(x, y) for x in range(8, 12) for y in range(9, 12)}
        assert set(tiles) == expected
        assert int(np.count_nonzero(grid == 7)) == 12

    def test_seed_tile_comes_first(self):
        """The seed is the first claimed tile."""
        grid = empty_grid()
        tiles = grow_room(grid, 0, Point(10, 10), 5, 5)
        assert tiles[0] == Point(10, 10)

    def test_seed_on_claimed_tile_gets_nothing(self):
        """A room whose seed is already taken claims no tiles."""
        grid = empty_grid()
        grid[10, 10] = 0
        before = grid.copy()

        assert grow_room(grid, 1, Point(10, 10), 5, 5) == []
        assert np.array_equal(grid, before)

    def test_does_not_overwrite_or_grow_past_earlier_room(self):
        """Tiles of an earlier room are never taken, and block growth behind them."""
        grid = empty_grid()
        grid[:, 12] = 0  # a full-height strip owned by room 0

        tiles = grow_room(grid, 1, Point(10, 10), 8, 2)

        assert np.all(grid[:, 12] == 0)
        assert tiles
        assert all(t.x < 12 for t in tiles)

    def test_does_not_leak_through_diagonal_gap(self):
        """Growth can't squeeze between two rooms that touch only at a corner."""
        grid = empty_grid()
        # Rooms 0 and 1 meet diagonally at the corner between (11,9) and (12,10)
        grid[0:10, 11] = 0
        grid[10:30, 12] = 1

        tiles = grow_room(grid, 2, Point(10, 12), 8, 8)

        assert all(t.x <= 11 for t in tiles)
        assert is_orthogonally_connected(tiles)

    def test_tile_beside_seed_shadows_that_whole_side(self):
        """Growth only feeds outward, so one foreign tile next to the seed cuts off its side."""
        grid = empty_grid()
        grid[10, 9] = 5

        tiles = grow_room(grid, 0, Point(10, 10), 8, 8)

        # Box is x 6..13, y 6..13; only the four columns from the seed rightward fill
        assert len(tiles) == 32
        assert min(t.x for t in tiles) == 10
        assert grid[10, 9] == 5


class TestChooseRoomSize:
    """Test footprint selection."""

    def test_regular_rooms_before_the_last_tenth(self):
        """Early rooms are corridors or 2..8 rectangles."""
        rng = random.Random(3)
        for _ in range(200):
            w, h = choose_room_size(0, 100, rng)
            assert (w, h) in ((10, 1), (1, 10)) or (2 <= w <= 8 and 2 <= h <= 8)

    def test_big_rooms_in_the_last_tenth(self):
        """The last 10% of rooms are corridors or 15x15."""
        rng = random.Random(3)
        sizes = {choose_room_size(95, 100, rng) for _ in range(200)}
        assert sizes <= {(10, 1), (1, 10), (15, 15)}
        assert (15, 15) in sizes


class TestGenerateRooms:
    """Test growing a full level's worth of rooms."""

    @pytest.mark.parametrize("seed", [1, 42, 127, 999])
    def test_no_tile_belongs_to_two_rooms(self, seed):
        """Room tile lists are disjoint and agree with the grid."""
        grid, rooms = generate_rooms(MapConfig(), random.Random(seed))

        all_tiles = [t for room in rooms.values() for t in room.tiles]
        assert len(all_tiles) == len(set(all_tiles))
        for room_id, room in rooms.items():
            for tile in room.tiles:
                assert grid[tile.y, tile.x] == room_id
        assert len(all_tiles) == int(np.count_nonzero(grid != NO_ROOM))

    @pytest.mark.parametrize("seed", [1, 42, 127, 999])
    def test_rooms_are_orthogonally_connected(self, seed):
        """Every room is one connected blob without diagonal-only joins."""
        _, rooms = generate_rooms(MapConfig(), random.Random(seed))
        for room in rooms.values():
            assert is_orthogonally_connected(room.tiles), f"room {room.room_id}"

    def test_empty_rooms_are_dropped(self):
        """Seeds that collide leave no zero-tile rooms behind."""
        _, rooms = generate_rooms(MapConfig(), random.Random(127))

        assert 0 < len(rooms) < 100
        assert all(room.tiles for room in rooms.values())
        assert set(rooms) <= set(range(100))

    def test_center_is_a_room_tile(self):
        """Each room's center is its seed, which it always owns."""
        _, rooms = generate_rooms(MapConfig(), random.Random(127))
        for room in rooms.values():
            assert room.tiles[0] == room.center

    def test_same_seed_same_rooms(self):
        """Generation is deterministic for a fixed seed."""
        grid1, rooms1 = generate_rooms(MapConfig(), random.Random(127))
        grid2, rooms2 = generate_rooms(MapConfig(), random.Random(127))

        assert np.array_equal(grid1, grid2)
        assert rooms1 == rooms2

    def test_respects_map_size(self):
        """The grid has the configured shape."""
        grid, _ = generate_rooms(MapConfig(width=20, height=10, num_rooms=10), random.Random(5))
        assert grid.shape == (10, 20)
