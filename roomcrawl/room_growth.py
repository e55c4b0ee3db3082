"""
Room Growth
===========

Rooms are grown from random seed points rather than stamped as rectangles:

1. Scatter `num_rooms` seed points uniformly over the map.
2. For each seed (in generation order) draw a target footprint:
   - a 10x1 or 1x10 corridor with a small fixed chance
   - otherwise a random 2..8 x 2..8 room for the first 90% of seeds
   - a big 15x15 room for the last 10%
3. If the seed tile already belongs to an earlier room, the new room gets
   nothing. Earlier rooms always win.
4. Otherwise grow outward from the seed in rings. Each ring first extends the
   left/right columns, then the top/bottom rows. A tile is only claimed if it
   is unclaimed and the tile next to it, one step closer to the seed, already
   belongs to this room. That keeps every room orthogonally connected; a room
   can't leak through a diagonal gap between two other rooms.
5. Rooms that claimed zero tiles are dropped.

The footprint is a target. Map edges and earlier rooms can leave a room
smaller or oddly shaped.

Because claims only feed outward from the seed, a room is never a full
flood fill of its box. A single foreign tile directly beside the seed
shadows everything behind it: with an earlier room's tile at (9, 10), an
8x8 room seeded at (10, 10) gets the 32 tiles at x >= 10 and nothing to the
left, even though most of that half is free. Changing the claim rule
changes every seeded level.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np

from .config import (
    BIG_ROOM_SIZE,
    CORRIDOR_CHANCE,
    CORRIDOR_LENGTH,
    REGULAR_ROOM_FRACTION,
    REGULAR_ROOM_MAX,
    REGULAR_ROOM_MIN,
    MapConfig,
)
from .geometry import Edge, Point

# Value stored in the room grid for tiles that no room claimed
NO_ROOM: int = -1

# Type Definition: room_grid[y, x] -> room id or NO_ROOM
RoomGrid = np.ndarray


@dataclass(frozen=True)
class Adjacency:
    """One door from a room to a neighboring room."""

    room_id: int
    door: Edge


@dataclass
class Room:
    room_id: int
    center: Point  # the growth seed; always one of the room's tiles
    tiles: List[Point] = field(default_factory=list)
    adjacent: List[Adjacency] = field(default_factory=list)
    explored: bool = False

    @property
    def area(self) -> int:
        return len(self.tiles)

    def neighbor_ids(self) -> List[int]:
        return [a.room_id for a in self.adjacent]


def choose_room_size(room_id: int, num_rooms: int, rng: random.Random) -> Tuple[int, int]:
    """Returns the (width, height) target footprint for a room."""
    if rng.randint(0, 100) < CORRIDOR_CHANCE:
        return CORRIDOR_LENGTH, 1
    if rng.randint(0, 100) < CORRIDOR_CHANCE:
        return 1, CORRIDOR_LENGTH
    if room_id < num_rooms * REGULAR_ROOM_FRACTION:
        return (
            rng.randint(REGULAR_ROOM_MIN, REGULAR_ROOM_MAX),
            rng.randint(REGULAR_ROOM_MIN, REGULAR_ROOM_MAX),
        )
    return BIG_ROOM_SIZE, BIG_ROOM_SIZE


def room_bounds(
    room_grid: RoomGrid, seed: Point, width: int, height: int
) -> Tuple[int, int, int, int]:
    """
    Returns the (left, top, right, bottom) box a room may grow into.

    The box is width x height tiles roughly centered on the seed, clamped to
    the map. All four values are inclusive.
    """
    rows, cols = room_grid.shape
    left = max(0, seed.x - width // 2)
    top = max(0, seed.y - height // 2)
    right = min(cols - 1, left + width - 1)
    bottom = min(rows - 1, top + height - 1)
    return left, top, right, bottom


def grow_room(
    room_grid: RoomGrid, room_id: int, seed: Point, width: int, height: int
) -> List[Point]:
    """
    Grow one room from its seed, writing its id into room_grid.

    Returns the claimed tiles in claim order (seed first), or an empty list if
    the seed tile was already taken.
    """
    if room_grid[seed.y, seed.x] != NO_ROOM:
        return []

    left, top, right, bottom = room_bounds(room_grid, seed, width, height)
    room_grid[seed.y, seed.x] = room_id
    tiles: List[Point] = [seed]

    def claim(x: int, y: int, inner_x: int, inner_y: int) -> None:
        if room_grid[y, x] != NO_ROOM:
            return
        if room_grid[inner_y, inner_x] != room_id:
            return
        room_grid[y, x] = room_id
        tiles.append(Point(x, y))

    reach = max(seed.x - left, right - seed.x, seed.y - top, bottom - seed.y)
    for distance in range(1, reach + 1):
        # Left and right columns, each tile fed from the column inside it
        for x, step_in in ((seed.x - distance, 1), (seed.x + distance, -1)):
            if left <= x <= right:
                for y in range(top, bottom + 1):
                    claim(x, y, x + step_in, y)
        # Then the top and bottom rows, fed from the row inside them
        for y, step_in in ((seed.y - distance, 1), (seed.y + distance, -1)):
            if top <= y <= bottom:
                for x in range(left, right + 1):
                    claim(x, y, x, y + step_in)

    return tiles


def generate_rooms(
    config: MapConfig, rng: random.Random
) -> Tuple[RoomGrid, Dict[int, Room]]:
    """
    Seed and grow every room for one level.

    Returns the room grid and the non-empty rooms keyed by id. Ids are the
    generation order, so they have gaps where rooms were dropped.
    """
    room_grid: RoomGrid = np.full((config.height, config.width), NO_ROOM, dtype=int)

    # All seeds are drawn before any footprint, so the seed layout doesn't
    # depend on footprint rolls.
    seeds = [
        Point(rng.randrange(config.width), rng.randrange(config.height))
        for _ in range(config.num_rooms)
    ]

    rooms: Dict[int, Room] = {}
    for room_id, seed in enumerate(seeds):
        width, height = choose_room_size(room_id, config.num_rooms, rng)
        tiles = grow_room(room_grid, room_id, seed, width, height)
        if tiles:
            rooms[room_id] = Room(room_id=room_id, center=seed, tiles=tiles)

    return room_grid, rooms
