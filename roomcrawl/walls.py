"""
Walls and doors derived from room ownership.

Any edge whose two tiles belong to different rooms gets a wall. Tiles with no
room, including everything off the map, count as their own "room" here, so
the map border is always walled. Wherever two real rooms touch, every shared
edge is a door candidate. Exactly one candidate per touching pair is promoted
to a closed door.

This gives a door between *every* pair of touching rooms, which is more doors
than a level needs. See passes.prune_doors_to_spanning_tree() for the optional
cleanup.
"""

import random
from typing import Dict, List, Tuple

import numpy as np

from .geometry import Edge, EdgeState, Side
from .room_growth import NO_ROOM, Adjacency, Room, RoomGrid

EdgeMap = Dict[Edge, EdgeState]
# (lower room id, higher room id) -> shared edges, in scan order
DoorCandidates = Dict[Tuple[int, int], List[Edge]]


def _padded(room_grid: RoomGrid) -> np.ndarray:
    """The room grid with a one-tile NO_ROOM border all round."""
    rows, cols = room_grid.shape
    padded = np.full((rows + 2, cols + 2), NO_ROOM, dtype=room_grid.dtype)
    padded[1:-1, 1:-1] = room_grid
    return padded


def derive_walls(room_grid: RoomGrid) -> Tuple[EdgeMap, DoorCandidates]:
    """
    Scan every edge on (and around) the map and wall off room boundaries.

    Returns the wall set and the door candidates grouped by room pair.
    """
    rows, cols = room_grid.shape
    padded = _padded(room_grid)

    # NORTH edges: anchor (x, y) for x in [0, cols), y in [0, rows]
    above = padded[0 : rows + 1, 1 : cols + 1]
    below = padded[1 : rows + 2, 1 : cols + 1]
    # WEST edges: anchor (x, y) for x in [0, cols], y in [0, rows)
    west = padded[1 : rows + 1, 0 : cols + 1]
    east = padded[1 : rows + 1, 1 : cols + 2]

    edges: EdgeMap = {}
    candidates: DoorCandidates = {}

    for side, first, second in ((Side.NORTH, above, below), (Side.WEST, west, east)):
        for y, x in np.argwhere(first != second):
            edge = Edge(int(x), int(y), side)
            edges[edge] = EdgeState.WALL
            room1, room2 = int(first[y, x]), int(second[y, x])
            if room1 != NO_ROOM and room2 != NO_ROOM:
                pair = (min(room1, room2), max(room1, room2))
                candidates.setdefault(pair, []).append(edge)

    return edges, candidates


def carve_doors(
    edges: EdgeMap,
    candidates: DoorCandidates,
    rooms: Dict[int, Room],
    rng: random.Random,
) -> None:
    """Promote one random candidate per room pair to a closed door, in place."""
    for (room1, room2), options in candidates.items():
        door = rng.choice(options)
        edges[door] = EdgeState.CLOSED_DOOR
        rooms[room1].adjacent.append(Adjacency(room_id=room2, door=door))
        rooms[room2].adjacent.append(Adjacency(room_id=room1, door=door))


def build_walls_and_doors(
    room_grid: RoomGrid, rooms: Dict[int, Room], rng: random.Random
) -> EdgeMap:
    edges, candidates = derive_walls(room_grid)
    carve_doors(edges, candidates, rooms, rng)
    return edges
