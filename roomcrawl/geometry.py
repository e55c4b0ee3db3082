"""
Tile and edge coordinates.

Tiles are addressed by (x, y). Walls are thin: they live on the edges between
tiles rather than occupying tiles of their own. Each tile owns only its NORTH
and WEST edges, because every wall is shared with a neighbor:

    the SOUTH edge of (x, y) is the NORTH edge of (x, y + 1)
    the EAST edge of (x, y) is the WEST edge of (x + 1, y)

Always address an edge by the south-east tile of the pair (the tile that owns
it as its NORTH or WEST side). Use edge_between() rather than building Edge
values by hand, otherwise walls will silently duplicate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Point:
    """A tile position on the map."""

    x: int
    y: int


class Side(Enum):
    """The two sides a tile owns."""

    NORTH = "N"
    WEST = "W"


class EdgeState(Enum):
    """State of an edge that has something on it. Open floor is not stored."""

    WALL = "wall"
    CLOSED_DOOR = "closed-door"
    OPEN_DOOR = "open-door"

    @property
    def is_door(self) -> bool:
        return self in (EdgeState.CLOSED_DOOR, EdgeState.OPEN_DOOR)


@dataclass(frozen=True)
class Edge:
    """The wall slot on the `side` of tile (x, y)."""

    x: int
    y: int
    side: Side

    def tiles(self) -> Tuple[Point, Point]:
        """Returns the two tiles this edge separates, north-west-most first."""
        if self.side == Side.NORTH:
            return Point(self.x, self.y - 1), Point(self.x, self.y)
        return Point(self.x - 1, self.y), Point(self.x, self.y)

    def other_side(self, p: Point) -> Point:
        """Returns the tile across this edge from p."""
        a, b = self.tiles()
        if p == a:
            return b
        if p == b:
            return a
        raise ValueError(f"{p} is not next to edge {self}")

    @property
    def key(self) -> str:
        return edge_key(self.x, self.y, self.side)


def tile_key(x: int, y: int) -> str:
    return f"{x},{y}"


def edge_key(x: int, y: int, side: Side) -> str:
    return f"{x},{y},{side.value}"


def parse_edge_key(key: str) -> Edge:
    """Inverse of edge_key()."""
    x, y, s = key.split(",")
    return Edge(int(x), int(y), Side(s))


def edge_between(a: Point, b: Point) -> Optional[Edge]:
    """
    Returns the canonical edge between two orthogonally adjacent tiles.

    Returns None for diagonal, distant, or identical tiles. The result does
    not depend on argument order.
    """
    if a.x == b.x and a.y == b.y - 1:
        return Edge(b.x, b.y, Side.NORTH)
    if a.x == b.x and a.y == b.y + 1:
        return Edge(a.x, a.y, Side.NORTH)
    if a.x == b.x - 1 and a.y == b.y:
        return Edge(b.x, b.y, Side.WEST)
    if a.x == b.x + 1 and a.y == b.y:
        return Edge(a.x, a.y, Side.WEST)
    return None


def edges_around_tile(p: Point) -> List[Edge]:
    """Returns the 4 canonical edges touching a tile: N, W, S, E."""
    return [
        Edge(p.x, p.y, Side.NORTH),
        Edge(p.x, p.y, Side.WEST),
        Edge(p.x, p.y + 1, Side.NORTH),
        Edge(p.x + 1, p.y, Side.WEST),
    ]


def orthogonal_neighbors(p: Point) -> List[Point]:
    """4-directional neighbors: North, South, West, East."""
    return [
        Point(p.x, p.y - 1),
        Point(p.x, p.y + 1),
        Point(p.x - 1, p.y),
        Point(p.x + 1, p.y),
    ]
