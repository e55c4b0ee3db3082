"""
The per-level map: rooms, walls, doors, and what the player can see.

Visibility is decided per room, not per tile. Everything in your own room is
visible, whatever its shape. You can see into a neighboring room only while
standing on one of the two tiles next to an open door into it.
"""

from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from .geometry import (
    Edge,
    EdgeState,
    Point,
    edge_between,
    edges_around_tile,
    parse_edge_key,
)
from .room_growth import NO_ROOM, Adjacency, Room, RoomGrid
from .walls import EdgeMap, derive_walls


class MapInvariantError(RuntimeError):
    """Raised for map calls that can only happen because of a bug elsewhere."""


class GameMap:
    def __init__(
        self,
        dungeon_level: int,
        room_grid: RoomGrid,
        edges: EdgeMap,
        rooms: Dict[int, Room],
    ) -> None:
        self.dungeon_level: int = dungeon_level

        # room_grid[y, x] -> room id, or NO_ROOM
        self.room_grid: RoomGrid = room_grid
        self.edges: EdgeMap = edges
        self.rooms: Dict[int, Room] = rooms

        self.rows: int
        self.cols: int
        self.rows, self.cols = self.room_grid.shape

    @property
    def width(self) -> int:
        return self.cols

    @property
    def height(self) -> int:
        return self.rows

    def in_bounds(self, p: Point) -> bool:
        return 0 <= p.x < self.cols and 0 <= p.y < self.rows

    # ---- tiles and rooms ----

    def room_id_at(self, p: Point) -> Optional[int]:
        """Returns the id of the room owning tile p, or None."""
        if not self.in_bounds(p):
            return None
        room_id = int(self.room_grid[p.y, p.x])
        return None if room_id == NO_ROOM else room_id

    def room_at(self, p: Point) -> Optional[Room]:
        room_id = self.room_id_at(p)
        return None if room_id is None else self.rooms[room_id]

    def room_list(self) -> List[Room]:
        """Rooms in generation order."""
        return list(self.rooms.values())

    def first_room(self) -> Room:
        return next(iter(self.rooms.values()))

    def last_room(self) -> Room:
        return next(reversed(self.rooms.values()))

    # ---- walls and doors ----

    def edge_state(self, edge: Optional[Edge]) -> Optional[EdgeState]:
        """Returns the state of an edge, or None for open floor."""
        if edge is None:
            return None
        return self.edges.get(edge)

    def edge_state_between(self, a: Point, b: Point) -> Optional[EdgeState]:
        return self.edge_state(edge_between(a, b))

    def is_door(self, edge: Edge) -> bool:
        state = self.edges.get(edge)
        return state is not None and state.is_door

    def doors(self) -> Iterator[Edge]:
        return (edge for edge, state in self.edges.items() if state.is_door)

    def walls(self) -> Iterator[Edge]:
        return (edge for edge, state in self.edges.items() if state == EdgeState.WALL)

    def open_door(self, edge: Edge) -> bool:
        """
        Open a door. Returns False if it was already open.

        Raises:
            MapInvariantError: If the edge is not a door.
        """
        state = self.edges.get(edge)
        if state is None or not state.is_door:
            raise MapInvariantError(f"Cannot open {edge}: it is {state}, not a door")
        self.edges[edge] = EdgeState.OPEN_DOOR
        return state != EdgeState.OPEN_DOOR

    def close_door(self, edge: Edge) -> bool:
        """
        Close a door. Returns False if it was already closed.

        Raises:
            MapInvariantError: If the edge is not a door.
        """
        state = self.edges.get(edge)
        if state is None or not state.is_door:
            raise MapInvariantError(f"Cannot close {edge}: it is {state}, not a door")
        self.edges[edge] = EdgeState.CLOSED_DOOR
        return state != EdgeState.CLOSED_DOOR

    def can_move(self, a: Point, b: Point) -> bool:
        """
        Can an actor step from tile a to tile b?

        Only orthogonal single steps are legal. Walls and closed doors block;
        open doors and open floor don't. Occupants are the caller's problem.
        """
        edge = edge_between(a, b)
        if edge is None:
            return False
        state = self.edges.get(edge)
        return state is None or state == EdgeState.OPEN_DOOR

    # ---- exploration and visibility ----

    def set_explored(self, at: Point) -> bool:
        """
        Mark the whole room containing `at` as explored.

        Returns True if the room was not explored before.
        """
        room = self.room_at(at)
        if room is None:
            raise MapInvariantError(f"set_explored called on {at}, which is not in a room")
        newly_explored = not room.explored
        room.explored = True
        return newly_explored

    def is_explored(self, at: Point) -> bool:
        room = self.room_at(at)
        return room is not None and room.explored

    def is_visible(self, from_point: Point, to_point: Point) -> bool:
        from_room = self.room_id_at(from_point)
        if from_room is None:
            raise MapInvariantError(
                f"is_visible should be called from inside a room, got {from_point}"
            )
        to_room = self.room_id_at(to_point)
        if to_room is None:
            return False
        if from_room == to_room:
            # You can see everything in the same room
            return True
        for edge in edges_around_tile(from_point):
            if self.edges.get(edge) != EdgeState.OPEN_DOOR:
                continue
            # Standing next to an open door: you can see the room beyond it
            if self.room_id_at(edge.other_side(from_point)) == to_room:
                return True
        return False

    # ---- consistency ----

    def validate(self) -> None:
        """
        Check the structural invariants of the map.

        Raises:
            MapInvariantError: Describing the first broken invariant found.
        """
        grid_ids = set(int(v) for v in np.unique(self.room_grid)) - {NO_ROOM}
        missing = grid_ids - set(self.rooms)
        if missing:
            raise MapInvariantError(f"Tiles reference unknown rooms {sorted(missing)}")

        for room_id, room in self.rooms.items():
            if room.room_id != room_id:
                raise MapInvariantError(f"Room {room_id} is stored as {room.room_id}")
            if len(set(room.tiles)) != len(room.tiles):
                raise MapInvariantError(f"Room {room_id} lists a tile twice")
            for tile in room.tiles:
                if self.room_id_at(tile) != room_id:
                    raise MapInvariantError(
                        f"Room {room_id} lists {tile}, owned by {self.room_id_at(tile)}"
                    )
            if int(np.count_nonzero(self.room_grid == room_id)) != len(room.tiles):
                raise MapInvariantError(f"Room {room_id} tile list doesn't match the grid")

        expected_walls, _ = derive_walls(self.room_grid)
        if set(expected_walls) != set(self.edges):
            extra = set(self.edges) - set(expected_walls)
            absent = set(expected_walls) - set(self.edges)
            raise MapInvariantError(
                f"Wall set doesn't match room boundaries: "
                f"{len(extra)} extra, {len(absent)} missing"
            )

        for door in self.doors():
            a, b = door.tiles()
            room1, room2 = self.room_id_at(a), self.room_id_at(b)
            if room1 is None or room2 is None:
                raise MapInvariantError(f"Door {door} does not join two rooms")
            for here, there in ((room1, room2), (room2, room1)):
                if Adjacency(room_id=there, door=door) not in self.rooms[here].adjacent:
                    raise MapInvariantError(
                        f"Door {door} missing from room {here}'s adjacency list"
                    )

        for room in self.rooms.values():
            for adjacency in room.adjacent:
                if not self.is_door(adjacency.door):
                    raise MapInvariantError(
                        f"Room {room.room_id} lists {adjacency.door}, which is not a door"
                    )
                sides = {self.room_id_at(t) for t in adjacency.door.tiles()}
                if sides != {room.room_id, adjacency.room_id}:
                    raise MapInvariantError(
                        f"Room {room.room_id} lists door {adjacency.door} "
                        f"to {adjacency.room_id}, but it joins {sorted(sides)}"
                    )

    # ---- serialization ----

    def to_dict(self) -> Dict[str, Any]:
        """A JSON-compatible snapshot that from_dict() can rebuild."""
        return {
            "dungeon_level": self.dungeon_level,
            "width": self.cols,
            "height": self.rows,
            "rooms": [
                {
                    "id": room.room_id,
                    "center": [room.center.x, room.center.y],
                    "tiles": [[t.x, t.y] for t in room.tiles],
                    "adjacent": [
                        {"room_id": a.room_id, "door": a.door.key} for a in room.adjacent
                    ],
                    "explored": room.explored,
                }
                for room in self.rooms.values()
            ],
            "edges": {edge.key: state.value for edge, state in self.edges.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameMap":
        room_grid: RoomGrid = np.full((data["height"], data["width"]), NO_ROOM, dtype=int)
        rooms: Dict[int, Room] = {}
        for entry in data["rooms"]:
            room_id = entry["id"]
            tiles = [Point(x, y) for x, y in entry["tiles"]]
            for tile in tiles:
                room_grid[tile.y, tile.x] = room_id
            rooms[room_id] = Room(
                room_id=room_id,
                center=Point(*entry["center"]),
                tiles=tiles,
                adjacent=[
                    Adjacency(room_id=a["room_id"], door=parse_edge_key(a["door"]))
                    for a in entry["adjacent"]
                ],
                explored=entry["explored"],
            )
        edges: EdgeMap = {
            parse_edge_key(key): EdgeState(value) for key, value in data["edges"].items()
        }
        return cls(data["dungeon_level"], room_grid, edges, rooms)
