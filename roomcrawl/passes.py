"""
Optional post-generation passes over a finished GameMap.

None of these run by default; MapConfig switches them on. Each one keeps the
map consistent (GameMap.validate() still passes afterwards).
"""

import random
import sys
from collections import deque
from typing import Deque, Dict, Iterable, List, Set

from .game_map import GameMap
from .geometry import Edge, EdgeState
from .room_growth import NO_ROOM
from .walls import derive_walls


def drop_rooms(game_map: GameMap, room_ids: Iterable[int]) -> None:
    """
    Remove rooms from the map, turning their tiles back into unallocated space.

    Walls are recomputed from the new room layout. Doors between two surviving
    rooms keep their current state.
    """
    doomed = set(room_ids)
    if not doomed:
        return

    for room_id in doomed:
        room = game_map.rooms.pop(room_id)
        for tile in room.tiles:
            game_map.room_grid[tile.y, tile.x] = NO_ROOM

    for room in game_map.rooms.values():
        room.adjacent = [a for a in room.adjacent if a.room_id not in doomed]

    door_states = {edge: state for edge, state in game_map.edges.items() if state.is_door}
    walls, _ = derive_walls(game_map.room_grid)
    for room in game_map.rooms.values():
        for adjacency in room.adjacent:
            walls[adjacency.door] = door_states[adjacency.door]

    game_map.edges.clear()
    game_map.edges.update(walls)


def filter_small_rooms(game_map: GameMap, min_area: int) -> List[int]:
    """
    Drop sliver rooms with fewer than min_area tiles.

    Room growth can leave tiny or pinched rooms behind. That's the growth
    algorithm working as designed; this pass is the explicit way to get rid of
    them. Returns the dropped room ids.
    """
    small = [room_id for room_id, room in game_map.rooms.items() if room.area < min_area]
    if small:
        print(
            f"Dropping {len(small)} rooms smaller than {min_area} tiles",
            file=sys.stderr,
        )
    drop_rooms(game_map, small)
    return small


def room_components(game_map: GameMap) -> List[Set[int]]:
    """Connected groups of rooms, joined by doors whether open or closed."""
    seen: Set[int] = set()
    components: List[Set[int]] = []
    for start in game_map.rooms:
        if start in seen:
            continue
        component = {start}
        queue: Deque[int] = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in game_map.rooms[current].neighbor_ids():
                if neighbor not in component:
                    component.add(neighbor)
                    queue.append(neighbor)
        seen |= component
        components.append(component)
    return components


def keep_largest_component(game_map: GameMap) -> List[int]:
    """
    Drop every room not reachable from the largest connected group.

    Ties go to the group holding the lowest room id. Returns the dropped ids.
    """
    components = room_components(game_map)
    if len(components) <= 1:
        return []
    largest = max(components, key=lambda c: (len(c), -min(c)))
    dropped = sorted(room_id for room_id in game_map.rooms if room_id not in largest)
    print(
        f"Keeping {len(largest)} connected rooms, dropping {len(dropped)} unreachable",
        file=sys.stderr,
    )
    drop_rooms(game_map, dropped)
    return dropped


def prune_doors_to_spanning_tree(game_map: GameMap, rng: random.Random) -> List[Edge]:
    """
    Wall up doors until exactly one route joins any two connected rooms.

    Doors are considered in random order (Kruskal's algorithm on a shuffled
    edge list). Returns the doors that were turned back into walls.
    """
    parent: Dict[int, int] = {room_id: room_id for room_id in game_map.rooms}

    def find(room_id: int) -> int:
        while parent[room_id] != room_id:
            parent[room_id] = parent[parent[room_id]]
            room_id = parent[room_id]
        return room_id

    doors = list(game_map.doors())
    rng.shuffle(doors)

    removed: List[Edge] = []
    for door in doors:
        a, b = door.tiles()
        room1, room2 = game_map.room_id_at(a), game_map.room_id_at(b)
        root1, root2 = find(room1), find(room2)
        if root1 != root2:
            parent[root1] = root2
            continue
        game_map.edges[door] = EdgeState.WALL
        for room_id in (room1, room2):
            room = game_map.rooms[room_id]
            room.adjacent = [adj for adj in room.adjacent if adj.door != door]
        removed.append(door)
    return removed
