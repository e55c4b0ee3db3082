"""
Level construction: rooms, then walls and doors, then the optional cleanup
passes, then the player, the stairs, and everything else that lives there.
"""

import random
from typing import Optional

from .config import MapConfig
from .entities import Entities
from .game_map import GameMap, MapInvariantError
from .passes import filter_small_rooms, keep_largest_component, prune_doors_to_spanning_tree
from .population import populate_room
from .room_growth import generate_rooms
from .walls import build_walls_and_doors


def generate_map(
    dungeon_level: int,
    rng: random.Random,
    config: Optional[MapConfig] = None,
) -> GameMap:
    """
    Build the rooms, walls and doors for one level. No entities are touched.

    The result depends only on the rng state and config, so a fixed seed
    always gives the same map.

    Raises:
        MapInvariantError: If generation left no rooms at all.
    """
    config = config or MapConfig()

    room_grid, rooms = generate_rooms(config, rng)
    edges = build_walls_and_doors(room_grid, rooms, rng)
    game_map = GameMap(dungeon_level, room_grid, edges, rooms)

    if config.min_room_area > 0:
        filter_small_rooms(game_map, config.min_room_area)
    if config.keep_largest_component:
        keep_largest_component(game_map)
    if config.prune_doors:
        prune_doors_to_spanning_tree(game_map, rng)

    if not game_map.rooms:
        raise MapInvariantError(f"Level {dungeon_level} generated no rooms")
    return game_map


def create_level(
    dungeon_level: int,
    entities: Entities,
    rng: random.Random,
    config: Optional[MapConfig] = None,
) -> GameMap:
    """
    Build a complete level and move the player into it.

    The player goes to the center of the first room and the stairs down to the
    center of the last room. Then every room is populated.
    """
    if entities.player is None:
        raise ValueError("Create the player before building a level")

    game_map = generate_map(dungeon_level, rng, config)

    entities.move_entity_to(entities.player, game_map.first_room().center)
    entities.create("stairs", game_map.last_room().center)

    for room in game_map.room_list():
        populate_room(room, dungeon_level, entities, rng)

    return game_map
