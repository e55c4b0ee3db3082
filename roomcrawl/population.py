"""
Scatter monsters and items into rooms, scaled by dungeon depth.

Spawns are not retried. If the tile picked for a monster already has a
blocking entity on it, or the tile picked for an item has anything on it,
that spawn is skipped, so rooms often end up with fewer than the rolled count.
"""

import random
from typing import Dict, List, Sequence, Tuple

from .entities import Entities, Entity
from .game_map import MapInvariantError
from .room_growth import Room

# Sorted (threshold, value) pairs; see evaluate_step_function()
StepTable = Sequence[Tuple[int, int]]

MAX_MONSTERS_PER_ROOM: StepTable = [(1, 2), (4, 3), (6, 5)]
MAX_ITEMS_PER_ROOM: StepTable = [(1, 1), (4, 2)]

MONSTER_AI: str = "move_to_player"
MONSTER_STATS: Dict[str, Dict[str, int]] = {
    "orc": {"base_max_hp": 20, "base_defense": 0, "base_power": 4},
    "troll": {"base_max_hp": 30, "base_defense": 2, "base_power": 8},
}


def evaluate_step_function(table: StepTable, x: int) -> int:
    """Returns the value for the largest threshold <= x, or 0 below them all."""
    value = 0
    for threshold, step_value in table:
        if x >= threshold:
            value = step_value
    return value


def weighted_choice(chances: Dict[str, int], rng: random.Random) -> str:
    """Pick a key with probability proportional to its weight."""
    keys = list(chances.keys())
    return rng.choices(keys, weights=[chances[k] for k in keys], k=1)[0]


def monster_chances(dungeon_level: int) -> Dict[str, int]:
    return {
        "orc": 80,
        "troll": evaluate_step_function([(3, 15), (5, 30), (7, 60)], dungeon_level),
    }


def item_chances(dungeon_level: int) -> Dict[str, int]:
    return {
        "healing potion": 70,
        "lightning scroll": evaluate_step_function([(4, 25)], dungeon_level),
        "fireball scroll": evaluate_step_function([(6, 25)], dungeon_level),
        "confusion scroll": evaluate_step_function([(2, 10)], dungeon_level),
        "sword": evaluate_step_function([(4, 5)], dungeon_level),
        "shield": evaluate_step_function([(8, 15)], dungeon_level),
    }


def populate_room(
    room: Room, dungeon_level: int, entities: Entities, rng: random.Random
) -> List[Entity]:
    """
    Roll monsters and items for one room and place the ones that fit.

    Returns the entities actually created.

    Raises:
        MapInvariantError: If the room has no tiles.
    """
    if not room.tiles:
        raise MapInvariantError(f"Cannot populate room {room.room_id}: it has no tiles")

    spawned: List[Entity] = []

    max_monsters = evaluate_step_function(MAX_MONSTERS_PER_ROOM, dungeon_level)
    chances = monster_chances(dungeon_level)
    for _ in range(rng.randint(0, max_monsters)):
        tile = rng.choice(room.tiles)
        if entities.blocking_entity_at(tile.x, tile.y) is None:
            kind = weighted_choice(chances, rng)
            spawned.append(entities.create(kind, tile, ai=MONSTER_AI, **MONSTER_STATS[kind]))

    max_items = evaluate_step_function(MAX_ITEMS_PER_ROOM, dungeon_level)
    chances = item_chances(dungeon_level)
    for _ in range(rng.randint(0, max_items)):
        tile = rng.choice(room.tiles)
        if not entities.all_at(tile.x, tile.y):
            spawned.append(entities.create(weighted_choice(chances, rng), tile))

    return spawned
