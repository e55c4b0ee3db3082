"""Tests for spawning monsters and items into rooms."""

import random

import pytest

from roomcrawl.entities import Entities
from roomcrawl.game_map import MapInvariantError
from roomcrawl.geometry import Point
from roomcrawl.population import (
    MAX_MONSTERS_PER_ROOM,
    evaluate_step_function,
    item_chances,
    monster_chances,
    populate_room,
    weighted_choice,
)
from roomcrawl.room_growth import Room


def single_tile_room() -> Room:
    return Room(room_id=0, center=Point(4, 4), tiles=[Point(4, 4)])


def big_room() -> Room:
    tiles = [Point(x, y) for x in range(10) for y in range(10)]
    return Room(room_id=0, center=Point(5, 5), tiles=tiles)


class TestStepFunction:
    """Test depth-scaled step lookups."""

    def test_below_every_threshold_is_zero(self):
        """Depth below the first threshold gives 0."""
        assert evaluate_step_function([(3, 15), (5, 30)], 2) == 0

    def test_exact_threshold(self):
        """A threshold applies from its own depth on."""
        assert evaluate_step_function([(3, 15), (5, 30)], 3) == 15
        assert evaluate_step_function([(3, 15), (5, 30)], 5) == 30

    def test_between_thresholds(self):
        """Between thresholds the lower one wins."""
        assert evaluate_step_function(MAX_MONSTERS_PER_ROOM, 5) == 3

    def test_past_last_threshold(self):
        """Past the last threshold its value sticks."""
        assert evaluate_step_function(MAX_MONSTERS_PER_ROOM, 50) == 5


class TestSpawnTables:
    """Test the depth-scaled chance tables."""

    def test_no_trolls_on_early_levels(self):
        """Trolls only show up from level 3."""
        assert monster_chances(1)["troll"] == 0
        assert monster_chances(3)["troll"] == 15
        assert monster_chances(7)["troll"] == 60

    def test_items_unlock_with_depth(self):
        """Scrolls and equipment appear as depth increases."""
        assert item_chances(1) == {
            "healing potion": 70,
            "lightning scroll": 0,
            "fireball scroll": 0,
            "confusion scroll": 0,
            "sword": 0,
            "shield": 0,
        }
        assert item_chances(8)["shield"] == 15

    def test_weighted_choice_never_picks_zero_weight(self):
        """Zero-weight entries are never chosen."""
        rng = random.Random(7)
        picks = {weighted_choice({"a": 5, "b": 0, "c": 1}, rng) for _ in range(300)}
        assert picks == {"a", "c"}


class TestPopulateRoom:
    """Test room population."""

    def test_empty_room_raises(self):
        """Populating a room with no tiles is a programming error."""
        with pytest.raises(MapInvariantError):
            populate_room(Room(room_id=3, center=Point(0, 0)), 1, Entities(), random.Random(1))

    @pytest.mark.parametrize("seed", range(20))
    def test_spawns_stay_in_room(self, seed):
        """Every spawned entity lands on one of the room's tiles."""
        room = big_room()
        entities = Entities()
        spawned = populate_room(room, 6, entities, random.Random(seed))
        for entity in spawned:
            assert entity.location in room.tiles

    def test_early_levels_spawn_only_orcs_and_potions(self):
        """On level 1 the only spawnable types are orcs and healing potions."""
        entities = Entities()
        rng = random.Random(11)
        for _ in range(30):
            populate_room(big_room(), 1, entities, rng)
        assert {e.type for e in entities} <= {"orc", "healing potion"}

    def test_monsters_get_archetype_stats(self):
        """Spawned monsters carry their stat block and AI."""
        entities = Entities()
        rng = random.Random(2)
        for _ in range(30):
            populate_room(big_room(), 1, entities, rng)
        orcs = [e for e in entities if e.type == "orc"]
        assert orcs
        for orc in orcs:
            assert orc.hp == 20
            assert orc.base_power == 4
            assert orc.ai == "move_to_player"

    @pytest.mark.parametrize("seed", range(30))
    def test_collisions_are_skipped_not_retried(self, seed):
        """A one-tile room never holds more than one spawned entity."""
        room = single_tile_room()
        entities = Entities()
        populate_room(room, 6, entities, random.Random(seed))
        assert len(entities.all_at(4, 4)) <= 1

    def test_occupied_tile_gets_nothing(self):
        """If the only tile is taken by a blocker, nothing spawns at all."""
        room = single_tile_room()
        entities = Entities()
        player = entities.create_player()
        entities.move_entity_to(player, Point(4, 4))

        for seed in range(30):
            assert populate_room(room, 6, entities, random.Random(seed)) == []
