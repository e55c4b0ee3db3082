"""Room-graph dungeon map generation and room-based visibility."""

from roomcrawl.config import MapConfig, WIDTH, HEIGHT, NUM_ROOMS
from roomcrawl.geometry import (
    Point,
    Side,
    Edge,
    EdgeState,
    tile_key,
    edge_key,
    edge_between,
    edges_around_tile,
)
from roomcrawl.room_growth import NO_ROOM, Room, Adjacency, generate_rooms, grow_room
from roomcrawl.walls import derive_walls, carve_doors, build_walls_and_doors
from roomcrawl.game_map import GameMap, MapInvariantError
from roomcrawl.passes import (
    drop_rooms,
    filter_small_rooms,
    keep_largest_component,
    prune_doors_to_spanning_tree,
)
from roomcrawl.entities import Entities, Entity, NOWHERE, CarriedBy, EquippedBy
from roomcrawl.population import populate_room, evaluate_step_function
from roomcrawl.level import create_level, generate_map
from roomcrawl.event_system import EventBus, Event, EventData
from roomcrawl.session import GameSession, MoveOutcome
