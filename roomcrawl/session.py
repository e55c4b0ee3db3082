"""
A running game: the entity store, the player, and the current level.

Other systems hold on to the session, not to a GameMap. Going downstairs
builds a fresh GameMap and swaps it into `session.level` between turns, so
nobody is left holding a stale map by accident as long as they read the slot.
"""

import random
from enum import Enum, auto
from typing import List, Optional

from .config import MapConfig
from .entities import Entities, Entity
from .event_system import Event, EventBus
from .game_map import GameMap
from .geometry import EdgeState, Point, edge_between
from .level import create_level


class MoveOutcome(Enum):
    """What a player move intent turned into. Each one uses up the turn except BLOCKED."""

    MOVED = auto()
    OPENED_DOOR = auto()
    BUMPED = auto()  # a blocking entity is in the way; combat is handled elsewhere
    BLOCKED = auto()


class GameSession:
    def __init__(
        self,
        seed: Optional[int] = None,
        config: Optional[MapConfig] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.config: MapConfig = config or MapConfig()
        self.rng: random.Random = random.Random(seed)
        self.event_bus: EventBus = event_bus or EventBus()

        self.entities: Entities = Entities()
        self.player: Entity = self.entities.create_player()

        self.level: GameMap = self._build_level(1)

    @property
    def player_location(self) -> Point:
        location = self.player.location
        if not isinstance(location, Point):
            raise RuntimeError(f"Player is not on the map: {location!r}")
        return location

    def _build_level(self, dungeon_level: int) -> GameMap:
        game_map = create_level(dungeon_level, self.entities, self.rng, self.config)
        self.event_bus.emit(Event.LEVEL_START, dungeon_level=dungeon_level)
        self._explore(game_map, self.player_location)
        return game_map

    def _explore(self, game_map: GameMap, at: Point) -> None:
        room_id = game_map.room_id_at(at)
        if room_id is not None and game_map.set_explored(at):
            self.event_bus.emit(Event.ROOM_EXPLORED, room_id=room_id)

    def go_to_next_level(self) -> GameMap:
        """Replace the current level with a freshly generated, deeper one."""
        old_level = self.level.dungeon_level
        self.event_bus.emit(Event.LEVEL_END, dungeon_level=old_level)
        self.level = self._build_level(old_level + 1)
        return self.level

    def descend_stairs(self) -> bool:
        """
        Take the stairs down, if the player is standing on them.

        Everything left on the old map is destroyed; carried and equipped
        items come along. The player recovers half their max hp.

        Returns False (and changes nothing) if there are no stairs here.
        """
        here = self.player_location
        if not any(e.is_stairs for e in self.entities.all_at(here.x, here.y)):
            return False

        for entity in self.entities.on_map():
            if entity.entity_id != self.player.entity_id:
                self.entities.remove(entity.entity_id)
                self.event_bus.emit(Event.ENTITY_REMOVED, entity_id=entity.entity_id)

        self.go_to_next_level()

        max_hp = self.entities.effective_stats(self.player).max_hp
        before = self.player.hp or 0
        self.player.hp = min(max(before + max_hp // 2, 0), max_hp)
        self.event_bus.emit(Event.PLAYER_HEALED, amount=self.player.hp - before)
        return True

    def player_move_by(self, dx: int, dy: int) -> MoveOutcome:
        """
        Resolve a one-step move intent for the player.

        Bumping a closed door opens it instead of moving. Only orthogonal
        steps are accepted.
        """
        here = self.player_location
        target = Point(here.x + dx, here.y + dy)
        edge = edge_between(here, target)
        if edge is None:
            return MoveOutcome.BLOCKED

        state = self.level.edge_state(edge)
        if state == EdgeState.CLOSED_DOOR:
            self.level.open_door(edge)
            self.event_bus.emit(Event.DOOR_OPENED, x=edge.x, y=edge.y, side=edge.side)
            return MoveOutcome.OPENED_DOOR

        if not self.level.can_move(here, target):
            return MoveOutcome.BLOCKED

        blocker = self.entities.blocking_entity_at(target.x, target.y)
        if blocker is not None and blocker.entity_id != self.player.entity_id:
            return MoveOutcome.BUMPED

        self.entities.move_entity_to(self.player, target)
        self.event_bus.emit(Event.PLAYER_MOVED, x=target.x, y=target.y)

        if state == EdgeState.OPEN_DOOR and self.config.close_doors_behind:
            self.level.close_door(edge)
            self.event_bus.emit(Event.DOOR_CLOSED, x=edge.x, y=edge.y, side=edge.side)

        self._explore(self.level, target)
        return MoveOutcome.MOVED

    def visible_entities(self) -> List[Entity]:
        """On-map entities the player can currently see, player included."""
        here = self.player_location
        return [e for e in self.entities.on_map() if self.level.is_visible(here, e.location)]
