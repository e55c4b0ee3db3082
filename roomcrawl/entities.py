"""
The entity store the map core spawns into.

An entity's location is exactly one of:
    Point          on the map
    CarriedBy      in another entity's inventory slot
    EquippedBy     in another entity's equipment slot
    NOWHERE        not placed yet

Per-type data (blocks movement? is it an item? equipment bonuses?) lives in
an Archetype record looked up by the entity's current type, so turning a
monster into a corpse is just a type change.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from .game_map import MapInvariantError
from .geometry import Point


@dataclass(frozen=True)
class Nowhere:
    pass


NOWHERE = Nowhere()


@dataclass(frozen=True)
class CarriedBy:
    carrier_id: int
    slot: int


@dataclass(frozen=True)
class EquippedBy:
    wearer_id: int
    slot: int


Location = Union[Nowhere, Point, CarriedBy, EquippedBy]

EQUIP_MAIN_HAND: int = 0
EQUIP_OFF_HAND: int = 1
INVENTORY_SIZE: int = 26


@dataclass(frozen=True)
class Archetype:
    """Properties shared by every entity of one type."""

    name: str
    blocks: bool = False
    item: bool = False
    stairs: bool = False
    equipment_slot: Optional[int] = None
    bonus_power: int = 0
    bonus_defense: int = 0
    bonus_max_hp: int = 0


ARCHETYPES: Dict[str, Archetype] = {
    a.name: a
    for a in [
        Archetype("player", blocks=True),
        Archetype("stairs", stairs=True),
        Archetype("troll", blocks=True),
        Archetype("orc", blocks=True),
        Archetype("corpse"),
        Archetype("healing potion", item=True),
        Archetype("lightning scroll", item=True),
        Archetype("fireball scroll", item=True),
        Archetype("confusion scroll", item=True),
        Archetype("dagger", item=True, equipment_slot=EQUIP_MAIN_HAND),
        Archetype("sword", item=True, equipment_slot=EQUIP_MAIN_HAND, bonus_power=3),
        Archetype("towel", item=True, equipment_slot=EQUIP_OFF_HAND),
        Archetype("shield", item=True, equipment_slot=EQUIP_OFF_HAND, bonus_defense=1),
    ]
}


@dataclass(frozen=True)
class Stats:
    max_hp: int
    power: int
    defense: int


def compute_stats(base: Stats, equipment: List[Archetype]) -> Stats:
    """Base stats plus the bonuses of everything equipped."""
    return Stats(
        max_hp=base.max_hp + sum(a.bonus_max_hp for a in equipment),
        power=base.power + sum(a.bonus_power for a in equipment),
        defense=base.defense + sum(a.bonus_defense for a in equipment),
    )


@dataclass
class Entity:
    entity_id: int
    type: str
    location: Location = NOWHERE

    hp: Optional[int] = None
    base_max_hp: int = 0
    base_power: int = 0
    base_defense: int = 0
    ai: Optional[str] = None

    # Slots hold entity ids or None
    inventory: List[Optional[int]] = field(default_factory=list)
    equipment: List[Optional[int]] = field(default_factory=list)

    @property
    def archetype(self) -> Archetype:
        return ARCHETYPES[self.type]

    @property
    def name(self) -> str:
        return self.type

    @property
    def blocks(self) -> bool:
        return self.archetype.blocks

    @property
    def is_item(self) -> bool:
        return self.archetype.item

    @property
    def is_stairs(self) -> bool:
        return self.archetype.stairs

    @property
    def base_stats(self) -> Stats:
        return Stats(self.base_max_hp, self.base_power, self.base_defense)


class Entities:
    """All entities in a game, keyed by id."""

    def __init__(self) -> None:
        self._entities: Dict[int, Entity] = {}
        self._last_id: int = 0
        self.player: Optional[Entity] = None

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def __contains__(self, entity_id: int) -> bool:
        return entity_id in self._entities

    def get(self, entity_id: int) -> Entity:
        if entity_id not in self._entities:
            raise KeyError(f"No entity with id {entity_id}")
        return self._entities[entity_id]

    def create(self, type: str, location: Location = NOWHERE, **properties) -> Entity:
        """
        Create an entity of the given archetype and place it.

        Raises:
            ValueError: If the type has no archetype.
        """
        if type not in ARCHETYPES:
            raise ValueError(f"Unknown entity type {type!r}")
        self._last_id += 1
        entity = Entity(entity_id=self._last_id, type=type, **properties)
        self.move_entity_to(entity, location)
        if entity.hp is None and entity.base_max_hp:
            entity.hp = entity.base_max_hp
        self._entities[entity.entity_id] = entity
        return entity

    def create_player(self) -> Entity:
        """Create the player with starting equipment: a dagger and a towel."""
        player = self.create(
            "player",
            NOWHERE,
            base_max_hp=100,
            base_defense=1,
            base_power=4,
            inventory=[None] * INVENTORY_SIZE,
            equipment=[None] * INVENTORY_SIZE,
        )
        self.create("dagger", EquippedBy(player.entity_id, EQUIP_MAIN_HAND))
        self.create("towel", EquippedBy(player.entity_id, EQUIP_OFF_HAND))
        self.player = player
        return player

    def move_entity_to(self, entity: Entity, location: Location) -> None:
        """
        Move an entity, keeping inventory and equipment slots in sync.

        The target is checked before anything changes, so a rejected move
        leaves the entity and every slot as they were.

        Raises:
            RuntimeError: If a slot doesn't hold what it should, or is taken.
            TypeError: For a location that isn't one of the Location variants.
        """
        slots = self._target_slots(entity, location)
        self._vacate(entity)
        entity.location = location
        if slots is not None:
            slots[location.slot] = entity.entity_id

    def _target_slots(
        self, entity: Entity, location: Location
    ) -> Optional[List[Optional[int]]]:
        """The slot list a move into `location` would fill, or None for map and NOWHERE."""
        if isinstance(location, (Point, Nowhere)):
            return None
        if isinstance(location, CarriedBy):
            slots = self.get(location.carrier_id).inventory
            kind = "inventory"
        elif isinstance(location, EquippedBy):
            slots = self.get(location.wearer_id).equipment
            kind = "equipment"
            if entity.archetype.equipment_slot != location.slot:
                raise RuntimeError(
                    f"invalid: {entity.name} can't be equipped in slot {location.slot}"
                )
        else:
            raise TypeError(f"Unknown location {location!r}")
        if not 0 <= location.slot < len(slots):
            raise RuntimeError(f"invalid: no {kind} slot {location.slot}")
        if slots[location.slot] not in (None, entity.entity_id):
            raise RuntimeError(
                f"invalid: {kind} slot {location.slot} already holds {slots[location.slot]}"
            )
        return slots

    def _vacate(self, entity: Entity) -> None:
        """Clear the slot an entity currently occupies, if any."""
        location = entity.location
        if isinstance(location, CarriedBy):
            slots = self.get(location.carrier_id).inventory
        elif isinstance(location, EquippedBy):
            slots = self.get(location.wearer_id).equipment
        elif isinstance(location, (Point, Nowhere)):
            return
        else:
            raise TypeError(f"Unknown location {location!r}")
        if slots[location.slot] != entity.entity_id:
            raise RuntimeError(
                f"invalid: slot {location.slot} holds {slots[location.slot]} "
                f"but should hold {entity.entity_id}"
            )
        slots[location.slot] = None

    def remove(self, entity_id: int) -> None:
        entity = self.get(entity_id)
        self._vacate(entity)
        del self._entities[entity_id]

    def on_map(self) -> List[Entity]:
        """All entities on the map (not held or equipped)."""
        return [e for e in self._entities.values() if isinstance(e.location, Point)]

    def all_at(self, x: int, y: int) -> List[Entity]:
        here = Point(x, y)
        return [e for e in self.on_map() if e.location == here]

    def item_at(self, x: int, y: int) -> Optional[Entity]:
        items = [e for e in self.all_at(x, y) if e.is_item]
        return items[0] if items else None

    def is_occupied_by_item(self, x: int, y: int) -> bool:
        return self.item_at(x, y) is not None

    def blocking_entity_at(self, x: int, y: int) -> Optional[Entity]:
        """
        Returns the blocking entity at (x, y), or None.

        Raises:
            MapInvariantError: If more than one blocking entity shares the tile.
        """
        blockers = [e for e in self.all_at(x, y) if e.blocks]
        if len(blockers) > 1:
            raise MapInvariantError(f"More than one blocking entity at {x},{y}")
        return blockers[0] if blockers else None

    def equipped_archetypes(self, entity: Entity) -> List[Archetype]:
        return [self.get(i).archetype for i in entity.equipment if i is not None]

    def effective_stats(self, entity: Entity) -> Stats:
        return compute_stats(entity.base_stats, self.equipped_archetypes(entity))
