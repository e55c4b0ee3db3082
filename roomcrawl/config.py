"""Map generation constants and the per-game configuration record."""

from dataclasses import dataclass

WIDTH: int = 40
HEIGHT: int = 30
NUM_ROOMS: int = 100

# Room footprints. Percent chances are rolled with randint(0, 100).
CORRIDOR_CHANCE: int = 10
CORRIDOR_LENGTH: int = 10
REGULAR_ROOM_FRACTION: float = 0.9
REGULAR_ROOM_MIN: int = 2
REGULAR_ROOM_MAX: int = 8
BIG_ROOM_SIZE: int = 15


@dataclass
class MapConfig:
    width: int = WIDTH
    height: int = HEIGHT
    num_rooms: int = NUM_ROOMS

    # Door re-close policy. The shipped game leaves doors open once opened.
    close_doors_behind: bool = False

    # Post-generation passes, all off by default
    min_room_area: int = 0
    keep_largest_component: bool = False
    prune_doors: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Map size must be positive, got {self.width}x{self.height}")
        if self.num_rooms <= 0:
            raise ValueError(f"num_rooms must be positive, got {self.num_rooms}")
        if self.min_room_area < 0:
            raise ValueError(f"min_room_area must not be negative, got {self.min_room_area}")


__all__ = ["MapConfig", "WIDTH", "HEIGHT", "NUM_ROOMS"]
