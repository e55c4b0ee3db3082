#!/usr/bin/env python3
"""
Render a generated level as ASCII art for debugging.

Tiles sit on odd rows/columns; the characters between them are the thin
walls. '@' marks the first room's center and '>' the last room's.

Usage:
    uv run tools/render_map_ascii.py [--level N] [--seed S] [--min-room-area A]
"""

import argparse
import random
import sys
from pathlib import Path

# Add parent directory to path so we can import roomcrawl
sys.path.insert(0, str(Path(__file__).parent.parent))

from roomcrawl.config import MapConfig
from roomcrawl.game_map import GameMap
from roomcrawl.geometry import EdgeState, Point, Side
from roomcrawl.level import generate_map


EDGE_TO_ASCII = {
    (Side.NORTH, EdgeState.WALL): "-",
    (Side.NORTH, EdgeState.CLOSED_DOOR): "=",
    (Side.NORTH, EdgeState.OPEN_DOOR): "/",
    (Side.WEST, EdgeState.WALL): "|",
    (Side.WEST, EdgeState.CLOSED_DOOR): "H",
    (Side.WEST, EdgeState.OPEN_DOOR): "/",
}


def render_map_ascii(game_map: GameMap) -> str:
    """Convert a map to an ASCII string, walls included."""
    rows = 2 * game_map.rows + 1
    cols = 2 * game_map.cols + 1
    canvas = [[" "] * cols for _ in range(rows)]

    for y in range(game_map.rows):
        for x in range(game_map.cols):
            if game_map.room_id_at(Point(x, y)) is not None:
                canvas[2 * y + 1][2 * x + 1] = "."

    for edge, state in game_map.edges.items():
        if edge.side == Side.NORTH:
            row, col = 2 * edge.y, 2 * edge.x + 1
        else:
            row, col = 2 * edge.y + 1, 2 * edge.x
        canvas[row][col] = EDGE_TO_ASCII[(edge.side, state)]

    # Corners wherever a wall meets the grid point
    for row in range(0, rows, 2):
        for col in range(0, cols, 2):
            neighbors = [
                canvas[r][c]
                for r, c in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1))
                if 0 <= r < rows and 0 <= c < cols
            ]
            if any(ch not in (" ", ".") for ch in neighbors):
                canvas[row][col] = "+"

    start = game_map.first_room().center
    stairs = game_map.last_room().center
    canvas[2 * stairs.y + 1][2 * stairs.x + 1] = ">"
    canvas[2 * start.y + 1][2 * start.x + 1] = "@"

    return "\n".join("".join(line) for line in canvas)


def main():
    parser = argparse.ArgumentParser(description="Render a level as ASCII art")
    parser.add_argument("--level", type=int, default=1, help="Dungeon level (depth)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    parser.add_argument("--min-room-area", type=int, default=0, help="Drop rooms smaller than this")
    parser.add_argument("--connected", action="store_true", help="Keep only the largest connected group")
    parser.add_argument("--prune-doors", action="store_true", help="Reduce doors to a spanning tree")
    args = parser.parse_args()

    config = MapConfig(
        min_room_area=args.min_room_area,
        keep_largest_component=args.connected,
        prune_doors=args.prune_doors,
    )
    game_map = generate_map(args.level, random.Random(args.seed), config)

    print(render_map_ascii(game_map))

    doors = list(game_map.doors())
    print(f"\n--- Debug Info ---")
    print(f"Map size: {game_map.cols}x{game_map.rows} tiles")
    print(f"Rooms: {len(game_map.rooms)}")
    print(f"Walls: {sum(1 for _ in game_map.walls())}, doors: {len(doors)}")


if __name__ == "__main__":
    main()
