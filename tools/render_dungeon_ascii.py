#!/usr/bin/env python3
"""
Render a generated dungeon as ASCII art for debugging.

Usage:
    uv run tools/render_dungeon_ascii.py [--width N] [--height N] [--seed S]
        [--room-size WxH ...] [--templates FILE] [--until PHASE]
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path so we can import labyrinth
sys.path.insert(0, str(Path(__file__).parent.parent))

from labyrinth.config import GeneratorConfig
from labyrinth.dungeon_gen import PHASES, DungeonGenerator, count_tiles
from labyrinth.pathfinding import find_dead_ends, find_path_bfs, is_dungeon_connected
from labyrinth.rooms import RoomTemplate, load_room_templates


def parse_room_size(value: str) -> RoomTemplate:
    """Parse a WxH room size such as ``5x3``."""
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WxH, got {value!r}")
    try:
        return RoomTemplate(width=width, height=height, name=value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def main():
    parser = argparse.ArgumentParser(description="Render dungeon as ASCII art")
    parser.add_argument("--width", type=int, default=51, help="Dungeon width in tiles (odd)")
    parser.add_argument("--height", type=int, default=21, help="Dungeon height in tiles (odd)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible generation")
    parser.add_argument("--room-tries", type=int, default=1000, help="Room placement attempts")
    parser.add_argument(
        "--room-size",
        type=parse_room_size,
        action="append",
        default=[],
        help="Room template size as WxH (repeatable)",
    )
    parser.add_argument("--templates", type=Path, help="JSON file with a list of room templates")
    parser.add_argument(
        "--extra-connector-chance",
        type=float,
        default=20,
        help="One-in-N chance of opening a redundant doorway",
    )
    parser.add_argument("--winding-percent", type=float, default=0, help="0..100, how often corridors turn")
    parser.add_argument("--until", choices=PHASES, default=PHASES[-1], help="Stop after this phase")
    parser.add_argument("--debug", action="store_true", help="Print phase progress to stderr")
    args = parser.parse_args()

    templates = list(args.room_size)
    if args.templates is not None:
        templates.extend(load_room_templates(args.templates))
    if not templates:
        templates = [RoomTemplate(3, 3, "small"), RoomTemplate(5, 5, "medium"), RoomTemplate(7, 5, "hall")]

    config = GeneratorConfig(
        width=args.width,
        height=args.height,
        seed=args.seed,
        room_tries=args.room_tries,
        room_templates=templates,
        extra_connector_chance=args.extra_connector_chance,
        winding_percent=args.winding_percent,
        debug=args.debug,
    )

    generator = DungeonGenerator()
    context = generator.init(config)
    generator.run_until(args.until)

    print(context.grid.to_ascii())

    # Print some debug info
    tiles = count_tiles(context.grid)
    connected, message = is_dungeon_connected(context.grid)
    print(f"\n--- Debug Info ---")
    print(f"Map size: {config.width}x{config.height} tiles")
    print(f"Seed: {context.seed}")
    print(f"Phases run: {', '.join(context.completed_phases)}")
    print(f"Rooms placed: {len(context.rooms)}")
    print(f"Regions carved: {context.allocator.count}")
    print("Tiles: " + ", ".join(f"{tile.name.lower()}={count}" for tile, count in tiles.items()))
    print(f"Dead ends: {len(find_dead_ends(context.grid))}")
    print(f"Connected: {message}")

    if connected and len(context.rooms) >= 2:
        first = next(context.rooms[0].cells())
        last = next(context.rooms[-1].cells())
        path = find_path_bfs(context.grid, first, last)
        if path is not None:
            print(f"Path from first to last room: {len(path)} steps")


if __name__ == "__main__":
    main()
