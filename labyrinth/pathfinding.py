"""
Traversal helpers for generated dungeons.

Used to check that a finished dungeon is a single connected piece and has
no dead ends left over.
"""

from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from .grid import DungeonGrid, Position

# A path is a list of positions, ordered from start to goal
Path = List[Position]


def flood_fill_from(grid: DungeonGrid, start: Position) -> Set[Position]:
    """
    Return every non-wall position reachable from ``start`` by 4-way moves.

    Returns an empty set if ``start`` is itself a wall.
    """
    if grid.is_wall(start):
        return set()

    visited: Set[Position] = {start}
    queue: deque = deque([start])

    while queue:
        current = queue.popleft()
        for neighbor in grid.neighbors(current):
            if neighbor in visited or grid.is_wall(neighbor):
                continue
            visited.add(neighbor)
            queue.append(neighbor)

    return visited


def is_dungeon_connected(grid: DungeonGrid) -> Tuple[bool, str]:
    """
    Check if all open tiles in the dungeon are connected.

    Returns:
        Tuple of (is_connected, message) where message explains any issues
    """
    open_tiles = set(grid.open_positions())

    if not open_tiles:
        return False, "No open tiles found in dungeon"

    start_tile = min(open_tiles, key=lambda p: (p.y, p.x))
    reachable = flood_fill_from(grid, start_tile)

    unreachable = open_tiles - reachable
    if unreachable:
        return False, f"Found {len(unreachable)} unreachable tiles out of {len(open_tiles)} total open tiles"

    return True, f"All {len(open_tiles)} open tiles are connected"


def find_dead_ends(grid: DungeonGrid) -> List[Position]:
    """Interior open positions with exactly one open neighbor."""
    dead_ends = []
    for pos in grid.interior():
        if grid.is_wall(pos):
            continue
        exits = sum(1 for n in grid.neighbors(pos) if not grid.is_wall(n))
        if exits == 1:
            dead_ends.append(pos)
    return dead_ends


def find_path_bfs(grid: DungeonGrid, start: Position, target: Position) -> Optional[Path]:
    """
    Find a shortest path between two open positions using BFS.

    Returns:
        List of positions from start to target (excludes start, includes target),
        or None if target can't be reached. Returns an empty list if already at
        target.
    """
    if start == target:
        return []

    parent: Dict[Position, Optional[Position]] = {start: None}
    queue: deque = deque([start])

    while queue:
        current = queue.popleft()

        for next_tile in grid.neighbors(current):
            if next_tile in parent or grid.is_wall(next_tile):
                continue

            parent[next_tile] = current

            if next_tile == target:
                # Reconstruct path
                path: Path = []
                tile: Optional[Position] = next_tile
                while tile is not None and tile != start:
                    path.append(tile)
                    tile = parent[tile]
                path.reverse()
                return path

            queue.append(next_tile)

    return None
