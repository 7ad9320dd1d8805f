"""
Dead-end removal.

Maze carving leaves plenty of corridors that lead nowhere. These passes fill
them back in, one cell at a time, until every open cell has at least two
open neighbors.
"""

from typing import TYPE_CHECKING

from .grid import DungeonGrid, Position, Tile

if TYPE_CHECKING:
    from .dungeon_gen import GenerationContext


def count_exits(grid: DungeonGrid, pos: Position) -> int:
    """Number of non-wall 4-neighbors of a position."""
    return sum(1 for neighbor in grid.neighbors(pos) if not grid.is_wall(neighbor))


def remove_dead_ends_grid(grid: DungeonGrid) -> int:
    """
    Fill in dead ends until none remain. Returns the number of cells filled.

    Each pass walks the whole interior; cells filled earlier in a pass are
    already walls when their neighbors are checked later in the same pass.
    """
    removed = 0
    done = False

    while not done:
        done = True

        for pos in grid.interior():
            if grid.is_wall(pos):
                continue

            # If it only has one exit, it's a dead end.
            if count_exits(grid, pos) != 1:
                continue

            done = False
            grid.set_tile(pos, Tile.WALL)
            removed += 1

    return removed


def remove_dead_ends(context: "GenerationContext") -> int:
    return remove_dead_ends_grid(context.grid)
