"""
Maze carving.

Fills every wall cell left on the odd lattice with corridors, using the
"growing tree" algorithm described at
http://www.astrolog.org/labyrnth/algrithm.htm. Each call to grow_maze()
carves one connected maze segment under its own region.
"""

from typing import List, Optional, TYPE_CHECKING

from .grid import Direction, DungeonGrid, Position, Tile

if TYPE_CHECKING:
    from .dungeon_gen import GenerationContext


def can_carve(grid: DungeonGrid, pos: Position, direction: Direction) -> bool:
    """
    Check whether a corridor can be extended from ``pos`` by two cells.

    The cell two steps away must be uncarved, and so must the cell beyond it,
    otherwise the new corridor would run straight into another passage.
    Anything outside the grid counts as uncarvable.
    """
    step = direction.step()
    for distance in (2, 3):
        target = pos + step.scaled(distance)
        if not grid.in_bounds(target) or not grid.is_wall(target):
            return False
    return True


def grow_maze(context: "GenerationContext", start: Position) -> int:
    """
    Grow one maze segment from ``start``. Returns the segment's region id.
    """
    grid = context.grid
    rng = context.rng
    winding_percent = context.config.winding_percent

    region = context.allocator.start_region()
    grid.carve(start, region)

    cells: List[Position] = [start]
    last_direction: Optional[Direction] = None

    while cells:
        cell = cells[-1]

        # See which adjacent cells are open.
        unmade = [direction for direction in Direction if can_carve(grid, cell, direction)]

        if unmade:
            # Prefer carving in the same direction, depending on how winding
            # passages should be.
            if last_direction in unmade and rng.randrange(100) > winding_percent:
                direction = last_direction
            else:
                direction = unmade[rng.randrange(len(unmade))]

            step = direction.step()
            grid.carve(cell + step, region)
            grid.carve(cell + step.scaled(2), region)

            cells.append(cell + step.scaled(2))
            last_direction = direction
        else:
            # Dead branch, back up.
            cells.pop()
            last_direction = None

    return region


def add_mazes(context: "GenerationContext") -> int:
    """
    Fill every remaining lattice position with maze corridors.

    Returns the number of maze segments grown.
    """
    grid = context.grid
    grown = 0
    for y in range(1, grid.height, 2):
        for x in range(1, grid.width, 2):
            pos = Position(x, y)
            if grid.get_tile(pos) != Tile.WALL:
                continue
            grow_maze(context, pos)
            grown += 1
    return grown
