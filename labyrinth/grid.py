"""
Grid storage for the dungeon generator.

The grid holds two parallel buffers of shape (height, width): the tile kind of
every cell and the region id it was carved under. Both are addressed by
(x, y), and flatten row-major so that the linear index is ``x + y * width``.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, List


# Region id for cells that have never been carved.
UNASSIGNED: int = -1


class Tile(IntEnum):
    """Tile kinds produced by the generator."""

    WALL = 0
    FLOOR = 1
    DOORWAY = 2


# Characters used by DungeonGrid.to_ascii()
TILE_TO_ASCII = {
    Tile.WALL: "#",
    Tile.FLOOR: ".",
    Tile.DOORWAY: "+",
}


@dataclass(frozen=True)
class Position:
    """A cell position in the grid, measured in tiles."""

    x: int
    y: int

    def __add__(self, other: "Position") -> "Position":
        return Position(self.x + other.x, self.y + other.y)

    def scaled(self, factor: int) -> "Position":
        return Position(self.x * factor, self.y * factor)

    def distance_to(self, other: "Position") -> float:
        """Euclidean distance to another position."""
        return float(np.hypot(self.x - other.x, self.y - other.y))


class Direction(Enum):
    """Cardinal directions, in the order the maze carver tests them."""

    EAST = (1, 0)
    WEST = (-1, 0)
    SOUTH = (0, 1)
    NORTH = (0, -1)

    def opposite(self) -> "Direction":
        """Returns the opposite direction."""
        opposites = {
            Direction.NORTH: Direction.SOUTH,
            Direction.SOUTH: Direction.NORTH,
            Direction.EAST: Direction.WEST,
            Direction.WEST: Direction.EAST,
        }
        return opposites[self]

    def step(self) -> Position:
        """Returns the Position offset for moving one step in this direction."""
        dx, dy = self.value
        return Position(dx, dy)


class DungeonGrid:
    """
    Flat cell-type buffer plus a parallel region-id buffer.

    Every cell starts out as a WALL with region UNASSIGNED. Carving a cell
    stamps it with whatever region the caller passes in; reverting a cell to
    WALL leaves its old region id behind, which is harmless because region ids
    are only read for non-wall cells.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.tiles = np.full((height, width), Tile.WALL, dtype=np.int8)
        self.regions = np.full((height, width), UNASSIGNED, dtype=np.int32)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def index_of(self, pos: Position) -> int:
        """
        Convert a position to its linear index ``x + y * width``.

        Raises:
            IndexError: If the position lies outside the grid
        """
        if not self.in_bounds(pos):
            raise IndexError(f"{pos} is outside a {self.width}x{self.height} grid")
        return pos.x + pos.y * self.width

    def position_of(self, index: int) -> Position:
        """Inverse of index_of()."""
        if not 0 <= index < self.width * self.height:
            raise IndexError(f"index {index} is outside a {self.width}x{self.height} grid")
        return Position(index % self.width, index // self.width)

    def get_tile(self, pos: Position) -> Tile:
        self.index_of(pos)
        return Tile(int(self.tiles[pos.y, pos.x]))

    def set_tile(self, pos: Position, tile: Tile) -> None:
        """Set a tile kind without touching the region buffer."""
        self.index_of(pos)
        self.tiles[pos.y, pos.x] = tile

    def get_region(self, pos: Position) -> int:
        self.index_of(pos)
        return int(self.regions[pos.y, pos.x])

    def set_region(self, pos: Position, region: int) -> None:
        self.index_of(pos)
        self.regions[pos.y, pos.x] = region

    def carve(self, pos: Position, region: int, tile: Tile = Tile.FLOOR) -> None:
        """Open a cell and stamp it with the region it belongs to."""
        self.set_tile(pos, tile)
        self.set_region(pos, region)

    def is_wall(self, pos: Position) -> bool:
        """True for WALL cells. Positions outside the grid count as wall."""
        if not self.in_bounds(pos):
            return True
        return self.tiles[pos.y, pos.x] == Tile.WALL

    def neighbors(self, pos: Position) -> Iterator[Position]:
        """Yield the in-bounds 4-neighbors of a position."""
        for direction in Direction:
            neighbor = pos + direction.step()
            if self.in_bounds(neighbor):
                yield neighbor

    def interior(self) -> Iterator[Position]:
        """Yield every position that is not on the outer edge of the grid."""
        for x in range(1, self.width - 1):
            for y in range(1, self.height - 1):
                yield Position(x, y)

    def flat_tiles(self) -> np.ndarray:
        """
        Returns the tiles as a read-only flat array of length width * height.

        The array is a snapshot, indexed by ``x + y * width``. Later changes to
        the grid do not show up in it.
        """
        flat = self.tiles.reshape(-1).copy()
        flat.flags.writeable = False
        return flat

    def count(self, tile: Tile) -> int:
        return int(np.count_nonzero(self.tiles == tile))

    def live_regions(self) -> List[int]:
        """Region ids that still own at least one non-wall cell, ascending."""
        ids = np.unique(self.regions[self.tiles != Tile.WALL])
        return [int(region) for region in ids if region != UNASSIGNED]

    def open_positions(self) -> List[Position]:
        """All non-wall positions, in row-major order."""
        rows, cols = np.nonzero(self.tiles != Tile.WALL)
        return [Position(int(col), int(row)) for row, col in zip(rows, cols)]

    def copy(self) -> "DungeonGrid":
        clone = DungeonGrid(self.width, self.height)
        clone.tiles = self.tiles.copy()
        clone.regions = self.regions.copy()
        return clone

    def to_ascii(self) -> str:
        """Render the grid as text, one line per row."""
        lines = []
        for row in range(self.height):
            line = ""
            for col in range(self.width):
                line += TILE_TO_ASCII.get(Tile(int(self.tiles[row, col])), "?")
            lines.append(line)
        return "\n".join(lines)
