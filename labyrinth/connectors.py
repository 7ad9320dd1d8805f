"""
Region connection.

After rooms and mazes are carved the dungeon is a set of disjoint regions.
This phase opens doorways in the walls between them until every region is
reachable from every other one, and occasionally opens a redundant doorway so
the dungeon isn't singly-connected.
"""

import sys
from typing import Dict, List, TYPE_CHECKING

from .grid import UNASSIGNED, DungeonGrid, Position, Tile
from .regions import RegionMerger

if TYPE_CHECKING:
    from .dungeon_gen import GenerationContext

# Doorways closer than this to a freshly opened one are dropped.
MIN_DOORWAY_SPACING: float = 2.0

# Connector position -> region ids of its neighbors (duplicates kept)
ConnectorMap = Dict[Position, List[int]]


def find_connectors(grid: DungeonGrid) -> ConnectorMap:
    """
    Find every interior wall cell that touches two or more distinct regions.
    """
    connectors: ConnectorMap = {}
    for pos in grid.interior():
        # Can't already be part of a region.
        if grid.get_tile(pos) != Tile.WALL:
            continue

        regions = []
        for neighbor in grid.neighbors(pos):
            region = grid.get_region(neighbor)
            if region != UNASSIGNED and grid.get_tile(neighbor) != Tile.WALL:
                regions.append(region)

        if len(set(regions)) < 2:
            continue
        connectors[pos] = regions
    return connectors


def _one_in(rng, chance: float) -> bool:
    """One-in-N draw, where N is the integer part of ``chance``."""
    denominator = int(chance)
    if denominator < 1:
        return False
    return rng.randrange(denominator) == 0


def _merge_existing_doorways(grid: DungeonGrid, merger: RegionMerger) -> None:
    """Account for doorways opened by an earlier run of this phase."""
    for pos in grid.interior():
        if grid.get_tile(pos) != Tile.DOORWAY:
            continue
        # The doorway carries a region of its own, which joins its neighbors.
        cells = [pos] + [neighbor for neighbor in grid.neighbors(pos) if not grid.is_wall(neighbor)]
        regions = [grid.get_region(cell) for cell in cells if grid.get_region(cell) != UNASSIGNED]
        if regions:
            merger.merge(regions[0], regions[1:])


def _spanning(connector_regions: ConnectorMap, merger: RegionMerger, grid: DungeonGrid) -> List[Position]:
    """Connectors that are still walls and still join two or more regions."""
    return [
        pos
        for pos, regions in connector_regions.items()
        if grid.get_tile(pos) == Tile.WALL and len(merger.distinct(regions)) > 1
    ]


def connect_regions(context: "GenerationContext") -> int:
    """
    Open doorways until all regions are merged into one.

    Returns the number of doorways carved, counting extra loop doorways.
    """
    grid = context.grid
    rng = context.rng
    chance = context.config.extra_connector_chance

    connector_regions = find_connectors(grid)

    # Keep track of which regions have been merged.
    merger = RegionMerger(context.allocator.count, grid.live_regions())
    _merge_existing_doorways(grid, merger)
    connectors = _spanning(connector_regions, merger, grid)
    carved = 0

    def add_junction(pos: Position) -> None:
        nonlocal carved
        grid.carve(pos, merger.find(connector_regions[pos][0]), Tile.DOORWAY)
        carved += 1

    while merger.open_count > 1:
        if not connectors:
            # Spacing rules may have discarded the last way into a region.
            connectors = _spanning(connector_regions, merger, grid)
            if not connectors:
                print(
                    f"Could not connect {merger.open_count} regions: no connectors left.",
                    file=sys.stderr,
                )
                break

        connector = connectors[rng.randrange(len(connectors))]
        add_junction(connector)

        # Merge the connected regions. The first one (arbitrarily) absorbs
        # all the others.
        regions = merger.resolve(connector_regions[connector])
        dest = regions[0]
        sources = []
        for region in regions[1:]:
            if region != dest and region not in sources:
                sources.append(region)
        merger.merge(dest, sources)

        # Remove any connectors that aren't needed anymore.
        remaining = []
        for pos in connectors:
            # Don't allow connectors right next to each other.
            if connector.distance_to(pos) < MIN_DOORWAY_SPACING:
                continue

            if len(merger.distinct(connector_regions[pos])) > 1:
                remaining.append(pos)
                continue

            # This connector isn't needed, but open it occasionally so that
            # the dungeon isn't singly-connected.
            if _one_in(rng, chance):
                add_junction(pos)
        connectors = remaining

    return carved
