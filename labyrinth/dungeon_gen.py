"""
Dungeon Generation Algorithm
============================

We carve the dungeon out of solid rock in four phases:

1. Rooms: try ``room_tries`` times to drop a random room template at a random
   odd-aligned position, skipping any attempt that would overlap (or touch)
   an existing room. Each room is its own region.
2. Mazes: fill every wall cell left on the odd lattice with a "growing tree"
   maze. Each maze segment is its own region.
3. Connect: open doorways in walls that separate two or more regions, merging
   regions as we go, until only one region is left. Now and then a redundant
   doorway is opened too, so the dungeon has some loops.
4. Prune: fill in corridors that lead nowhere until no dead ends remain.

Every phase works on an explicit GenerationContext and can be run on its own,
which is how step-through tools drive the generator.
"""

import random
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import GeneratorConfig
from .connectors import connect_regions
from .grid import DungeonGrid, Tile
from .maze import add_mazes
from .pruning import remove_dead_ends
from .regions import RegionAllocator
from .rooms import PlacedRoom, RoomTemplate, generate_rooms

# Upper bound (exclusive) for randomly chosen seeds
MAX_RANDOM_SEED: int = 99999

# Phase names, in the order Generate runs them
PHASES: Tuple[str, ...] = ("rooms", "mazes", "connect", "prune")


@dataclass
class GenerationContext:
    """All of the mutable state of one generation run."""

    config: GeneratorConfig
    seed: int
    rng: random.Random
    grid: DungeonGrid
    allocator: RegionAllocator = field(default_factory=RegionAllocator)
    rooms: List[PlacedRoom] = field(default_factory=list)
    completed_phases: List[str] = field(default_factory=list)

    @classmethod
    def create(cls, config: GeneratorConfig) -> "GenerationContext":
        """Fresh all-wall grid and a random source seeded for this run."""
        seed = config.seed
        if config.wants_random_seed:
            seed = random.randrange(0, MAX_RANDOM_SEED)
        return cls(
            config=config,
            seed=seed,
            rng=random.Random(seed),
            grid=DungeonGrid(config.width, config.height),
        )


class DungeonGenerator:
    """
    Drives the generation phases against a single GenerationContext.

    Call init() to start a run, then either run the phases one at a time in
    order (generate_rooms, add_mazes, connect_regions, remove_dead_ends) or
    call generate() to do everything at once.
    """

    def __init__(self) -> None:
        self._context: Optional[GenerationContext] = None
        self._phases: Dict[str, Callable[[], int]] = {
            "rooms": self.generate_rooms,
            "mazes": self.add_mazes,
            "connect": self.connect_regions,
            "prune": self.remove_dead_ends,
        }

    @property
    def context(self) -> GenerationContext:
        if self._context is None:
            raise RuntimeError("DungeonGenerator.init() must be called before running a phase")
        return self._context

    @property
    def grid(self) -> DungeonGrid:
        return self.context.grid

    @property
    def dungeon(self) -> np.ndarray:
        """The current tiles as a flat, read-only array indexed x + y * width."""
        return self.context.grid.flat_tiles()

    def _log(self, message: str) -> None:
        if self.context.config.debug:
            print(f"[DungeonGenerator] {message}", file=sys.stderr)

    def init(self, config: GeneratorConfig) -> GenerationContext:
        """Reset all state and start a new run."""
        self._context = GenerationContext.create(config)
        self._log(
            f"init {config.width}x{config.height} seed={self._context.seed} "
            f"templates={len(config.room_templates)}"
        )
        return self._context

    def generate_rooms(self) -> int:
        placed = generate_rooms(self.context)
        self.context.completed_phases.append("rooms")
        self._log(f"placed {placed} rooms in {self.context.config.room_tries} tries")
        return placed

    def add_mazes(self) -> int:
        grown = add_mazes(self.context)
        self.context.completed_phases.append("mazes")
        self._log(f"grew {grown} maze segments, {self.context.allocator.count} regions total")
        return grown

    def connect_regions(self) -> int:
        carved = connect_regions(self.context)
        self.context.completed_phases.append("connect")
        self._log(f"carved {carved} doorways")
        return carved

    def remove_dead_ends(self) -> int:
        removed = remove_dead_ends(self.context)
        self.context.completed_phases.append("prune")
        self._log(f"filled {removed} dead-end cells")
        return removed

    def run_phase(self, name: str) -> int:
        """Run a single phase by name (one of PHASES)."""
        if name not in self._phases:
            raise ValueError(f"Unknown phase {name!r}, expected one of {', '.join(PHASES)}")
        return self._phases[name]()

    def run_until(self, last_phase: str) -> None:
        """Run the phases in order, stopping after ``last_phase``."""
        if last_phase not in PHASES:
            raise ValueError(f"Unknown phase {last_phase!r}, expected one of {', '.join(PHASES)}")
        for name in PHASES[: PHASES.index(last_phase) + 1]:
            self.run_phase(name)

    def generate(self, config: GeneratorConfig) -> np.ndarray:
        """Init plus every phase. Returns the finished tiles, flat."""
        self.init(config)
        self.run_until(PHASES[-1])
        return self.dungeon


def generate_dungeon(
    width: int,
    height: int,
    seed: Optional[int] = None,
    room_tries: int = 500,
    room_templates: Optional[Sequence[RoomTemplate]] = None,
    extra_connector_chance: float = 0.2,
    winding_percent: float = 0,
    debug: bool = False,
) -> DungeonGrid:
    """
    Generates a complete dungeon.

    Parameters:
        width: Grid width in tiles, must be odd
        height: Grid height in tiles, must be odd
        seed: Random seed; None or -1 picks one at random
        room_tries: Number of room placement attempts
        room_templates: Room shapes to pick from; must not be empty
        extra_connector_chance: One-in-N chance of keeping a redundant doorway
        winding_percent: 0..100, how often corridors turn
        debug: Print per-phase progress to stderr

    Returns:
        The finished DungeonGrid
    """
    config = GeneratorConfig(
        width=width,
        height=height,
        seed=seed,
        room_tries=room_tries,
        room_templates=tuple(room_templates or ()),
        extra_connector_chance=extra_connector_chance,
        winding_percent=winding_percent,
        debug=debug,
    )
    generator = DungeonGenerator()
    generator.generate(config)
    return generator.grid


def count_tiles(grid: DungeonGrid) -> Dict[Tile, int]:
    return {tile: grid.count(tile) for tile in Tile}
