"""Generator parameters."""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .rooms import RoomTemplate


# Seed value that asks for a randomly chosen seed, same as passing None.
RANDOM_SEED: int = -1


@dataclass
class GeneratorConfig:
    """
    Parameters for one generation run.

    Attributes:
        width: Grid width in tiles, odd
        height: Grid height in tiles, odd
        seed: Seed for the run's random source. None or RANDOM_SEED picks one.
        room_tries: How many times to try placing a room
        room_templates: Catalog of room shapes to pick from
        extra_connector_chance: Denominator N of the one-in-N chance that a
            redundant connector is opened anyway, adding a loop. Values below 1
            disable extra loops.
        winding_percent: 0 keeps corridors as straight as possible, 100 makes
            them turn at every opportunity
        debug: Print per-phase progress to stderr
    """

    width: int
    height: int
    seed: Optional[int] = None
    room_tries: int = 500
    room_templates: Sequence[RoomTemplate] = field(default_factory=tuple)
    extra_connector_chance: float = 0.2
    winding_percent: float = 0
    debug: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid size must be positive, got {self.width}x{self.height}")
        if self.width % 2 == 0 or self.height % 2 == 0:
            # The maze lattice needs a solid outer wall on every side.
            raise ValueError(f"Grid size must be odd, got {self.width}x{self.height}")
        if self.room_tries < 0:
            raise ValueError(f"room_tries must not be negative, got {self.room_tries}")
        if not 0 <= self.winding_percent <= 100:
            raise ValueError(f"winding_percent must be within 0..100, got {self.winding_percent}")
        if self.extra_connector_chance < 0:
            raise ValueError(
                f"extra_connector_chance must not be negative, got {self.extra_connector_chance}"
            )
        if self.room_templates is None:
            self.room_templates = ()
        self.room_templates = tuple(self.room_templates)

    @property
    def wants_random_seed(self) -> bool:
        return self.seed is None or self.seed == RANDOM_SEED
