"""
Room placement.

Rooms are dropped at random odd-aligned anchors. An attempt is rejected when
the room, grown by a one-cell border, would overlap a room that is already
placed, so rooms always end up separated by at least one wall.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING, Union

from .grid import Position, Tile

if TYPE_CHECKING:
    from .dungeon_gen import GenerationContext


@dataclass(frozen=True)
class RoomTemplate:
    """
    A room shape supplied by the caller.

    Only the size is used by the generator. ``connections`` lists local (x, y)
    points where the room expects to be entered; it is carried along for the
    caller and never interpreted here.
    """

    width: int
    height: int
    name: str = ""
    connections: Tuple[Tuple[int, int], ...] = field(default=())

    def __post_init__(self) -> None:
        # Rooms are anchored on odd coordinates, so only odd sizes leave the
        # far edge on the same lattice as the corridors.
        for label, value in (("width", self.width), ("height", self.height)):
            if value <= 0:
                raise ValueError(f"Room template {self.name!r}: {label} must be positive, got {value}")
            if value % 2 == 0:
                raise ValueError(f"Room template {self.name!r}: {label} must be odd, got {value}")
        object.__setattr__(
            self, "connections", tuple((int(x), int(y)) for x, y in self.connections)
        )


@dataclass(frozen=True)
class PlacedRoom:
    """An axis-aligned rectangle, used for overlap tests between rooms."""

    x: int
    y: int
    width: int
    height: int

    @property
    def x_max(self) -> int:
        return self.x + self.width

    @property
    def y_max(self) -> int:
        return self.y + self.height

    def overlaps(self, other: "PlacedRoom") -> bool:
        """True if the rectangles share any cell. Touching edges do not overlap."""
        return (
            other.x_max > self.x
            and other.x < self.x_max
            and other.y_max > self.y
            and other.y < self.y_max
        )

    def expanded(self, margin: int) -> "PlacedRoom":
        return PlacedRoom(
            x=self.x - margin,
            y=self.y - margin,
            width=self.width + 2 * margin,
            height=self.height + 2 * margin,
        )

    def cells(self):
        for local_y in range(self.height):
            for local_x in range(self.width):
                yield Position(self.x + local_x, self.y + local_y)

    def contains(self, pos: Position) -> bool:
        return self.x <= pos.x < self.x_max and self.y <= pos.y < self.y_max


def _random_anchor(rng, grid_size: int, room_size: int) -> Optional[int]:
    """
    Pick an odd coordinate that leaves room for ``room_size`` cells plus the
    outer wall. Returns None when the room cannot fit at all.
    """
    slots = (grid_size - room_size) // 2
    if slots <= 0:
        return None
    return rng.randrange(slots) * 2 + 1


def place_room(context: "GenerationContext", x: int, y: int, width: int, height: int) -> PlacedRoom:
    """
    Carve a room into the grid under a fresh region and record it.

    Raises:
        ValueError: If the room is empty or does not lie inside the grid
    """
    room = PlacedRoom(x=x, y=y, width=width, height=height)
    grid = context.grid
    if width <= 0 or height <= 0:
        raise ValueError(f"Room size must be positive, got {width}x{height}")
    if not (grid.in_bounds(Position(x, y)) and grid.in_bounds(Position(room.x_max - 1, room.y_max - 1))):
        raise ValueError(f"{room} does not fit in a {grid.width}x{grid.height} grid")

    context.rooms.append(room)
    region = context.allocator.start_region()
    for pos in room.cells():
        grid.carve(pos, region, Tile.FLOOR)
    return room


def generate_rooms(context: "GenerationContext") -> int:
    """
    Try ``room_tries`` times to place a randomly chosen room template.

    Failed attempts are skipped silently; the number of rooms placed is
    returned.

    Raises:
        ValueError: If the room template catalog is empty
    """
    templates = context.config.room_templates
    if not templates:
        raise ValueError("No room templates were given")

    grid = context.grid
    rng = context.rng
    placed = 0

    for _ in range(context.config.room_tries):
        template = templates[rng.randrange(len(templates))]

        x = _random_anchor(rng, grid.width, template.width)
        if x is None:
            continue
        y = _random_anchor(rng, grid.height, template.height)
        if y is None:
            continue

        border = PlacedRoom(x, y, template.width, template.height).expanded(1)
        if any(other.overlaps(border) for other in context.rooms):
            continue

        place_room(context, x, y, template.width, template.height)
        placed += 1

    return placed


def parse_room_templates(data: Sequence[dict]) -> List[RoomTemplate]:
    """
    Build templates from plain dicts, e.g.
    ``{"name": "hall", "width": 5, "height": 3, "connections": [[0, 1]]}``.
    """
    templates: List[RoomTemplate] = []
    for entry in data:
        try:
            width = int(entry["width"])
            height = int(entry["height"])
        except KeyError as e:
            raise ValueError(f"Room template {entry!r} is missing {e}") from e
        templates.append(
            RoomTemplate(
                width=width,
                height=height,
                name=str(entry.get("name", "")),
                connections=tuple(tuple(point) for point in entry.get("connections", ())),
            )
        )
    return templates


def load_room_templates(path: Union[str, Path]) -> List[RoomTemplate]:
    """Load a room template catalog from a JSON file holding a list of templates."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of room templates")
    return parse_room_templates(data)
