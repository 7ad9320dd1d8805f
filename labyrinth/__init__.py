"""Room-and-maze dungeon generation."""

from labyrinth.grid import (
    Tile,
    Position,
    Direction,
    DungeonGrid,
    UNASSIGNED,
)
from labyrinth.config import GeneratorConfig, RANDOM_SEED
from labyrinth.rooms import (
    RoomTemplate,
    PlacedRoom,
    load_room_templates,
    parse_room_templates,
)
from labyrinth.dungeon_gen import (
    PHASES,
    DungeonGenerator,
    GenerationContext,
    generate_dungeon,
)
from labyrinth.pathfinding import (
    find_dead_ends,
    find_path_bfs,
    flood_fill_from,
    is_dungeon_connected,
)
