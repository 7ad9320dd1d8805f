"""Tests for room templates and room placement."""

import itertools
import json

import pytest

from labyrinth.config import GeneratorConfig
from labyrinth.dungeon_gen import GenerationContext
from labyrinth.grid import Position, Tile
from labyrinth.rooms import (
    PlacedRoom,
    RoomTemplate,
    generate_rooms,
    load_room_templates,
    parse_room_templates,
    place_room,
)


def make_context(width=31, height=21, seed=0, room_tries=50, templates=None) -> GenerationContext:
    if templates is None:
        templates = [RoomTemplate(3, 3), RoomTemplate(5, 3)]
    return GenerationContext.create(
        GeneratorConfig(
            width=width,
            height=height,
            seed=seed,
            room_tries=room_tries,
            room_templates=templates,
        )
    )


class TestRoomTemplate:
    """Validation of caller-supplied room shapes."""

    @pytest.mark.parametrize("width,height", [(4, 3), (3, 2), (0, 3), (3, -1)])
    def test_rejects_even_or_empty_sizes(self, width, height):
        with pytest.raises(ValueError):
            RoomTemplate(width, height)

    def test_connections_are_carried_as_tuples(self):
        template = RoomTemplate(3, 5, "hall", connections=[[0, 2], (2, 2)])

        assert template.connections == ((0, 2), (2, 2))


class TestPlacedRoom:
    def test_touching_rooms_do_not_overlap(self):
        a = PlacedRoom(0, 0, 3, 3)
        b = PlacedRoom(3, 0, 3, 3)

        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_overlapping_rooms(self):
        assert PlacedRoom(0, 0, 3, 3).overlaps(PlacedRoom(2, 2, 3, 3))

    def test_expanded_border(self):
        assert PlacedRoom(1, 1, 3, 3).expanded(1) == PlacedRoom(0, 0, 5, 5)

    def test_cells_and_contains(self):
        room = PlacedRoom(1, 2, 3, 1)

        assert list(room.cells()) == [Position(1, 2), Position(2, 2), Position(3, 2)]
        assert room.contains(Position(3, 2))
        assert not room.contains(Position(4, 2))


class TestGenerateRooms:
    """Tests for random room placement."""

    def test_empty_catalog_fails(self):
        context = make_context(templates=[])

        with pytest.raises(ValueError):
            generate_rooms(context)

    def test_empty_catalog_fails_even_without_tries(self):
        context = make_context(templates=[], room_tries=0)

        with pytest.raises(ValueError):
            generate_rooms(context)

    @pytest.mark.parametrize("seed", range(0, 10))
    def test_rooms_are_odd_aligned_and_inside(self, seed):
        context = make_context(seed=seed)
        placed = generate_rooms(context)

        assert placed == len(context.rooms)
        for room in context.rooms:
            assert room.x % 2 == 1 and room.y % 2 == 1
            assert room.x_max <= context.grid.width - 1
            assert room.y_max <= context.grid.height - 1

    @pytest.mark.parametrize("seed", range(0, 10))
    def test_rooms_never_touch(self, seed):
        context = make_context(seed=seed, room_tries=200)
        generate_rooms(context)

        for a, b in itertools.combinations(context.rooms, 2):
            assert not a.overlaps(b.expanded(1))

    def test_each_room_is_its_own_region(self):
        context = make_context(seed=4)
        generate_rooms(context)

        assert context.allocator.count == len(context.rooms)
        for region, room in enumerate(context.rooms):
            for pos in room.cells():
                assert context.grid.get_tile(pos) == Tile.FLOOR
                assert context.grid.get_region(pos) == region

    def test_only_room_cells_are_carved(self):
        context = make_context(seed=4)
        generate_rooms(context)

        expected = sum(room.width * room.height for room in context.rooms)
        assert context.grid.count(Tile.FLOOR) == expected

    def test_oversized_rooms_are_skipped(self):
        """Rooms that cannot fit are not an error, just no rooms."""
        context = make_context(width=5, height=5, templates=[RoomTemplate(7, 7)])

        assert generate_rooms(context) == 0
        assert context.allocator.count == 0
        assert context.grid.count(Tile.FLOOR) == 0

    def test_placement_is_bounded_by_tries(self):
        context = make_context(room_tries=3)

        assert generate_rooms(context) <= 3

    def test_room_fills_small_grid(self):
        """A 3x3 room in a 5x5 grid has exactly one place to go."""
        context = make_context(width=5, height=5, templates=[RoomTemplate(3, 3)], room_tries=5)

        assert generate_rooms(context) == 1
        assert context.rooms == [PlacedRoom(1, 1, 3, 3)]


class TestPlaceRoom:
    def test_place_room_carves_new_region(self):
        context = make_context()
        context.allocator.start_region()

        room = place_room(context, 3, 5, 3, 1)

        assert room == PlacedRoom(3, 5, 3, 1)
        assert context.rooms == [room]
        assert context.grid.get_region(Position(4, 5)) == 1
        assert context.grid.get_tile(Position(5, 5)) == Tile.FLOOR
        assert context.grid.get_tile(Position(6, 5)) == Tile.WALL

    @pytest.mark.parametrize("x,y,width,height", [(9, 9, 3, 3), (-1, 1, 3, 3), (1, 1, 0, 3)])
    def test_bad_room_leaves_state_untouched(self, x, y, width, height):
        context = make_context(width=11, height=11)

        with pytest.raises(ValueError):
            place_room(context, x, y, width, height)

        assert context.rooms == []
        assert context.allocator.count == 0
        assert context.grid.count(Tile.FLOOR) == 0

    def test_room_touching_the_far_edge_is_allowed(self):
        context = make_context(width=11, height=11)

        place_room(context, 8, 8, 3, 3)

        assert context.grid.get_tile(Position(10, 10)) == Tile.FLOOR


class TestLoadRoomTemplates:
    """Room catalogs loaded from JSON."""

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "rooms.json"
        path.write_text(
            json.dumps(
                [
                    {"name": "closet", "width": 3, "height": 3},
                    {"name": "hall", "width": 9, "height": 5, "connections": [[0, 2], [8, 2]]},
                ]
            )
        )

        templates = load_room_templates(path)

        assert templates == [
            RoomTemplate(3, 3, "closet"),
            RoomTemplate(9, 5, "hall", connections=((0, 2), (8, 2))),
        ]

    def test_missing_size_is_rejected(self):
        with pytest.raises(ValueError):
            parse_room_templates([{"name": "broken", "width": 3}])

    def test_non_list_file_is_rejected(self, tmp_path):
        path = tmp_path / "rooms.json"
        path.write_text(json.dumps({"width": 3, "height": 3}))

        with pytest.raises(ValueError):
            load_room_templates(path)
