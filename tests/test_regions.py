"""Tests for region id allocation and merging."""

from labyrinth.regions import RegionAllocator, RegionMerger


class TestRegionAllocator:
    def test_starts_unassigned(self):
        allocator = RegionAllocator()

        assert allocator.current == -1
        assert allocator.count == 0

    def test_ids_increase(self):
        allocator = RegionAllocator()

        assert [allocator.start_region() for _ in range(3)] == [0, 1, 2]
        assert allocator.current == 2
        assert allocator.count == 3


class TestRegionMerger:
    def test_starts_as_identity(self):
        merger = RegionMerger(4)

        assert [merger.find(r) for r in range(4)] == [0, 1, 2, 3]
        assert merger.open_regions == {0, 1, 2, 3}

    def test_dest_becomes_representative(self):
        merger = RegionMerger(4)
        merger.merge(2, [0, 3])

        assert merger.find(0) == 2
        assert merger.find(3) == 2
        assert merger.open_regions == {1, 2}

    def test_chained_merges_follow_through(self):
        """Regions merged earlier move along with their representative."""
        merger = RegionMerger(4)
        merger.merge(0, [1])
        merger.merge(2, [0])

        assert merger.find(1) == 2
        assert merger.open_count == 2
        assert merger.groups() == {2: [0, 1, 2], 3: [3]}

    def test_merging_into_self_is_a_no_op(self):
        merger = RegionMerger(3)
        merger.merge(0, [1])
        merger.merge(1, [0])

        assert merger.open_count == 2

    def test_resolve_keeps_order_and_duplicates(self):
        merger = RegionMerger(3)
        merger.merge(1, [2])

        assert merger.resolve([2, 0, 2]) == [1, 0, 1]
        assert merger.distinct([2, 1]) == {1}

    def test_only_live_regions_start_open(self):
        merger = RegionMerger(5, live=[0, 3, 4])

        assert merger.open_regions == {0, 3, 4}

    def test_closed_dest_takes_over_open_source(self):
        """A merged set stays open as long as any of its members was open."""
        merger = RegionMerger(3, live=[1, 2])
        merger.merge(0, [1])

        assert merger.open_regions == {0, 2}
