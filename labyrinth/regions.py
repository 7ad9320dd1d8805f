"""
Region bookkeeping.

Every room and every maze segment is carved under its own region id. The
allocator hands those ids out; the merger tracks which ids have since been
joined together by doorways.
"""

from typing import Dict, Iterable, List, Optional, Set

from .grid import UNASSIGNED


class RegionAllocator:
    """Monotonically increasing region id counter."""

    def __init__(self) -> None:
        self._current: int = UNASSIGNED

    @property
    def current(self) -> int:
        """The most recently started region, or UNASSIGNED if none yet."""
        return self._current

    @property
    def count(self) -> int:
        """Number of region ids handed out so far."""
        return self._current + 1

    def start_region(self) -> int:
        self._current += 1
        return self._current


class RegionMerger:
    """
    Union-find over the region ids [0, region_count).

    ``merge(dest, sources)`` always makes ``dest`` the representative of the
    merged set, so the outcome only depends on the order merges are made in.
    """

    def __init__(self, region_count: int, live: Optional[Iterable[int]] = None) -> None:
        self._parent: List[int] = list(range(region_count))
        # Regions that own no cells can never be reached, so they start closed.
        if live is None:
            live = range(region_count)
        self._open: Set[int] = set(live)

    def find(self, region: int) -> int:
        root = region
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression
        while self._parent[region] != root:
            self._parent[region], region = root, self._parent[region]
        return root

    def resolve(self, regions: Iterable[int]) -> List[int]:
        """Map each region to its representative, keeping order and duplicates."""
        return [self.find(region) for region in regions]

    def distinct(self, regions: Iterable[int]) -> Set[int]:
        return {self.find(region) for region in regions}

    def merge(self, dest: int, sources: Iterable[int]) -> None:
        dest = self.find(dest)
        for source in sources:
            root = self.find(source)
            if root == dest:
                continue
            self._parent[root] = dest
            if root in self._open:
                self._open.discard(root)
                self._open.add(dest)

    @property
    def open_regions(self) -> Set[int]:
        """Representatives that have not been merged into another region."""
        return set(self._open)

    @property
    def open_count(self) -> int:
        return len(self._open)

    def groups(self) -> Dict[int, List[int]]:
        """Representative -> every region id merged into it."""
        result: Dict[int, List[int]] = {}
        for region in range(len(self._parent)):
            result.setdefault(self.find(region), []).append(region)
        return result
