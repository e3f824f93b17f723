from array import array


class DisjointSets:
    """Union-find over the integers 0..size-1 (union by rank, path halving)."""

    __slots__ = ('parent', 'rank', 'count')

    def __init__(self, size: int):
        self.parent = array('i', range(size))
        self.rank = array('B', [0] * size)
        self.count = size  # number of disjoint sets

    def find(self, item: int) -> int:
        parent = self.parent
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def equiv(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def union(self, a: int, b: int) -> bool:
        """Merges the sets of a and b. Returns False if they already were one set."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False

        if self.rank[root_a] < self.rank[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        if self.rank[root_a] == self.rank[root_b]:
            self.rank[root_a] += 1

        self.count -= 1
        return True
