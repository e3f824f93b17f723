from collections import deque
from typing import Dict

from maze_carver.core.disjoint_sets import DisjointSets
from maze_carver.core.errors import ConsistencyViolation
from maze_carver.core.grid import Cell, Grid


class MazeAnalysis:
    @staticmethod
    def passage_count(grid: Grid, cell: Cell) -> int:
        return sum(1 for n in grid.neighbors(cell) if grid.is_open_between(cell, n))

    @staticmethod
    def calculate_stats(grid: Grid) -> Dict[str, float]:
        dead_ends = 0
        corridors = 0  # 2 passages
        junctions = 0  # 3 or 4 passages

        for y in range(grid.rows):
            for x in range(grid.columns):
                passages = MazeAnalysis.passage_count(grid, (x, y))
                if passages == 1: dead_ends += 1
                elif passages == 2: corridors += 1
                elif passages >= 3: junctions += 1

        total = grid.rows * grid.columns
        return {
            "open_walls": grid.open_wall_count(),
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "dead_end_percent": (dead_ends / total) * 100,
        }

    @staticmethod
    def reachable_count(grid: Grid, start: Cell = None) -> int:
        """Number of cells reachable from start (default: entrance) through open walls."""
        start = start if start is not None else grid.entrance()
        seen = {start}
        queue = deque([start])
        while queue:
            cell = queue.popleft()
            for n in grid.neighbors(cell):
                if n not in seen and grid.is_open_between(cell, n):
                    seen.add(n)
                    queue.append(n)
        return len(seen)

    @staticmethod
    def verify_spanning_tree(grid: Grid) -> int:
        """
        Checks the open internal walls form a spanning tree over all cells.
        Returns the number of openings, raises ConsistencyViolation otherwise.
        """
        sets = DisjointSets(grid.rows * grid.columns)
        opened = 0
        for (x1, y1), (x2, y2) in grid.edges():
            opened += 1
            if not sets.union(y1 * grid.columns + x1, y2 * grid.columns + x2):
                raise ConsistencyViolation(f"Opening between {(x1, y1)} and {(x2, y2)} closes a cycle")

        if sets.count != 1:
            raise ConsistencyViolation(f"Maze splits into {sets.count} unconnected regions")
        return opened
