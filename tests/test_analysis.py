import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.core.analysis import MazeAnalysis
from maze_carver.core.disjoint_sets import DisjointSets
from maze_carver.core.errors import ConsistencyViolation
from maze_carver.algo.dfs import RandomizedDepthFirst


class TestAnalysis(unittest.TestCase):
    def test_stats(self):
        rows, columns = 20, 20
        grid = Grid(rows, columns)
        RandomizedDepthFirst(grid, seed=42).run_all()

        stats = MazeAnalysis.calculate_stats(grid)
        self.assertEqual(stats["open_walls"], rows * columns - 1)
        self.assertGreater(stats["dead_ends"], 0)
        self.assertEqual(stats["dead_ends"] + stats["corridors"] + stats["junctions"], rows * columns)

    def test_walled_grid_is_not_a_tree(self):
        grid = Grid(3, 3)
        self.assertEqual(MazeAnalysis.reachable_count(grid), 1)
        with self.assertRaises(ConsistencyViolation):
            MazeAnalysis.verify_spanning_tree(grid)

    def test_loop_is_detected(self):
        grid = Grid(2, 2)
        RandomizedDepthFirst(grid, seed=1).run_all()
        MazeAnalysis.verify_spanning_tree(grid)

        # Open the one remaining internal wall to close a loop
        fx, fy = next(w for w in grid.internal_walls() if grid.get_wall(*w) == Grid.BLOCKING)
        grid.set_wall(fx, fy, Grid.OPEN)
        with self.assertRaises(ConsistencyViolation):
            MazeAnalysis.verify_spanning_tree(grid)

    def test_single_cell_is_a_tree(self):
        self.assertEqual(MazeAnalysis.verify_spanning_tree(Grid(1, 1)), 0)


class TestDisjointSets(unittest.TestCase):
    def test_union_find(self):
        sets = DisjointSets(5)
        self.assertEqual(sets.count, 5)
        self.assertTrue(sets.union(0, 1))
        self.assertTrue(sets.union(3, 4))
        self.assertFalse(sets.union(1, 0))
        self.assertTrue(sets.equiv(0, 1))
        self.assertFalse(sets.equiv(1, 3))

        self.assertTrue(sets.union(1, 4))
        self.assertTrue(sets.equiv(0, 3))
        self.assertEqual(sets.count, 2)


if __name__ == '__main__':
    unittest.main()
