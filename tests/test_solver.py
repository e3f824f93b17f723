import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.core.errors import ConsistencyViolation
from maze_carver.core.events import EventLog, EVT_OVERLAY_SET, EVT_WALL_OPENED
from maze_carver.algo.base import GeneratorKind, create_generator
from maze_carver.algo.solvers import AStar, DepthFirstSolver, SolverKind, create_solver

EXPECTED_PATH = [(0, 0), (0, 1), (0, 2), (1, 2), (2, 2), (3, 2), (4, 2), (4, 3), (4, 4)]


class TestSolvers(unittest.TestCase):
    def create_simple_maze(self):
        # 5x5 maze, one corridor plus a dead-end branch (0,0) -> (1,0) -> (2,0)
        grid = Grid(5, 5)
        for a, b in zip(EXPECTED_PATH, EXPECTED_PATH[1:]):
            grid.open(a, b)
        grid.open((0, 0), (1, 0))
        grid.open((1, 0), (2, 0))
        return grid

    def assert_valid_path(self, grid, path):
        self.assertEqual(path[0], grid.entrance())
        self.assertEqual(path[-1], grid.exit())
        for a, b in zip(path, path[1:]):
            self.assertTrue(grid.is_open_between(a, b), f"{a} -> {b} goes through a wall")

    def test_dfs_path(self):
        grid = self.create_simple_maze()
        solver = DepthFirstSolver(grid)
        path = solver.run_all()

        self.assertEqual(path, EXPECTED_PATH)
        self.assertEqual(solver.steps, 8)

    def test_astar_path(self):
        grid = self.create_simple_maze()
        solver = AStar(grid)
        path = solver.run_all()

        self.assertEqual(path, EXPECTED_PATH)
        self.assertEqual(solver.steps, 8)

    def test_path_arrows(self):
        for cls in (DepthFirstSolver, AStar):
            grid = self.create_simple_maze()
            cls(grid).run_all()

            arrows = {cell: grid.get_overlay(*grid.cell_unit(cell)) for cell in EXPECTED_PATH}
            self.assertEqual(arrows[(0, 0)], '↓')
            self.assertEqual(arrows[(0, 2)], '→')
            self.assertEqual(arrows[(4, 2)], '↓')
            # Exit cell points out of the maze
            self.assertEqual(arrows[(4, 4)], '↓')

            # Without trace nothing off the path is marked
            self.assertIsNone(grid.get_overlay(*grid.cell_unit((2, 0))))
            self.assertEqual(len(grid.overlays), len(EXPECTED_PATH))

    def test_trace_marks_visited_cells(self):
        grid = self.create_simple_maze()
        # DFS tries right before down at (0,0), so it walks into the dead end first
        solver = DepthFirstSolver(grid, trace=True)
        solver.run_all()

        self.assertEqual(grid.get_overlay(*grid.cell_unit((2, 0))), Grid.DOT)
        self.assertEqual(grid.get_overlay(*grid.cell_unit((1, 0))), Grid.DOT)
        self.assertEqual(solver.visited_count, len(EXPECTED_PATH) + 2)

    def test_solver_only_touches_overlays(self):
        for kind in SolverKind:
            log = EventLog()
            grid = Grid(8, 8)
            create_generator(GeneratorKind.KRUSKAL, grid, seed=4).run_all()
            walls = grid.walls.tobytes()

            grid.event_sink = log
            create_solver(kind, grid, trace=True).run_all()

            self.assertEqual(grid.walls.tobytes(), walls)
            self.assertEqual(log.of_type(EVT_WALL_OPENED), [])
            self.assertTrue(log.of_type(EVT_OVERLAY_SET))

    def test_no_path(self):
        for cls in (DepthFirstSolver, AStar):
            grid = Grid(5, 5)  # All walls
            with self.assertRaises(ConsistencyViolation):
                cls(grid).run_all()

    def test_single_cell(self):
        for kind in SolverKind:
            grid = Grid(1, 1)
            solver = create_solver(kind, grid)
            self.assertEqual(solver.run_all(), [(0, 0)])
            self.assertEqual(solver.steps, 0)
            self.assertEqual(grid.get_overlay(1, 1), '↓')

    def test_solvers_agree_on_generated_mazes(self):
        for kind in GeneratorKind:
            for seed in (1, 2, 3):
                with self.subTest(generator=kind.value, seed=seed):
                    grid = Grid(15, 21)
                    create_generator(kind, grid, seed=seed).run_all()

                    dfs = DepthFirstSolver(grid)
                    dfs_path = dfs.run_all()
                    astar = AStar(grid)
                    astar_path = astar.run_all()

                    self.assert_valid_path(grid, dfs_path)
                    self.assert_valid_path(grid, astar_path)
                    # A tree has exactly one simple path between two cells
                    self.assertEqual(dfs.steps, astar.steps)
                    self.assertEqual(dfs_path, astar_path)

    def test_custom_endpoints(self):
        grid = self.create_simple_maze()
        solver = AStar(grid)
        path = solver.run_all(start=(4, 4), end=(2, 0))
        self.assertEqual(path[0], (4, 4))
        self.assertEqual(path[-1], (2, 0))
        self.assertEqual(solver.steps, 10)
        # Only the real exit gets the way-out arrow
        self.assertIsNone(grid.get_overlay(*grid.cell_unit((2, 0))))

    def test_astar_skips_dead_end(self):
        grid = self.create_simple_maze()
        astar = AStar(grid)
        astar.run_all()
        # Every corridor cell has f = 8 and a smaller h than (1,0), so the dead end is never expanded
        self.assertEqual(astar.visited_count, len(EXPECTED_PATH))

    def test_create_solver(self):
        grid = Grid(2, 2)
        self.assertIsInstance(create_solver(SolverKind.DEPTH_FIRST_SEARCH, grid), DepthFirstSolver)
        self.assertIsInstance(create_solver(SolverKind("a_star"), grid), AStar)


if __name__ == '__main__':
    unittest.main()
