import unittest
import sys
import os

# Add project root to path so we can import maze_carver
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.core.events import EventLog, EVT_OVERLAY_SET, EVT_OVERLAY_CLEARED, EVT_WALL_OPENED
from maze_carver.core.errors import ConfigurationError, ConsistencyViolation, OutOfBounds


class TestGrid(unittest.TestCase):
    def test_initialization(self):
        rows, columns = 4, 6
        grid = Grid(rows, columns)
        self.assertEqual(grid.frame_width, 2 * columns + 1)
        self.assertEqual(grid.frame_height, rows + 1)
        self.assertEqual(len(grid.walls), (2 * columns + 1) * (rows + 1))

        openings = [(fx, fy) for fy in range(grid.frame_height) for fx in range(grid.frame_width)
                    if grid.get_wall(fx, fy) == Grid.OPEN]
        self.assertEqual(openings, [(1, 0), (2 * columns - 1, rows)])

        # Outer vertical borders
        for fy in range(1, rows + 1):
            self.assertEqual(grid.get_wall(0, fy), Grid.BORDER)
            self.assertEqual(grid.get_wall(2 * columns, fy), Grid.BORDER)
        self.assertEqual(grid.open_wall_count(), 0)

    def test_zero_dimensions(self):
        with self.assertRaises(ConfigurationError):
            Grid(0, 5)
        with self.assertRaises(ConfigurationError):
            Grid(5, 0)

    def test_coordinates(self):
        grid = Grid(5, 5)
        self.assertEqual(grid.get_index(2, 2), 24)  # 2 * 11 + 2

        with self.assertRaises(OutOfBounds):
            grid.get_wall(-1, 0)
        with self.assertRaises(IndexError):
            grid.get_wall(11, 0)
        with self.assertRaises(ConsistencyViolation):
            grid.set_wall(0, 6, Grid.OPEN)

    def test_entrance_and_exit(self):
        grid = Grid(3, 7)
        self.assertEqual(grid.entrance(), (0, 0))
        self.assertEqual(grid.exit(), (6, 2))
        self.assertEqual(grid.cell_unit(grid.exit()), grid.exit_unit())

    def test_single_cell(self):
        grid = Grid(1, 1)
        self.assertEqual(grid.entrance(), grid.exit())
        self.assertEqual(grid.internal_walls(), [])
        self.assertEqual(list(grid.neighbors((0, 0))), [])

    def test_neighbors(self):
        grid = Grid(3, 3)
        # Center cell has 4 neighbors: left, right, up, down
        self.assertEqual(list(grid.neighbors((1, 1))), [(0, 1), (2, 1), (1, 0), (1, 2)])

        # Corner cell (0,0) has 2 neighbors
        self.assertEqual(list(grid.neighbors((0, 0))), [(1, 0), (0, 1)])
        self.assertEqual(list(grid.neighbors((2, 2))), [(1, 2), (2, 1)])

    def test_wall_between(self):
        grid = Grid(3, 3)
        self.assertEqual(grid.wall_between((0, 0), (1, 0)), (2, 1))
        self.assertEqual(grid.wall_between((1, 0), (0, 0)), (2, 1))
        self.assertEqual(grid.wall_between((0, 0), (0, 1)), (1, 1))
        self.assertEqual(grid.wall_between((1, 2), (1, 1)), (3, 2))

        with self.assertRaises(ConsistencyViolation):
            grid.wall_between((0, 0), (1, 1))
        with self.assertRaises(ConsistencyViolation):
            grid.wall_between((0, 0), (2, 0))
        with self.assertRaises(ConsistencyViolation):
            grid.wall_between((2, 0), (3, 0))

    def test_internal_walls(self):
        rows, columns = 4, 5
        grid = Grid(rows, columns)
        walls = grid.internal_walls()
        self.assertEqual(len(walls), rows * (columns - 1) + columns * (rows - 1))
        self.assertEqual(len(set(walls)), len(walls))

        # cells_separated_by undoes wall_between
        for fx, fy in walls:
            a, b = grid.cells_separated_by(fx, fy)
            self.assertEqual(grid.wall_between(a, b), (fx, fy))

        with self.assertRaises(ConsistencyViolation):
            grid.cells_separated_by(0, 1)  # outer border
        with self.assertRaises(ConsistencyViolation):
            grid.cells_separated_by(1, rows)  # floor of the last row

    def test_open(self):
        grid = Grid(2, 2)
        grid.open((0, 0), (1, 0))
        self.assertEqual(grid.get_wall(2, 1), Grid.OPEN)
        self.assertTrue(grid.is_open_between((1, 0), (0, 0)))
        self.assertFalse(grid.is_open_between((0, 0), (0, 1)))
        self.assertEqual(grid.edges(), [((0, 0), (1, 0))])

        # No double open
        with self.assertRaises(ConsistencyViolation):
            grid.open((1, 0), (0, 0))

    def test_border_is_immutable(self):
        grid = Grid(2, 2)
        with self.assertRaises(ConsistencyViolation):
            grid.set_wall(0, 1, Grid.OPEN)
        with self.assertRaises(ConsistencyViolation):
            grid.set_wall(1, 1, Grid.BORDER)

    def test_overlay_does_not_change_walls(self):
        grid = Grid(2, 2)
        before = grid.walls.tobytes()
        grid.set_overlay(1, 1, Grid.DOT)
        self.assertEqual(grid.get_overlay(1, 1), Grid.DOT)
        self.assertEqual(grid.walls.tobytes(), before)
        grid.clear_overlay(1, 1)
        self.assertIsNone(grid.get_overlay(1, 1))

    def test_events(self):
        log = EventLog()
        grid = Grid(2, 3, event_sink=log)
        self.assertEqual((log.rows, log.columns), (2, 3))

        grid.open((0, 0), (0, 1))
        grid.set_overlay(1, 1, '→')
        grid.clear_overlay(1, 1)
        grid.clear_overlay(1, 1)  # nothing left to clear, no event

        self.assertEqual(log.events, [
            (EVT_WALL_OPENED, (1, 1)),
            (EVT_OVERLAY_SET, (1, 1, '→')),
            (EVT_OVERLAY_CLEARED, (1, 1)),
        ])

    def test_direction_glyph(self):
        self.assertEqual(Grid.direction_glyph((1, 1), (2, 1)), '→')
        self.assertEqual(Grid.direction_glyph((1, 1), (0, 1)), '←')
        self.assertEqual(Grid.direction_glyph((1, 1), (1, 0)), '↑')
        self.assertEqual(Grid.direction_glyph((1, 1), (1, 2)), '↓')


if __name__ == '__main__':
    unittest.main()
