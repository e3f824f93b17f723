from array import array
from typing import Dict, Iterator, List, Optional, Tuple

from maze_carver.core.errors import ConfigurationError, ConsistencyViolation, OutOfBounds

Cell = Tuple[int, int]


class Grid:
    """
    Frame matrix of wall units for a rows x columns maze.

    Example 3x3 maze in its text form:

        _ _____     row 0: top border, entrance at (1, 0)
        |____ |     row y+1: (2x+1) is the cell unit of (x, y) and holds
        |   | |              the wall below it, (2x+2) is the separator
        |_|__ |              right of it. Exit at (2*columns-1, rows).
    """
    # Wall unit kinds
    BLOCKING = 0
    OPEN = 1
    BORDER = 2

    # Offsets (dx, dy)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)
    OFFSETS = (LEFT, RIGHT, UP, DOWN)

    # Overlay glyphs
    DOT = '·'
    ARROWS = {LEFT: '←', RIGHT: '→', UP: '↑', DOWN: '↓'}

    __slots__ = ('rows', 'columns', 'frame_width', 'frame_height', 'walls', 'overlays', 'event_sink')

    def __init__(self, rows: int, columns: int, event_sink=None):
        if rows < 1 or columns < 1:
            raise ConfigurationError(f"Maze needs at least 1 row and 1 column, got {rows}x{columns}")

        self.rows = rows
        self.columns = columns
        self.frame_width = 2 * columns + 1
        self.frame_height = rows + 1
        self.event_sink = event_sink

        # 'B' (unsigned char) -> 1 byte per wall unit, everything blocking
        self.walls = array('B', [self.BLOCKING] * (self.frame_width * self.frame_height))
        # Overlay glyphs keyed by frame index, kept apart from the wall kind
        self.overlays: Dict[int, str] = {}

        for fy in range(1, self.frame_height):
            self.walls[fy * self.frame_width] = self.BORDER
            self.walls[fy * self.frame_width + self.frame_width - 1] = self.BORDER

        self.walls[self.get_index(*self.entrance_unit())] = self.OPEN
        self.walls[self.get_index(*self.exit_unit())] = self.OPEN

        if self.event_sink:
            self.event_sink.write_header(rows, columns)

    @classmethod
    def create_walled(cls, rows: int, columns: int, event_sink=None) -> "Grid":
        return cls(rows, columns, event_sink=event_sink)

    # Frame access

    def get_index(self, fx: int, fy: int) -> int:
        if 0 <= fx < self.frame_width and 0 <= fy < self.frame_height:
            return fy * self.frame_width + fx
        raise OutOfBounds(f"Frame coordinate ({fx}, {fy}) out of bounds")

    def get_wall(self, fx: int, fy: int) -> int:
        return self.walls[self.get_index(fx, fy)]

    def set_wall(self, fx: int, fy: int, kind: int):
        idx = self.get_index(fx, fy)
        current = self.walls[idx]
        if current == self.BORDER or kind == self.BORDER:
            raise ConsistencyViolation(f"Border unit ({fx}, {fy}) is fixed at construction")

        self.walls[idx] = kind
        if kind == self.OPEN and current != self.OPEN and self.event_sink:
            self.event_sink.log_wall_opened(fx, fy)

    def is_passable(self, fx: int, fy: int) -> bool:
        return self.get_wall(fx, fy) == self.OPEN

    def get_overlay(self, fx: int, fy: int) -> Optional[str]:
        return self.overlays.get(self.get_index(fx, fy))

    def set_overlay(self, fx: int, fy: int, glyph: str):
        self.overlays[self.get_index(fx, fy)] = glyph
        if self.event_sink:
            self.event_sink.log_overlay_set(fx, fy, glyph)

    def clear_overlay(self, fx: int, fy: int):
        # Only emit when something was actually removed
        if self.overlays.pop(self.get_index(fx, fy), None) is not None and self.event_sink:
            self.event_sink.log_overlay_cleared(fx, fy)

    def clear_overlays(self):
        for idx in sorted(self.overlays):
            self.clear_overlay(idx % self.frame_width, idx // self.frame_width)

    # Cell geometry

    def entrance(self) -> Cell:
        return (0, 0)

    def exit(self) -> Cell:
        return (self.columns - 1, self.rows - 1)

    def entrance_unit(self) -> Tuple[int, int]:
        return (1, 0)

    def exit_unit(self) -> Tuple[int, int]:
        return (2 * self.columns - 1, self.rows)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.columns and 0 <= y < self.rows

    def cell_unit(self, cell: Cell) -> Tuple[int, int]:
        """Frame coordinates of the unit a cell's overlay glyph is drawn on."""
        x, y = cell
        return (2 * x + 1, y + 1)

    def neighbors(self, cell: Cell) -> Iterator[Cell]:
        """
        Yields in-bounds neighbors (left, right, up, down).
        Does NOT check walls.
        """
        x, y = cell
        for dx, dy in self.OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.columns and 0 <= ny < self.rows:
                yield (nx, ny)

    def wall_between(self, a: Cell, b: Cell) -> Tuple[int, int]:
        """Frame coordinates of the unit separating two 4-adjacent cells."""
        (x1, y1), (x2, y2) = a, b
        if abs(x1 - x2) + abs(y1 - y2) != 1 or not self.in_bounds(x1, y1) or not self.in_bounds(x2, y2):
            raise ConsistencyViolation(f"Cells {a} and {b} are not adjacent")
        return (x1 + x2 + 1, min(y1, y2) + 1)

    def cells_separated_by(self, fx: int, fy: int) -> Tuple[Cell, Cell]:
        """Inverse of wall_between: the two cells on either side of an internal unit."""
        if fx % 2 == 0:
            # Separator: left and right cell
            if 2 <= fx <= 2 * self.columns - 2 and 1 <= fy <= self.rows:
                x = (fx - 2) // 2
                return (x, fy - 1), (x + 1, fy - 1)
        elif 1 <= fx <= 2 * self.columns - 1 and 1 <= fy <= self.rows - 1:
            # Floor: cell above and cell below
            x = (fx - 1) // 2
            return (x, fy - 1), (x, fy)
        raise ConsistencyViolation(f"Frame unit ({fx}, {fy}) is not an internal wall")

    def is_open_between(self, a: Cell, b: Cell) -> bool:
        return self.get_wall(*self.wall_between(a, b)) == self.OPEN

    def open(self, a: Cell, b: Cell):
        """Carves the wall between two adjacent cells. Overlay glyphs are left alone."""
        fx, fy = self.wall_between(a, b)
        idx = self.get_index(fx, fy)
        if self.walls[idx] != self.BLOCKING:
            raise ConsistencyViolation(f"Wall between {a} and {b} is not blocking")

        self.walls[idx] = self.OPEN
        if self.event_sink:
            self.event_sink.log_wall_opened(fx, fy)

    def internal_walls(self) -> List[Tuple[int, int]]:
        # Floors between vertically adjacent cells, then separators between horizontal ones
        floors = [(fx, fy) for fx in range(1, 2 * self.columns, 2) for fy in range(1, self.rows)]
        separators = [(fx, fy) for fx in range(2, 2 * self.columns, 2) for fy in range(1, self.rows + 1)]
        return floors + separators

    def edges(self) -> List[Tuple[Cell, Cell]]:
        return [self.cells_separated_by(fx, fy) for fx, fy in self.internal_walls()
                if self.walls[fy * self.frame_width + fx] == self.OPEN]

    def open_wall_count(self) -> int:
        return len(self.edges())

    @classmethod
    def direction_glyph(cls, a: Cell, b: Cell) -> str:
        """Arrow pointing from cell a to its neighbor b."""
        return cls.ARROWS[(b[0] - a[0], b[1] - a[1])]
