import logging
from array import array
from maze_carver.core.errors import MalformedMazeFile
from maze_carver.core.grid import Grid

logger = logging.getLogger(__name__)


class MazeSerializer:
    """
    Plain-text maze files, one character per wall unit:
    - '_' horizontal blocking wall
    - '|' vertical wall
    - ' ' open

    Separators between cells (even columns) only block when drawn as '|';
    an opened separator is written as '_' when the floor continues under it
    on both sides, so '_' and ' ' both read back as open there.
    """
    HORIZONTAL = '_'
    VERTICAL = '|'
    OPEN = ' '

    @staticmethod
    def dumps(grid: Grid) -> str:
        width = grid.frame_width
        walls = grid.walls
        lines = []
        for fy in range(grid.frame_height):
            row = []
            for fx in range(width):
                kind = walls[fy * width + fx]
                if fy > 0 and fx % 2 == 0:
                    if kind != Grid.OPEN:
                        row.append(MazeSerializer.VERTICAL)
                    elif walls[fy * width + fx - 1] == Grid.BLOCKING and walls[fy * width + fx + 1] == Grid.BLOCKING:
                        row.append(MazeSerializer.HORIZONTAL)
                    else:
                        row.append(MazeSerializer.OPEN)
                else:
                    row.append(MazeSerializer.OPEN if kind == Grid.OPEN else MazeSerializer.HORIZONTAL)
            lines.append("".join(row))
        return "\n".join(lines) + "\n"

    @staticmethod
    def loads(text: str) -> Grid:
        lines = text.splitlines()
        if len(lines) < 2:
            raise MalformedMazeFile(f"Expected at least 2 lines, got {len(lines)}", len(lines), 0)

        width = len(lines[0])
        if width < 3:
            raise MalformedMazeFile(f"Expected at least 3 columns, got {width}", 0, width)
        if width % 2 == 0:
            raise MalformedMazeFile(f"Expected an odd number of columns, got {width}", 0, width)

        kinds = []
        for fy, line in enumerate(lines):
            if len(line) != width:
                raise MalformedMazeFile(f"Line has {len(line)} columns, expected {width}", fy, min(len(line), width))

            for fx, char in enumerate(line):
                kinds.append(MazeSerializer._parse_unit(char, fx, fy, width))

        grid = Grid(len(lines) - 1, (width - 1) // 2)
        # Replace walls completely
        grid.walls = array('B', kinds)
        return grid

    @staticmethod
    def _parse_unit(char: str, fx: int, fy: int, width: int) -> int:
        if char not in (MazeSerializer.HORIZONTAL, MazeSerializer.VERTICAL, MazeSerializer.OPEN):
            raise MalformedMazeFile(f"Bad character {char!r}", fy, fx)

        if fy == 0 or fx % 2 == 1:
            # Top border and cell floors
            if char == MazeSerializer.VERTICAL:
                raise MalformedMazeFile("Vertical wall outside a separator column", fy, fx)
            return Grid.BLOCKING if char == MazeSerializer.HORIZONTAL else Grid.OPEN

        if fx == 0 or fx == width - 1:
            if char != MazeSerializer.VERTICAL:
                raise MalformedMazeFile("Outer border must be a vertical wall", fy, fx)
            return Grid.BORDER

        return Grid.BLOCKING if char == MazeSerializer.VERTICAL else Grid.OPEN

    @staticmethod
    def save(grid: Grid, filepath: str):
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(MazeSerializer.dumps(grid))
        logger.debug("Saved %dx%d maze to %s", grid.rows, grid.columns, filepath)

    @staticmethod
    def load(filepath: str) -> Grid:
        with open(filepath, "rb") as f:
            data = f.read()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            # Position of the first undecodable byte, column counted in characters
            prefix = data[:e.start].decode("utf-8", errors="replace")
            row = prefix.count("\n")
            column = len(prefix) - (prefix.rfind("\n") + 1)
            raise MalformedMazeFile("Invalid UTF-8", row, column) from e
        grid = MazeSerializer.loads(text)
        logger.debug("Loaded %dx%d maze from %s", grid.rows, grid.columns, filepath)
        return grid
