class MazeError(Exception):
    """Base class for every error raised by maze_carver."""


class ConfigurationError(MazeError, ValueError):
    """Invalid dimensions or conflicting options, raised before any algorithm runs."""


class MalformedMazeFile(MazeError, ValueError):
    def __init__(self, message: str, row: int, column: int):
        super().__init__(f"{message} (row {row}, column {column})")
        self.row = row
        self.column = column


class ConsistencyViolation(MazeError, RuntimeError):
    """
    A broken invariant upstream: no path through a perfect maze, opening a
    wall twice, carving between non-adjacent cells. Not recoverable.
    """


class OutOfBounds(ConsistencyViolation, IndexError):
    pass
