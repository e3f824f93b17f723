import heapq
import logging
from abc import ABC, abstractmethod
from array import array
from enum import Enum
from typing import Iterator, List, Set
from maze_carver.core.errors import ConsistencyViolation
from maze_carver.core.grid import Cell, Grid

logger = logging.getLogger(__name__)


class SolverKind(Enum):
    DEPTH_FIRST_SEARCH = "depth_first_search"
    A_STAR = "a_star"


class Solver(ABC):
    def __init__(self, grid: Grid, trace: bool = False):
        self.grid = grid
        self.trace = trace
        self.path: List[Cell] = []
        self.visited_count = 0

    @property
    def steps(self) -> int:
        """Moves along the path, 0 when entrance and exit coincide."""
        return max(len(self.path) - 1, 0)

    @abstractmethod
    def run(self, start: Cell = None, end: Cell = None) -> Iterator[str]:
        pass

    def run_all(self, start: Cell = None, end: Cell = None) -> List[Cell]:
        for _ in self.run(start, end):
            pass
        return self.path

    def endpoints(self, start: Cell, end: Cell):
        return (start if start is not None else self.grid.entrance(),
                end if end is not None else self.grid.exit())

    def mark_visited(self, cell: Cell):
        self.visited_count += 1
        if self.trace:
            self.grid.set_overlay(*self.grid.cell_unit(cell), Grid.DOT)

    def trace_path(self) -> Iterator[str]:
        """Draws an arrow in every path cell pointing at the next one."""
        grid = self.grid
        for a, b in zip(self.path, self.path[1:]):
            grid.set_overlay(*grid.cell_unit(a), Grid.direction_glyph(a, b))
            yield "Tracing..."

        # Last arrow leads out through the exit opening
        last = self.path[-1]
        if last == grid.exit() and grid.is_passable(*grid.exit_unit()):
            grid.set_overlay(*grid.cell_unit(last), Grid.ARROWS[Grid.DOWN])
            yield "Tracing..."


class DepthFirstSolver(Solver):
    def run(self, start: Cell = None, end: Cell = None) -> Iterator[str]:
        grid = self.grid
        start, end = self.endpoints(start, end)
        self.path = []

        visited: Set[Cell] = set()
        stack: List[Cell] = [start]

        while stack:
            current = stack[-1]
            if current not in visited:
                visited.add(current)
                self.mark_visited(current)

            if current == end:
                break

            for n in grid.neighbors(current):
                if n in visited or not grid.is_open_between(current, n):
                    continue
                stack.append(n)
                yield f"Stack: {len(stack)}"
                break
            else:
                stack.pop()
                yield f"Stack: {len(stack)}"

        if not stack:
            raise ConsistencyViolation(f"No path from {start} to {end}")

        # Whatever is left on the stack, bottom to top, is the path
        self.path = list(stack)
        logger.debug("DFS solver: %d steps, %d cells visited", self.steps, self.visited_count)

        yield from self.trace_path()
        yield "Solved"


class AStar(Solver):
    def run(self, start: Cell = None, end: Cell = None) -> Iterator[str]:
        grid = self.grid
        start, end = self.endpoints(start, end)
        self.path = []
        columns = grid.columns

        # Dense arrays indexed by y * columns + x, -1 = unset
        size = grid.rows * columns
        self.g_score = array('i', [-1] * size)
        self.parents = array('i', [-1] * size)
        closed = bytearray(size)

        h = self.heuristic(start, end)
        # Priority Queue: (f_score, h_score, x, y)
        open_set = [(h, h, start[0], start[1])]
        self.g_score[start[1] * columns + start[0]] = 0

        found = False
        while open_set:
            _, _, cx, cy = heapq.heappop(open_set)
            curr_idx = cy * columns + cx
            if closed[curr_idx]:
                continue
            closed[curr_idx] = 1
            self.mark_visited((cx, cy))

            if (cx, cy) == end:
                found = True
                break

            new_g = self.g_score[curr_idx] + 1
            for nx, ny in grid.neighbors((cx, cy)):
                n_idx = ny * columns + nx
                if closed[n_idx] or not grid.is_open_between((cx, cy), (nx, ny)):
                    continue

                old_g = self.g_score[n_idx]
                if old_g == -1 or new_g < old_g:
                    self.g_score[n_idx] = new_g
                    self.parents[n_idx] = curr_idx
                    h = self.heuristic((nx, ny), end)
                    heapq.heappush(open_set, (new_g + h, h, nx, ny))

            yield f"Open: {len(open_set)}"

        if not found:
            raise ConsistencyViolation(f"No path from {start} to {end}")

        self.reconstruct_path(start, end)
        logger.debug("A* solver: %d steps, %d cells expanded", self.steps, self.visited_count)

        yield from self.trace_path()
        yield "Solved"

    def reconstruct_path(self, start: Cell, end: Cell):
        columns = self.grid.columns
        curr = end
        while curr != start:
            self.path.append(curr)
            p_idx = self.parents[curr[1] * columns + curr[0]]
            curr = (p_idx % columns, p_idx // columns)
        self.path.append(start)
        self.path.reverse()

    def heuristic(self, a: Cell, b: Cell) -> int:
        return abs(a[0] - b[0]) + abs(a[1] - b[1])


def create_solver(kind: SolverKind, grid: Grid, trace: bool = False) -> Solver:
    if kind == SolverKind.DEPTH_FIRST_SEARCH:
        return DepthFirstSolver(grid, trace=trace)
    elif kind == SolverKind.A_STAR:
        return AStar(grid, trace=trace)
    raise ValueError(f"Unknown solver kind: {kind}")
