import logging
from typing import Iterator, List, Set
from maze_carver.core.grid import Cell, Grid
from maze_carver.algo.base import Generator

logger = logging.getLogger(__name__)


class RandomizedDepthFirst(Generator):
    """
    Randomized depth-first carving:

        stack.push(entrance)
        while stack:
            cell = stack.peek()
            if cell has an unvisited neighbor (random order):
                carve to it, stack.push(neighbor)
            else:
                stack.pop()
    """
    def run(self) -> Iterator[str]:
        grid = self.grid
        offsets = list(Grid.OFFSETS)

        visited: Set[Cell] = set()
        stack: List[Cell] = [grid.entrance()]

        while stack:
            cx, cy = stack[-1]
            visited.add((cx, cy))
            unit = grid.cell_unit((cx, cy))
            grid.set_overlay(*unit, Grid.DOT)

            self.rng.shuffle(offsets)
            for dx, dy in offsets:
                nx, ny = cx + dx, cy + dy
                if not grid.in_bounds(nx, ny) or (nx, ny) in visited:
                    continue

                grid.open((cx, cy), (nx, ny))
                stack.append((nx, ny))

                # Point the current cell at the cell we just carved into
                grid.set_overlay(*unit, Grid.ARROWS[(dx, dy)])
                self.step_count += 1
                yield f"Carving... Stack: {len(stack)}"
                break
            else:
                # Dead end, backtrack
                stack.pop()
                grid.clear_overlay(*unit)
                yield f"Backtracking... Stack: {len(stack)}"

        logger.debug("Depth-first carving opened %d walls", self.step_count)
        yield "Done"
