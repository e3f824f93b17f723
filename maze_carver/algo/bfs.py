import logging
from typing import Iterator, List, Set
from maze_carver.core.grid import Cell, Grid
from maze_carver.algo.base import Generator

logger = logging.getLogger(__name__)


class RandomizedBreadthFirst(Generator):
    """
    Same stack walk as the depth-first carver, but the whole stack is
    reshuffled after every carve so the next cell comes from anywhere on
    the frontier. Produces shorter, bushier branches.
    """
    def run(self) -> Iterator[str]:
        grid = self.grid
        offsets = list(Grid.OFFSETS)

        # Cells waiting on the stack count as discovered, so nothing gets linked twice
        discovered: Set[Cell] = {grid.entrance()}
        stack: List[Cell] = [grid.entrance()]

        while stack:
            cx, cy = stack[-1]
            grid.clear_overlay(*grid.cell_unit((cx, cy)))

            self.rng.shuffle(offsets)
            for dx, dy in offsets:
                nx, ny = cx + dx, cy + dy
                if not grid.in_bounds(nx, ny) or (nx, ny) in discovered:
                    continue

                grid.open((cx, cy), (nx, ny))
                discovered.add((nx, ny))
                stack.append((nx, ny))
                grid.set_overlay(*grid.cell_unit((nx, ny)), Grid.DOT)

                self.rng.shuffle(stack)
                self.step_count += 1
                yield f"Carving... Frontier: {len(stack)}"
                break
            else:
                stack.pop()
                yield f"Backtracking... Frontier: {len(stack)}"

        logger.debug("Breadth-first carving opened %d walls", self.step_count)
        yield "Done"
