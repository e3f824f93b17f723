import logging
from typing import Iterator
from maze_carver.core.disjoint_sets import DisjointSets
from maze_carver.algo.base import Generator

logger = logging.getLogger(__name__)


class Kruskal(Generator):
    def __init__(self, grid, seed: int = None, rng=None):
        super().__init__(grid, seed=seed, rng=rng)
        self.skipped = 0

    def run(self) -> Iterator[str]:
        grid = self.grid
        columns = grid.columns

        # One set per cell, identified by y * columns + x
        sets = DisjointSets(grid.rows * columns)

        walls = grid.internal_walls()
        self.rng.shuffle(walls)
        self.skipped = 0

        while walls:
            fx, fy = walls.pop()
            (x1, y1), (x2, y2) = grid.cells_separated_by(fx, fy)

            # Same set already: opening this wall would close a loop
            if not sets.union(y1 * columns + x1, y2 * columns + x2):
                self.skipped += 1
                yield f"Skipped... Walls: {len(walls)}"
                continue

            grid.open((x1, y1), (x2, y2))
            self.step_count += 1
            yield f"Carving... Walls: {len(walls)}"

        logger.debug("Kruskal opened %d walls, skipped %d", self.step_count, self.skipped)
        yield "Done"
