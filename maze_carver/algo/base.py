import random
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Iterator
from maze_carver.core.grid import Grid


class GeneratorKind(Enum):
    DEPTH_FIRST_SEARCH = "depth_first_search"
    BREADTH_FIRST_SEARCH = "breadth_first_search"
    KRUSKAL = "kruskal"


class Generator(ABC):
    def __init__(self, grid: Grid, seed: int = None, rng: random.Random = None):
        self.grid = grid
        self.seed = seed
        # Injected rng wins over seed so tests can control shuffles directly
        self.rng = rng if rng is not None else random.Random(seed)
        self.step_count = 0

    @abstractmethod
    def run(self) -> Iterator[str]:
        """
        Yields one status string per algorithm iteration.
        The actual grid modifications happen in-place on self.grid.
        """
        pass

    def run_all(self):
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass


def create_generator(kind: GeneratorKind, grid: Grid, seed: int = None, rng: random.Random = None) -> Generator:
    if kind == GeneratorKind.DEPTH_FIRST_SEARCH:
        from maze_carver.algo.dfs import RandomizedDepthFirst
        return RandomizedDepthFirst(grid, seed=seed, rng=rng)
    elif kind == GeneratorKind.BREADTH_FIRST_SEARCH:
        from maze_carver.algo.bfs import RandomizedBreadthFirst
        return RandomizedBreadthFirst(grid, seed=seed, rng=rng)
    elif kind == GeneratorKind.KRUSKAL:
        from maze_carver.algo.kruskal import Kruskal
        return Kruskal(grid, seed=seed, rng=rng)
    raise ValueError(f"Unknown generator kind: {kind}")


def drive(steps: Iterable[str], delay_ms: int = 0, sleep=time.sleep) -> int:
    """
    Consumes a step iterator, waiting delay_ms between steps.
    A delay of 0 runs everything back to back. Returns the number of steps.
    """
    count = 0
    for _ in steps:
        count += 1
        if delay_ms > 0:
            sleep(delay_ms / 1000.0)
    return count
