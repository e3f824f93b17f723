import sys
import os
import time
import argparse

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.core.analysis import MazeAnalysis
from maze_carver.algo.base import GeneratorKind, create_generator
from maze_carver.algo.solvers import SolverKind, create_solver


def benchmark_size(rows: int, columns: int, seed: int):
    print(f"\n--- Benchmarking {rows}x{columns} ({rows*columns:,} cells) ---")

    for kind in GeneratorKind:
        grid = Grid(rows, columns)
        algo = create_generator(kind, grid, seed=seed)

        gen_start = time.time()
        algo.run_all()
        gen_time = time.time() - gen_start

        stats = MazeAnalysis.calculate_stats(grid)
        print(f"{kind.value:<22} {gen_time:8.4f}s  {(rows*columns)/max(gen_time, 1e-9):>12,.0f} cells/sec"
              f"  dead ends {stats['dead_end_percent']:.1f}%")

        for solver_kind in SolverKind:
            grid.clear_overlays()
            solver = create_solver(solver_kind, grid)

            solve_start = time.time()
            solver.run_all()
            solve_time = time.time() - solve_start

            print(f"    {solver_kind.value:<20} {solve_time:8.4f}s  "
                  f"path {solver.steps:,} steps, visited {solver.visited_count:,}")


def run_suite():
    parser = argparse.ArgumentParser(description="Time every generator and solver")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--sizes", type=int, nargs="+", default=[50, 200, 500],
                        help="Square maze sizes to run")
    args = parser.parse_args()

    for size in args.sizes:
        benchmark_size(size, size, args.seed)


if __name__ == "__main__":
    run_suite()
