import argparse
import datetime
import itertools
import logging
import os
import sys

# Ensure project root is in path so we can import 'maze_carver' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.algo.base import GeneratorKind
from maze_carver.algo.solvers import SolverKind
from maze_carver.core.errors import ConfigurationError, MalformedMazeFile

logger = logging.getLogger("maze_carver")

DEFAULT_GENERATOR = GeneratorKind.DEPTH_FIRST_SEARCH


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Carver: generate, animate and solve perfect mazes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate (or load) a maze and optionally solve it")
    gen_parser.add_argument("rows", type=int, nargs="?", help="Number of rows")
    gen_parser.add_argument("columns", type=int, nargs="?", help="Number of columns")
    gen_parser.add_argument("--algo", type=str, default=None, choices=[k.value for k in GeneratorKind],
                            help=f"Generation algorithm (default: {DEFAULT_GENERATOR.value})")
    gen_parser.add_argument("--solver", type=str, default=None, choices=[k.value for k in SolverKind],
                            help="Solve the maze with this algorithm")
    gen_parser.add_argument("--trace", action="store_true", help="Show every cell the solver visits")
    gen_parser.add_argument("--delay", type=int, default=0, help="Milliseconds between animation steps (0 = instant)")
    gen_parser.add_argument("--input", type=str, help="Load the maze from a text file instead of generating it")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--out", type=str, help="Save the maze to a text file")
    gen_parser.add_argument("--record-events", type=str, help="Save change events to binary file")
    gen_parser.add_argument("--visual", action="store_true", help="Show a pygame window instead of the terminal")
    gen_parser.add_argument("--record", action="store_true", help="Record video of the pygame window")
    gen_parser.add_argument("--stats", action="store_true", help="Log maze statistics and check it is perfect")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Replay an event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("--delay", type=int, default=25, help="Milliseconds between events")
    replay_parser.add_argument("--visual", action="store_true", help="Show a pygame window instead of the terminal")

    return parser


def validate_args(args):
    """Raises ConfigurationError for invalid or conflicting options."""
    if args.delay < 0:
        raise ConfigurationError(f"--delay must not be negative, got {args.delay}")

    if args.command != "generate":
        return

    if args.input:
        if args.algo is not None:
            raise ConfigurationError("--algo cannot be combined with --input")
        if args.rows is not None or args.columns is not None:
            raise ConfigurationError("rows and columns come from the --input file")
    else:
        if args.rows is None or args.columns is None:
            raise ConfigurationError("rows and columns are required unless --input is given")
        if args.rows < 1 or args.columns < 1:
            raise ConfigurationError(f"Maze needs at least 1 row and 1 column, got {args.rows}x{args.columns}")

    if args.trace and not args.solver:
        raise ConfigurationError("--trace needs --solver")


def recording_path(name: str) -> str:
    os.makedirs("recordings", exist_ok=True)
    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join("recordings", f"{name}_{ts}.mp4")


def run_generate(args) -> int:
    from maze_carver.algo.base import create_generator, drive
    from maze_carver.algo.solvers import create_solver
    from maze_carver.core.events import EventFanout, EventWriter
    from maze_carver.core.grid import Grid
    from maze_carver.io.serializer import MazeSerializer
    from maze_carver.viz.terminal import TerminalRenderer

    evt_writer = None
    if args.record_events:
        evt_writer = EventWriter(args.record_events)
        logger.info(f"Recording events to {args.record_events}...")

    # Animate in the terminal only when paced, otherwise draw once at the end
    terminal = None if args.visual or args.record else TerminalRenderer()
    animated = terminal if args.delay > 0 else None
    sink = EventFanout(evt_writer, animated) if evt_writer or animated else None

    try:
        generator = None
        if args.input:
            logger.info(f"Loading {args.input}...")
            grid = MazeSerializer.load(args.input)
            grid.event_sink = sink
            # A loaded grid never announced itself to the sinks
            if sink:
                sink.write_header(grid.rows, grid.columns)
                # Replay starts from a walled grid, so announce the loaded openings
                for fx, fy in grid.internal_walls():
                    if grid.get_wall(fx, fy) == Grid.OPEN:
                        sink.log_wall_opened(fx, fy)
            algo_name = os.path.splitext(os.path.basename(args.input))[0]
        else:
            kind = GeneratorKind(args.algo) if args.algo else DEFAULT_GENERATOR
            logger.info(f"Generating {args.rows}x{args.columns} maze with {kind.value}...")
            grid = Grid(args.rows, args.columns, event_sink=sink)
            generator = create_generator(kind, grid, seed=args.seed)
            algo_name = kind.value

        solver = None
        if args.solver:
            solver = create_solver(SolverKind(args.solver), grid, trace=args.trace)

        stages = [s.run() for s in (generator, solver) if s is not None]
        steps = itertools.chain(*stages)

        if args.visual or args.record:
            from maze_carver.viz.renderer import Renderer
            record_path = None
            if args.record:
                record_path = recording_path(f"maze_{algo_name}_{grid.rows}x{grid.columns}")
                logger.info(f"Recording video to {record_path}")
            renderer = Renderer(grid, steps=steps, delay_ms=args.delay, record_path=record_path)
            renderer.init_window()
            renderer.run_loop()
        else:
            if animated:
                animated.draw(grid)
            drive(steps, args.delay)
            if not animated:
                terminal.draw(grid)
            terminal.finish()
    finally:
        if evt_writer:
            evt_writer.close()

    if solver and solver.path:
        logger.info(f"Path length: {solver.steps} steps, {solver.visited_count} cells visited")

    if args.stats:
        from maze_carver.core.analysis import MazeAnalysis
        stats = MazeAnalysis.calculate_stats(grid)
        logger.info(f"Stats: {stats}")
        MazeAnalysis.verify_spanning_tree(grid)
        logger.info("Maze is a spanning tree")

    if args.out:
        logger.info(f"Saving maze to {args.out}...")
        MazeSerializer.save(grid, args.out)

    return 0


def run_replay(args) -> int:
    from maze_carver.algo.base import drive
    from maze_carver.core.events import EventReader
    from maze_carver.core.grid import Grid
    from maze_carver.viz.replay import EventAdapter
    from maze_carver.viz.terminal import TerminalRenderer

    logger.info(f"Replaying {args.event_file}...")
    reader = EventReader(args.event_file)
    try:
        rows, columns = reader.read_header()
        logger.info(f"Log Header: {rows}x{columns}")

        if args.visual:
            from maze_carver.viz.renderer import Renderer
            grid = Grid(rows, columns)
            adapter = EventAdapter(grid, reader.stream_events())
            renderer = Renderer(grid, steps=adapter.run(), delay_ms=args.delay)
            renderer.init_window()
            renderer.run_loop()
        else:
            terminal = TerminalRenderer()
            grid = Grid(rows, columns, event_sink=terminal)
            terminal.draw(grid)
            drive(EventAdapter(grid, reader.stream_events()).run(), args.delay)
            terminal.finish()
    finally:
        reader.close()

    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    logger.debug(f"Running command: {args.command}")

    try:
        validate_args(args)
        if args.command == "generate":
            return run_generate(args)
        return run_replay(args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except MalformedMazeFile as e:
        logger.error(f"Malformed maze file: {e}")
        return 1
    except OSError as e:
        logger.error(f"{e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
