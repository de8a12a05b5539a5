import argparse
import sys
import os
import logging

# Ensure project root is in path so we can import 'bmp_maze' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

DEFAULT_SIZE = 256
DEFAULT_OUT = "./maze.bmp"

logger = logging.getLogger("bmp_maze")

def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BMP Maze: perfect maze generator with 1-bit bitmap output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze bitmap")
    gen_parser.add_argument("--width", type=int, default=DEFAULT_SIZE, help="Maze width in cells")
    gen_parser.add_argument("--height", type=int, default=DEFAULT_SIZE, help="Maze height in cells")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--out", type=str, default=DEFAULT_OUT, help="Output bitmap path")
    gen_parser.add_argument("--visual", action="store_true", help="Show generation in a window")
    gen_parser.add_argument("--record-events", type=str, help="Save generation events to binary file")

    # Inspect Command
    inspect_parser = subparsers.add_parser("inspect", help="Check that a bitmap holds a perfect maze")
    inspect_parser.add_argument("input_file", help="Path to bitmap file")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Rebuild a bitmap from an event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("--out", type=str, default="./replay.bmp", help="Output bitmap path")

    # View Command
    view_parser = subparsers.add_parser("view", help="Display a maze bitmap")
    view_parser.add_argument("input_file", help="Path to bitmap file")

    return parser

def save_bitmap(pixels, path: str) -> int:
    from bmp_maze.io.bmp import BitmapSerializer
    logger.info(f"Saving bitmap to {path}...")
    try:
        written = BitmapSerializer.save(pixels, path)
    except OSError as e:
        logger.error(f"Failed to write output file {path}: {e}")
        return EXIT_FAILURE
    logger.info(f"Save complete ({written} bytes).")
    return EXIT_SUCCESS

def cmd_generate(args) -> int:
    from bmp_maze.core.grid import Grid
    from bmp_maze.core.bitmap import PixelBuffer
    from bmp_maze.core.events import EventWriter
    from bmp_maze.core.analysis import MazeInspector
    from bmp_maze.algo.dfs import RecursiveBacktracker

    logger.info(f"Generating {args.width}x{args.height} maze...")

    evt_writer = None
    if args.record_events:
        try:
            evt_writer = EventWriter(args.record_events)
        except OSError as e:
            logger.error(f"Cannot open event log {args.record_events}: {e}")
            return EXIT_FAILURE
        logger.info(f"Recording events to {args.record_events}...")

    try:
        try:
            grid = Grid(args.width, args.height, event_writer=evt_writer)
        except ValueError as e:
            logger.error(str(e))
            return EXIT_USAGE

        pixels = PixelBuffer.for_grid(grid)
        generator = RecursiveBacktracker(grid, pixels, seed=args.seed)

        if args.visual:
            logger.info("Visual mode enabled - Opening window...")
            from bmp_maze.viz.viewer import BitmapViewer
            viewer = BitmapViewer(pixels, generator=generator)
            viewer.init_window()
            viewer.run_loop()
            viewer.finish()
        else:
            logger.info("Headless generation...")
            for status in generator.run():
                logger.debug(status)

        stats = MazeInspector.calculate_stats(grid)
        logger.info(f"Stats: {stats}")
    finally:
        if evt_writer:
            evt_writer.close()

    return save_bitmap(pixels, args.out)

def cmd_inspect(args) -> int:
    from bmp_maze.io.bmp import BitmapSerializer
    from bmp_maze.core.analysis import MazeInspector

    logger.info(f"Loading {args.input_file}...")
    try:
        pixels = BitmapSerializer.load(args.input_file)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read {args.input_file}: {e}")
        return EXIT_FAILURE

    grid = MazeInspector.grid_from_bitmap(pixels)
    logger.info(f"Loaded {grid.width}x{grid.height} maze ({pixels.image_width}x{pixels.image_height} px).")

    if not MazeInspector.matches_bitmap(grid, pixels):
        logger.error("Bitmap has pixels that are neither cells nor passages.")
        return EXIT_FAILURE

    stats = MazeInspector.calculate_stats(grid)
    logger.info(f"Stats: {stats}")

    if MazeInspector.is_perfect(grid):
        logger.info("Perfect maze: every cell connected, no loops.")
        return EXIT_SUCCESS
    logger.error("Not a perfect maze.")
    return EXIT_FAILURE

def cmd_replay(args) -> int:
    from bmp_maze.core.grid import Grid
    from bmp_maze.core.bitmap import PixelBuffer
    from bmp_maze.core.events import EventReader
    from bmp_maze.algo.replay import EventAdapter

    logger.info(f"Replaying {args.event_file}...")
    try:
        with EventReader(args.event_file) as reader:
            w, h = reader.read_header()
            logger.info(f"Log Header: {w}x{h}")
            grid = Grid(w, h)
            pixels = PixelBuffer.for_grid(grid)
            EventAdapter(grid, pixels, reader).run_all()
    except (OSError, ValueError, IndexError) as e:
        logger.error(f"Cannot replay {args.event_file}: {e}")
        return EXIT_FAILURE

    return save_bitmap(pixels, args.out)

def cmd_view(args) -> int:
    from bmp_maze.io.bmp import BitmapSerializer
    from bmp_maze.viz.viewer import BitmapViewer

    try:
        pixels = BitmapSerializer.load(args.input_file)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read {args.input_file}: {e}")
        return EXIT_FAILURE

    viewer = BitmapViewer(pixels)
    viewer.init_window()
    viewer.run_loop()
    return EXIT_SUCCESS

COMMANDS = {
    "generate": cmd_generate,
    "inspect": cmd_inspect,
    "replay": cmd_replay,
    "view": cmd_view,
}

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return EXIT_USAGE

    logger.info(f"Running command: {args.command}")
    return COMMANDS[args.command](args)

if __name__ == "__main__":
    sys.exit(main())
