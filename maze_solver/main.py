import argparse
import sys
import os
import logging
import time

# Ensure project root is in path so we can import 'maze_solver' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_solver import config


def log_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    if not config.LOG_LEVEL:
        return logging.INFO
    level = logging.getLevelName(config.LOG_LEVEL.upper())
    if not isinstance(level, int):
        raise SystemExit(f"Unknown MAZE_LOG_LEVEL: {config.LOG_LEVEL!r}")
    return level


def setup_logging(verbose: bool):
    level = log_level(verbose)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def render_ascii(grid, path=()) -> str:
    """'#' wall, ' ' open, '.' solution."""
    on_path = set(path)
    lines = []
    for row in range(grid.rows):
        line = []
        for col in range(grid.cols):
            if (row, col) in on_path:
                line.append('.')
            elif grid.is_path(row, col):
                line.append(' ')
            else:
                line.append('#')
        lines.append(''.join(line))
    return '\n'.join(lines)


def _recording_name(kind: str, label: str) -> str:
    import datetime
    if not os.path.exists("recordings"):
        os.makedirs("recordings")
    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join("recordings", f"{kind}_{label}_{ts}.mp4")


def _show(grid, playbacks, endpoints, record: bool, output_file=None, steps_per_frame=1):
    from maze_solver.viz.renderer import Renderer
    renderer = Renderer(grid, playbacks=playbacks, endpoints=endpoints, record=record,
                        output_file=output_file, steps_per_frame=steps_per_frame)
    renderer.init_window()
    renderer.run_loop()


def cmd_generate(args, logger):
    from maze_solver.algo.backtracker import generate_maze
    from maze_solver.core.events import EventWriter, write_maze_events

    rows = args.size if args.rows is None else args.rows
    cols = args.size if args.cols is None else args.cols
    logger.info(f"Generating {rows}x{cols} maze (seed={args.seed})...")
    maze = generate_maze(rows, cols, seed=args.seed)

    if args.record_events:
        with EventWriter(args.record_events) as writer:
            write_maze_events(writer, maze)
        logger.info(f"Saved generation events to {args.record_events}")

    if args.out:
        from maze_solver.io.serializer import MazeSerializer
        logger.info(f"Saving maze to {args.out}...")
        MazeSerializer.save(maze, args.out, meta={"algo": "dfs", "seed": args.seed}, compress=args.compress)

    if args.visual or args.record:
        from maze_solver.viz.playback import Playback
        output = _recording_name("gen", f"{rows}x{cols}") if args.record else None
        _show(maze.grid, [Playback(maze.carve_order, kind="carve")], (maze.start, maze.end),
              args.record, output)
    elif args.print:
        print(render_ascii(maze.grid))

    print(f"Done. Grid {maze.grid.rows}x{maze.grid.cols}, start {tuple(maze.start)}, end {tuple(maze.end)}")


def cmd_solve(args, logger):
    from maze_solver.algo.bfs import solve_maze
    from maze_solver.core.events import EventWriter, write_maze_events, write_solve_events
    from maze_solver.io.serializer import MazeSerializer

    logger.info(f"Loading {args.input_file}...")
    maze, meta = MazeSerializer.load(args.input_file)
    logger.info(f"Loaded {maze.rows}x{maze.cols} maze. Meta: {meta}")

    t0 = time.time()
    result = solve_maze(maze.grid, maze.start, maze.end)
    logger.info(f"BFS finished in {time.time() - t0:.4f}s, visited {len(result.visited_order)} cells")

    if args.record_events:
        with EventWriter(args.record_events) as writer:
            write_maze_events(writer, maze)
            write_solve_events(writer, result)
        logger.info(f"Saved solver events to {args.record_events}")

    if args.visual or args.record:
        from maze_solver.viz.playback import Playback
        base_name = os.path.basename(args.input_file).replace(".maze", "")
        output = _recording_name("solve", base_name) if args.record else None
        playbacks = [
            Playback(result.visited_order, args.delay, kind="visit"),
            Playback(result.path, args.delay, kind="path"),
        ]
        _show(maze.grid, playbacks, (maze.start, maze.end), args.record, output)
    elif args.print:
        print(render_ascii(maze.grid, result.path))

    if result.found:
        print(f"Done. Path Length: {result.path_length}")
    else:
        print("Done. No path found.")


def cmd_replay(args, logger):
    from maze_solver.core.events import EventReader, EVT_CARVE, EVT_SOLVER_SCAN
    from maze_solver.core.grid import MazeGrid
    from maze_solver.viz.playback import Playback

    with EventReader(args.event_file) as reader:
        rows, cols = reader.read_header()
        logger.info(f"Log Header: {rows}x{cols}")
        carve, scan, path = [], [], []
        for type_code, cell in reader.stream_events():
            if type_code == EVT_CARVE:
                carve.append(cell)
            elif type_code == EVT_SOLVER_SCAN:
                scan.append(cell)
            else:
                path.append(cell)

    logger.info(f"Replaying {len(carve)} carves, {len(scan)} visits, {len(path)} path cells")
    playbacks = [
        Playback(carve, kind="carve"),
        Playback(scan, args.delay, kind="visit"),
        Playback(path, args.delay, kind="path"),
    ]
    base_name = os.path.basename(args.event_file).replace(".events", "")
    output = _recording_name("replay", base_name) if args.record else None
    _show(MazeGrid(rows, cols), playbacks, (), args.record, output, steps_per_frame=args.speed)


def cmd_serve(args, logger):
    from maze_solver.service.server import serve
    serve(host=args.host, port=args.port, debug=args.debug)


def cmd_remote(args, logger):
    from maze_solver.service.client import RemoteMazeService

    service = RemoteMazeService(base_url=args.url)
    if not service.health_check():
        logger.error(f"Backend at {service.base_url} is not available")
        return 1

    maze = service.generate(args.size, seed=args.seed)
    logger.info(f"Remote maze {maze['rows']}x{maze['cols']}, start {maze['start']}, end {maze['end']}")
    result = service.solve_with_steps(maze["grid"], maze["rows"], maze["cols"], maze["start"], maze["end"])
    print(f"Found: {result['found']} | Path Length: {result['pathLength']} | Visited: {len(result['visitedOrder'])}")
    return 0


def cmd_benchmark(args, logger):
    from maze_solver.algo.backtracker import generate_maze
    from maze_solver.algo.bfs import shortest_distance, solve_maze

    logger.info(f"Running benchmark (Size: {args.size}x{args.size})...")
    print(f"\n{'SIZE':<10} | {'GEN (s)':<10} | {'SOLVE (s)':<10} | {'PATH LEN':<10} | {'VISITED':<10}")
    print("-" * 62)

    size = 8
    while size <= args.size:
        t0 = time.time()
        maze = generate_maze(size, size, seed=123)
        gen_time = time.time() - t0

        t0 = time.time()
        result = solve_maze(maze.grid, maze.start, maze.end)
        solve_time = time.time() - t0

        # Path length should always match an independent BFS distance
        expected = shortest_distance(maze.grid, maze.start, maze.end) + 1
        if result.path_length != expected:
            logger.warning(f"Size {size}: path {result.path_length} != distance {expected}")

        print(f"{size:<10} | {gen_time:<10.4f} | {solve_time:<10.4f} | "
              f"{result.path_length:<10} | {len(result.visited_order):<10}")
        size *= 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Solver: perfect-maze generation and BFS solving")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--size", type=int, default=config.DEFAULT_SIZE, help="Cell grid side length")
    gen_parser.add_argument("--rows", type=int, help="Cell rows (overrides --size)")
    gen_parser.add_argument("--cols", type=int, help="Cell cols (overrides --size)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--out", type=str, help="Output file path (optional)")
    gen_parser.add_argument("--compress", action="store_true", help="zlib-compress the saved grid")
    gen_parser.add_argument("--print", action="store_true", help="Print the maze as ASCII")
    gen_parser.add_argument("--visual", action="store_true", help="Animate generation")
    gen_parser.add_argument("--record", action="store_true", help="Record generation video")
    gen_parser.add_argument("--record-events", type=str, help="Save generation events to binary file")

    # Solve Command
    solve_parser = subparsers.add_parser("solve", help="Solve an existing maze")
    solve_parser.add_argument("input_file", help="Path to maze file")
    solve_parser.add_argument("--delay", type=int, default=config.STEP_DELAY_MS, help="Per-step delay (ms)")
    solve_parser.add_argument("--print", action="store_true", help="Print the solved maze as ASCII")
    solve_parser.add_argument("--visual", action="store_true", help="Animate the search")
    solve_parser.add_argument("--record", action="store_true", help="Record video")
    solve_parser.add_argument("--record-events", type=str, help="Save solver events to binary file")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Replay an event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("--delay", type=int, default=config.STEP_DELAY_MS, help="Per-step delay (ms)")
    replay_parser.add_argument("--speed", type=int, default=1, help="Steps drawn per frame")
    replay_parser.add_argument("--record", action="store_true", help="Record video")

    # Serve Command
    serve_parser = subparsers.add_parser("serve", help="Expose the maze core over HTTP")
    serve_parser.add_argument("--host", default=config.SERVER_HOST)
    serve_parser.add_argument("--port", type=int, default=config.SERVER_PORT)
    serve_parser.add_argument("--debug", action="store_true")

    # Remote Command
    remote_parser = subparsers.add_parser("remote", help="Generate and solve through a running server")
    remote_parser.add_argument("--url", default=config.API_URL, help="Server base URL")
    remote_parser.add_argument("--size", type=int, default=config.DEFAULT_SIZE)
    remote_parser.add_argument("--seed", type=int, default=None)

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Run performance suite")
    bench_parser.add_argument("--size", type=int, default=512, help="Largest size (doubles from 8)")

    return parser


COMMANDS = {
    "generate": cmd_generate,
    "solve": cmd_solve,
    "replay": cmd_replay,
    "serve": cmd_serve,
    "remote": cmd_remote,
    "benchmark": cmd_benchmark,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("maze_solver")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    from maze_solver.core.errors import MazeError
    try:
        return COMMANDS[args.command](args, logger) or 0
    except MazeError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
