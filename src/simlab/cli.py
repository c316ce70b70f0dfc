"""Command line entry point: ``simlab run|new|analyze|list``."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from simlab.core.config import RENDER_CFG
from simlab.core.settings import SETTINGS_PATH


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simlab",
        description="Interactive 2D physics sketches.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Bouncing ball in a window
  simlab run gravity

  # Pendulum with a run log for later analysis
  simlab run rotating-pendulum --log-dir data/runs

  # Static preview image
  simlab run gravity --thumb gravity.png

  # New sketch from the template
  simlab new my-sketch
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Open a sketch window")
    run.add_argument("sketch", help="Built-in sketch slug or path to a sketch directory")
    run.add_argument("--width", type=int, default=RENDER_CFG.width)
    run.add_argument("--height", type=int, default=RENDER_CFG.height)
    run.add_argument("--fps", type=int, default=RENDER_CFG.fps)
    run.add_argument(
        "--thumb",
        type=Path,
        metavar="PATH",
        help="Render a single frame without labels or panel to PATH and exit",
    )
    run.add_argument(
        "--log-dir",
        type=Path,
        help="Write timeseries/events CSV logs into a new run folder under this directory",
    )
    run.add_argument(
        "--settings",
        type=Path,
        default=SETTINGS_PATH,
        help=f"Settings file holding the theme (default: {SETTINGS_PATH})",
    )

    new = sub.add_parser("new", help="Create a sketch from the template")
    new.add_argument("name", help="Directory name of the new sketch")
    new.add_argument("--root", type=Path, default=Path("."), help="Project root (default: .)")

    analyze = sub.add_parser("analyze", help="Plot a logged run")
    analyze.add_argument("run_dir", nargs="?", help="Run folder or run id (default: last run)")
    analyze.add_argument("--runs-dir", type=Path, default=Path("data") / "runs")

    list_cmd = sub.add_parser("list", help="List built-in and scaffolded sketches")
    list_cmd.add_argument("--root", type=Path, default=Path("."), help="Project root (default: .)")
    return parser


def _cmd_run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    from simlab.sketches import resolve_sketch

    try:
        sketch_cls = resolve_sketch(args.sketch)
    except KeyError:
        parser.error(f"Unknown sketch {args.sketch!r}; see 'simlab list'")
    except (FileNotFoundError, ImportError) as exc:
        parser.error(str(exc))
    if args.width <= 0 or args.height <= 0:
        parser.error("--width and --height must be positive")

    from simlab import runner

    size = (args.width, args.height)
    if args.thumb is not None:
        import pygame

        pygame.init()
        try:
            runner.render_thumbnail(sketch_cls, args.thumb, size=size, settings_path=args.settings)
        finally:
            pygame.quit()
        return 0
    return runner.run_window(
        sketch_cls,
        size=size,
        fps=args.fps,
        log_dir=args.log_dir,
        settings_path=args.settings,
    )


def _cmd_new(args: argparse.Namespace) -> int:
    from simlab.scaffold import create_sketch

    try:
        target = create_sketch(args.name, args.root)
    except (FileExistsError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Created sketch '{args.name}' in {target}")
    print(f"Run it with: simlab run {target}")
    return 0


def _cmd_analyze(args: argparse.Namespace) -> int:
    from simlab.analyze_run import RunAnalysisError, analyze, print_summary, resolve_run_dir

    try:
        run_path = resolve_run_dir(args.run_dir, args.runs_dir)
        summary = analyze(run_path)
    except RunAnalysisError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print_summary(run_path, summary)
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    from simlab.scaffold import find_sketches
    from simlab.sketches import SKETCHES

    for slug, sketch_cls in SKETCHES.items():
        print(f"{slug:20s} {sketch_cls.title}")
    for path in find_sketches(args.root):
        print(f"{path.name:20s} {path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "run":
        return _cmd_run(parser, args)
    if args.command == "new":
        return _cmd_new(args)
    if args.command == "analyze":
        return _cmd_analyze(args)
    return _cmd_list(args)


if __name__ == "__main__":
    sys.exit(main())
