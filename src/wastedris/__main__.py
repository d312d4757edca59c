"""Command line entry point.

Run with: `python -m wastedris` (terminal) or `python -m wastedris --ui pygame`.
"""

from __future__ import annotations

import argparse
import logging


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="wastedris", description="Falling-block puzzle game.")
    parser.add_argument(
        "--ui",
        choices=("terminal", "pygame"),
        default="terminal",
        help="Front-end to play with.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the piece generator.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write log messages to this file instead of stderr.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        filename=args.log_file,
        format="%(asctime)s %(threadName)s %(name)s: %(message)s",
    )

    if args.ui == "pygame":
        from .run_pygame import run
    else:
        from .terminal import run
    run(seed=args.seed)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
