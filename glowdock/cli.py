"""Command-line interface for glowdock."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from glowdock.pipeline.run import simulate
from glowdock.scoring import Method


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""

    parser = argparse.ArgumentParser(prog="glowdock")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a GSO simulation for one swarm")
    run_parser.add_argument("--setup", required=True, help="Path to setup file (JSON or YAML)")
    run_parser.add_argument(
        "--positions", required=True, help="Starting positions (initial_positions_<swarm>.dat)"
    )
    run_parser.add_argument("--steps", required=True, type=int, help="Number of GSO steps")
    run_parser.add_argument(
        "--method",
        required=True,
        type=str.lower,
        choices=[method.value for method in Method],
        help="Scoring function",
    )
    run_parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        try:
            simulate(args.setup, args.positions, args.steps, args.method)
        except (ValueError, OSError) as exc:
            logging.getLogger(__name__).error("%s", exc)
            return 1
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
