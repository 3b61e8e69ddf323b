"""CLI for running noiseflow examples."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .examples import list_examples, run_example


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="noiseflow", description="Noise flow field CLI")
    parser.add_argument("example", nargs="?", help="Example name")
    parser.add_argument("--list", action="store_true", help="List available examples")
    parser.add_argument("--interactive", action="store_true", help="Run interactive mode")
    parser.add_argument("--no-interactive", action="store_true", help="Disable interactive mode")
    parser.add_argument("--scale", type=float, default=None)
    parser.add_argument("--fps", type=float, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--speed", type=float, default=None)
    parser.add_argument("--preset", type=str, default=None)
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Extra args passed to example")
    return parser


def forwarded_args(args: argparse.Namespace) -> List[str]:
    """Translate top-level flags into the example's own argv."""
    forwarded = []

    if args.interactive and not args.no_interactive:
        forwarded.append("--interactive")

    for name in ("scale", "fps", "width", "height", "preset", "speed"):
        value = getattr(args, name)
        if value is not None:
            forwarded.extend([f"--{name}", str(value)])

    if args.args:
        if args.args[0] == "--":
            forwarded.extend(args.args[1:])
        else:
            forwarded.extend(args.args)
    return forwarded


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.list or not args.example:
        print("Available examples:")
        for name in list_examples():
            print(f"  - {name}")
        return

    if args.example not in list_examples():
        print(f"Unknown example '{args.example}'. Use --list to see options.")
        sys.exit(1)

    run_example(args.example, forwarded_args(args))


if __name__ == "__main__":
    main()
