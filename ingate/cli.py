"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from ingate.controlplane import manager
from ingate.controlplane.objects import MemoryClient
from ingate.version import print_version


def build_parser() -> argparse.ArgumentParser:
    """Build the parser with the version and start commands."""
    parser = argparse.ArgumentParser(
        prog="ingate",
        description="InGate is a kubernetes controller for deploying and "
        "managing Gateway and Ingress resources",
    )
    parser.set_defaults(command=None)
    commands = parser.add_subparsers(title="commands")

    version = commands.add_parser(
        "version", aliases=["versions", "v"], help="Show versions"
    )
    version.set_defaults(command="version")

    start = commands.add_parser("start", aliases=["s"], help="Start InGate controller")
    start.add_argument(
        "-v",
        "--v",
        dest="verbosity",
        type=int,
        default=0,
        help="log level verbosity",
    )
    start.set_defaults(command="start")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        if args.command == "version":
            print_version(sys.stdout)
        elif args.command == "start":
            level = logging.DEBUG if args.verbosity >= 2 else logging.INFO
            logging.basicConfig(level=level)
            manager.start(MemoryClient())
        else:
            parser.print_help(sys.stdout)
    except Exception as err:
        print(err, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())