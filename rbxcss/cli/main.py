from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .. import __version__
from ..core.config import ConfigError
from ..core.logger import configure_logging, get_logger
from .commands import (
    compile as cmd_compile,
    dump as cmd_dump,
    watch as cmd_watch,
)

log = get_logger(__name__)

EXIT_CONFIG_ERROR = 2


def entrypoint():
    sys.exit(main())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rbxcss", description="Compile CSS classes into Roblox UI attributes"
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    c = sub.add_parser("compile", help="Synthesize attributes for a class list")
    c.add_argument("classes", nargs="+", help="Class names in className order")
    c.add_argument(
        "--css",
        type=str,
        default=None,
        help="Stylesheet path (defaults to the configured cssFilePath)",
    )
    c.add_argument(
        "--config", type=str, default=None, help="JSON config file (optional)"
    )
    node = c.add_mutually_exclusive_group()
    node.add_argument(
        "--tag",
        type=str,
        default=None,
        help="Element tag (e.g. span, div); decides whether it is a text node",
    )
    node.add_argument(
        "--text", action="store_true", help="Treat the element as a text node"
    )

    d = sub.add_parser("dump", help="Print the extracted stylesheet as JSON")
    d.add_argument("--css", type=str, required=True, help="Stylesheet path")

    w = sub.add_parser("watch", help="Reload the stylesheet whenever it changes")
    w.add_argument(
        "--css",
        type=str,
        default=None,
        help="Stylesheet path (defaults to the configured cssFilePath)",
    )
    w.add_argument(
        "--config", type=str, default=None, help="JSON config file (optional)"
    )
    w.add_argument(
        "--interval",
        type=float,
        default=0.5,
        help="Polling interval in seconds (default: 0.5)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "compile":
            cmd_compile.run(args)
        elif args.command == "dump":
            cmd_dump.run(args)
        elif args.command == "watch":
            cmd_watch.run(args)
    except ConfigError as exc:
        log.error(str(exc))
        return EXIT_CONFIG_ERROR
    return 0


if __name__ == "__main__":
    entrypoint()
