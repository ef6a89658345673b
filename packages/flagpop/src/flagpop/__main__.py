"""Keyboard-driven argument popups for git.

Entry point for flagpop: opens a popup in the terminal (or in a tmux popup
window) and prints what the chosen action returned.
"""

import argparse
import logging
import sys
from typing import Optional

from .errors import PopupError
from .popups import register_builtin_popups
from .registry import default_registry
from .types import PrefixArg

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flagpop", description="Keyboard-driven argument popups for git")
    parser.add_argument("popup", nargs="?", help="Popup to open (see --list)")
    parser.add_argument(
        "-u",
        "--universal",
        action="count",
        default=0,
        help="Universal prefix argument; repeat to multiply by four",
    )
    parser.add_argument("--prefix", type=int, metavar="N", help="Numeric prefix argument")
    parser.add_argument("--list", action="store_true", help="List the available popups")
    parser.add_argument("--tmux", action="store_true", help="Open the popup in a tmux popup window")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    parser.add_argument("--log-file", metavar="PATH", help="Write log messages to a file")
    return parser


def prefix_from_args(args: argparse.Namespace) -> Optional[PrefixArg]:
    """Get the prefix argument requested on the command line."""
    if args.prefix is not None:
        return PrefixArg(args.prefix, universal=False)
    if args.universal:
        return PrefixArg(4**args.universal)
    return None


def main(argv: Optional[list[str]] = None) -> int:
    """Run flagpop.

    Args:
        argv: Command line arguments. Defaults to sys.argv[1:].

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # The terminal belongs to the popup; log to stderr only when asked
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        filename=args.log_file,
    )

    register_builtin_popups(default_registry)

    if args.list or not args.popup:
        for name in default_registry.names():
            print(name)
        return 0

    if args.popup not in default_registry:
        parser.error(f"unknown popup {args.popup!r}; expected one of {', '.join(default_registry.names())}")

    prefix_arg = prefix_from_args(args)

    if args.tmux:
        from .ui import show_popup

        try:
            show_popup(args.popup, prefix_arg=prefix_arg)
        except PopupError as e:
            print(f"flagpop: {e}", file=sys.stderr)
            return 1
        return 0

    from .ui import PopupApp

    app = PopupApp(args.popup, prefix_arg=prefix_arg)
    result = app.run()
    if app.return_code:
        return app.return_code
    if result is not None:
        print(result, end="" if isinstance(result, str) and result.endswith("\n") else "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
