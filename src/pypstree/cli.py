"""pypstree - command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys

from pypstree.builder import build_from_source, sort_by_pid
from pypstree.errors import PstreeError
from pypstree.models import PstreeConfig
from pypstree.renderer import render
from pypstree.source import SOURCES, make_source

__version__ = "1.0.0"

logger = logging.getLogger("pypstree")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="pypstree",
        description="Display running processes and their threads as a tree.",
    )
    parser.add_argument("-p", "--show-pids", action="store_true", help="Show PIDs after names")
    parser.add_argument(
        "-n", "--numeric-sort", action="store_true", help="Sort sibling processes by PID"
    )
    parser.add_argument("-V", "--version", action="store_true", help="Print version information")
    parser.add_argument(
        "--source",
        choices=SOURCES,
        default="procfs",
        help="Where process records come from (default: procfs)",
    )
    parser.add_argument(
        "--proc-root",
        default="/proc",
        metavar="PATH",
        help="procfs mount point used by the procfs source (default: /proc)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when a parent process is missing instead of hanging it under the kernel",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def run(config: PstreeConfig) -> int:
    """
    Execute one pypstree run and return the process exit status.

    Build errors are logged and reported through a non-zero status; no tree
    is printed in that case.
    """
    if config.show_version:
        print(f"pypstree v{__version__}")
    if not config.wants_tree:
        return 0

    source = make_source(config.source, config.proc_root)
    try:
        tree = build_from_source(source, strict=config.strict)
    except PstreeError as e:
        logger.error("%s (%s)", e, e.kind)
        return 1

    if config.numeric_sort:
        sort_by_pid(tree)

    print("\n")
    print(render(tree, show_pids=config.show_pids))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for pypstree."""
    config = PstreeConfig.from_args(parse_args(argv))
    setup_logging(config.verbose)
    return run(config)


if __name__ == "__main__":
    sys.exit(main())
