"""Command-line interface for cargograph: print the dependency graph of a project."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from cargograph.api import collect_packages
from cargograph.core.graph import GRAPH_FORMATS, encode_graph, render_graph
from cargograph.core.parser import FilterContext
from cargograph.errors import (
    CargoGraphError,
    GraphSerializationError,
    NoManifestsFoundError,
    RootNotFoundError,
)
from cargograph.log import configure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ROOT_NOT_FOUND = 1
EXIT_NO_MANIFESTS = 3
EXIT_INVALID_OUTPUT = 4


def exit_code_for(error: CargoGraphError) -> int:
    """Map a fatal error to the process exit code."""
    if isinstance(error, RootNotFoundError):
        return EXIT_ROOT_NOT_FOUND
    if isinstance(error, NoManifestsFoundError):
        return EXIT_NO_MANIFESTS
    if isinstance(error, GraphSerializationError):
        return EXIT_INVALID_OUTPUT
    return 1


def filters_from_args(args: argparse.Namespace) -> FilterContext:
    """Build the immutable filter options from parsed arguments."""
    return FilterContext.from_options(
        local_only=args.local,
        ignored_names=args.ignore,
        ignored_path_substrings=args.ignore_paths,
    )


def _write_stdout(data: bytes) -> None:
    """Write already-encoded UTF-8 output to stdout, bypassing the console encoding."""
    sys.stdout.flush()
    buffer = getattr(sys.stdout, "buffer", None)
    if buffer is None:
        # Text-only stream (e.g. an in-memory replacement).
        sys.stdout.write(data.decode("utf-8"))
        return
    buffer.write(data)
    buffer.flush()


def cmd_graph(args: argparse.Namespace) -> int:
    """Print (or write) the dependency graph for the project at args.root."""
    root = Path(args.root)
    try:
        nodes = collect_packages(root, monolithic=args.monolithic, filters=filters_from_args(args))
        output = render_graph(nodes, args.format)
        encoded = encode_graph(output)
    except CargoGraphError as e:
        print(str(e), file=sys.stderr)
        return exit_code_for(e)

    if args.output:
        Path(args.output).write_bytes(encoded + b"\n")
        print(f"Graph written to: {args.output}", file=sys.stderr)
    else:
        _write_stdout(encoded + b"\n")
    return EXIT_OK


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the interactive TUI over the discovered packages."""
    root = Path(args.root)
    if not root.exists():
        print(f"Root path not found: {root}", file=sys.stderr)
        return EXIT_ROOT_NOT_FOUND

    from cargograph.tui.app import GraphApp

    app = GraphApp(root=root, monolithic=args.monolithic, filters=filters_from_args(args))
    app.run()
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the cargograph command."""
    parser = argparse.ArgumentParser(
        prog="cargograph",
        description=(
            "Print the internal dependency graph of a multi-package project. "
            "Follows workspace members and path dependencies from the root manifest, "
            "or scans every manifest under the root with --monolithic."
        ),
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root directory (default: current directory)",
    )
    parser.add_argument(
        "-m",
        "--monolithic",
        action="store_true",
        help="Scan every manifest under root instead of following workspace members",
    )
    parser.add_argument(
        "-l",
        "--local",
        action="store_true",
        help="Only show packages discovered in the project and the edges between them",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        nargs="+",
        action="extend",
        metavar="NAME",
        help=(
            "Package names to leave out of the graph "
            "(repeatable; give ROOT first or end the list with --)"
        ),
    )
    parser.add_argument(
        "-I",
        "--ignore-paths",
        nargs="+",
        action="extend",
        metavar="SUBSTRING",
        help=(
            "Skip manifests whose path contains any of these substrings "
            "(requires --monolithic; repeatable; give ROOT first or end the list with --)"
        ),
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=list(GRAPH_FORMATS),
        default="dot",
        help="Output format: dot (Graphviz) or mermaid (default: dot)",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Browse the packages in the interactive terminal UI",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log discovery details to stderr (-vv for debug output)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the cargograph CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.ignore_paths and not args.monolithic:
        parser.error("--ignore-paths requires --monolithic")

    configure_logging(args.verbose)
    logger.debug("Arguments: %s", args)

    if args.tui:
        return cmd_tui(args)
    return cmd_graph(args)


if __name__ == "__main__":
    sys.exit(main())
