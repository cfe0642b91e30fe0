"""Main CLI entry point for depgrapher.

Reads dependency declarations, then prints an ASCII dependency tree or
exports the graph (Dot or JSON).
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from depgrapher.cli.render import render_command
from depgrapher.config.schema import DEFAULT_SYNTAX

logger = logging.getLogger("depgrapher.cli")


def setup_logging(
    verbose: bool = False,
    console: Optional[Console] = None,
    log_file: Optional[str] = None,
) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
            Defaults to a stderr console, stdout carries the tree output.
        log_file: Also write log records to this file (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )
    handlers = [handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(name)s] [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depgrapher",
        description="Depgrapher - build and draw dependency graphs from text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-s",
        "--syntax",
        help=(
            "Syntax used to parse the input: comma separated preset names "
            "(Makefile, Dot, MakeCall) and/or inline definitions "
            '{"GraphPrefix","EdgePrefix","SourceDelimiter","EdgeInfix",'
            '"TargetDelimiter","EdgeSuffix","GraphSuffix",true} (default: '
            + DEFAULT_SYNTAX
            + ")"
        ),
    )
    parser.add_argument(
        "-o",
        "--outfile",
        help=(
            "Export the graph instead of drawing it. Use 'stdout' to write to "
            "standard output, anything else is a file path."
        ),
    )
    parser.add_argument(
        "-n",
        "--node",
        help="Only use the dependency graph of this node (default: all nodes)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["dot", "json"],
        default="dot",
        help="Export format used with --outfile (default: dot)",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=(
            "Path to a TOML or JSON configuration file (a [depgrapher] table, "
            "[tool.depgrapher] in pyproject.toml, or top-level keys)."
        ),
    )
    parser.add_argument(
        "-w",
        "--workers",
        type=int,
        help="Worker threads used for ingestion (default: CPU count)",
    )
    parser.add_argument(
        "--log-file",
        help="Output log to file (optional), in addition to the console.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Input files ('-' or none reads standard input)",
    )
    return parser


def main() -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(args.verbose, log_file=args.log_file)

    try:
        return render_command(args)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
