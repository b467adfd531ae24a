"""Command-line interface for the tabifyer PDF table converter.

Every PDF in the source directory is run through pdftotext and the resulting
space-aligned text is re-segmented into tab-delimited records.

Environment Variable Support
----------------------------
All options accept environment variable defaults using the pattern
TABIFYER_<OPTION_NAME>, e.g. ``TABIFYER_OUTPUT_DIR`` or ``TABIFYER_TIMEOUT``.
CLI arguments always override environment variables, which override values
from a config file.

Examples
--------
Convert a directory of PDFs::

    $ tabifyer --pdfs-dir ./pdfs --output-dir ./tsv

Only extract page 3 of each document::

    $ tabifyer --pdfs_dir ./pdfs --output_dir ./tsv -f 3 -l 3

Use rich output and four worker processes::

    $ tabifyer --pdfs-dir ./pdfs --output-dir ./tsv --rich --parallel 4

Tabify an existing space-delimited text file::

    $ tabifyer --text table.spt --out table.tsv

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tabifyer import __version__
from tabifyer.cli.builder import (
    EXIT_DEPENDENCY_ERROR,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    apply_env_vars_to_parser,
    create_parser,
)
from tabifyer.cli.config import apply_config_to_parser, discover_config_file, load_config_file
from tabifyer.cli.progress import ProgressContext, SummaryRenderer
from tabifyer.exceptions import DependencyError, DirectoryError
from tabifyer.logging_utils import configure_logging
from tabifyer.options import TabifyOptions
from tabifyer.pipeline import tabify_directory, tabify_lines, tabify_text_file

logger = logging.getLogger(__name__)

__all__ = ["create_parser", "main"]


def _get_version() -> str:
    """Get the installed version of tabifyer."""
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("tabifyer")
    except PackageNotFoundError:
        return __version__


def _setup_logging(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else parsed_args.log_level
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace, use_rich=parsed_args.rich)


def _find_config_path(args: list[str] | None) -> tuple[Path | None, bool]:
    """Pre-parse ``--config``/``--no-config`` before the full parse."""
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config")
    pre.add_argument("--no-config", action="store_true")
    known, _ = pre.parse_known_args(args)

    if known.config:
        return Path(known.config), True
    if known.no_config:
        return None, False
    return discover_config_file(), False


def _build_parser(args: list[str] | None) -> argparse.ArgumentParser:
    """Create the parser with config file and environment defaults applied.

    Raises
    ------
    argparse.ArgumentTypeError
        If the config file cannot be loaded or holds invalid values

    """
    parser = create_parser(_get_version())

    config_path, explicit = _find_config_path(args)
    if config_path is not None:
        config = load_config_file(config_path)
        unknown = apply_config_to_parser(parser, config)
        for key in unknown:
            logger.warning("Ignoring unknown key '%s' in config file %s", key, config_path)
        if not explicit:
            logger.debug("Using config file %s", config_path)

    apply_env_vars_to_parser(parser)
    return parser


def _run_text_mode(parsed_args: argparse.Namespace, options: TabifyOptions) -> int:
    source = Path(parsed_args.text_input)
    if not source.is_file():
        print(f"Error: Input file not found: {source}", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        if parsed_args.out:
            count = tabify_text_file(source, parsed_args.out, encoding=options.encoding, eol=options.eol)
            print(f"Converted {source} -> {parsed_args.out} ({count} lines)", file=sys.stderr)
        else:
            with open(source, "r", encoding=options.encoding, errors="replace") as reader:
                for record in tabify_lines(reader):
                    sys.stdout.write(record + "\n")
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    return EXIT_SUCCESS


def _run_batch(parsed_args: argparse.Namespace, options: TabifyOptions) -> int:
    try:
        with ProgressContext(use_rich=parsed_args.rich) as progress:
            batch = tabify_directory(
                parsed_args.pdfs_dir,
                parsed_args.output_dir,
                options,
                recursive=parsed_args.recursive,
                parallel=parsed_args.parallel,
                progress_callback=progress.callback,
            )
    except DirectoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except DependencyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DEPENDENCY_ERROR

    if batch.total == 0:
        print(f"No PDF files found in {parsed_args.pdfs_dir}", file=sys.stderr)

    if not parsed_args.no_summary and batch.total > 0:
        SummaryRenderer(use_rich=parsed_args.rich).render(batch)

    return EXIT_SUCCESS if batch.failed == 0 else EXIT_ERROR


def main(args: list[str] | None = None) -> int:
    """Run the tabifyer command line."""
    try:
        parser = _build_parser(args)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    parsed_args = parser.parse_args(args)
    _setup_logging(parsed_args)

    try:
        options = TabifyOptions.from_mapping(vars(parsed_args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    if parsed_args.text_input:
        return _run_text_mode(parsed_args, options)

    return _run_batch(parsed_args, options)


if __name__ == "__main__":
    sys.exit(main())
