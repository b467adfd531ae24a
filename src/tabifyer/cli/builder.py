#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Argument parser construction for the tabifyer CLI.

Option arguments are generated from the fields of
:class:`tabifyer.options.TabifyOptions`: each field's metadata supplies the
help text, the flag name, the value type and any choices, so adding an
option field is enough to expose it on the command line.
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import MISSING, fields
from typing import Optional

from tabifyer.constants import ENV_VAR_PREFIX
from tabifyer.options import TabifyOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4

TRUTHY_VALUES = ("true", "1", "yes", "on")


def positive_int(value: str) -> int:
    """Validate positive integer for argparse."""
    try:
        ivalue = int(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"{value} is not a valid integer") from None
    if ivalue <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
    return ivalue


def positive_float(value: str) -> float:
    """Validate positive float for argparse."""
    try:
        fvalue = float(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"{value} is not a valid number") from None
    if fvalue <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive number")
    return fvalue


# Option field value types mapped to the argparse validators that parse them
_ARG_TYPES = {int: positive_int, float: positive_float}


def get_env_var_value(key: str) -> Optional[str]:
    """Get an environment variable with the TABIFYER_ prefix.

    Parameters
    ----------
    key : str
        The argument dest (e.g., 'output_dir', 'timeout')

    Returns
    -------
    Optional[str]
        Environment variable value or None if not set

    """
    return os.environ.get(f"{ENV_VAR_PREFIX}{key.upper().replace('-', '_')}")


def apply_env_vars_to_parser(parser: argparse.ArgumentParser) -> None:
    """Apply TABIFYER_* environment variables as argument defaults.

    Command-line values still take precedence. Invalid values are logged
    and ignored.
    """
    for action in parser._actions:
        if not action.dest or action.dest in ("help", "version"):
            continue

        env_value = get_env_var_value(action.dest)
        if env_value is None:
            continue

        env_name = f"{ENV_VAR_PREFIX}{action.dest.upper()}"
        if isinstance(action, (argparse._StoreTrueAction, argparse._StoreFalseAction)):
            # dest always names the positive setting, e.g. TABIFYER_KEEP_INTERMEDIATE=false
            action.default = env_value.lower() in TRUTHY_VALUES
        elif action.choices:
            if env_value in action.choices:
                action.default = env_value
            else:
                logger.warning("Invalid choice for %s: %s. Choices: %s", env_name, env_value, list(action.choices))
        elif action.type is not None:
            try:
                action.default = action.type(env_value)
            except (ValueError, argparse.ArgumentTypeError):
                logger.warning("Invalid value for %s: %s", env_name, env_value)
        else:
            action.default = env_value


def add_option_arguments(group: argparse._ArgumentGroup) -> None:
    """Add one argument per :class:`TabifyOptions` field."""
    for option_field in fields(TabifyOptions):
        meta = option_field.metadata
        flags = [f"--{meta.get('cli_name', option_field.name.replace('_', '-'))}"]
        if "short" in meta:
            flags.insert(0, meta["short"])
        default = option_field.default if option_field.default is not MISSING else None

        if isinstance(default, bool):
            group.add_argument(
                *flags,
                dest=option_field.name,
                action="store_false" if default else "store_true",
                default=default,
                help=meta.get("help"),
            )
            continue

        kwargs: dict = {"dest": option_field.name, "default": default, "help": meta.get("help")}
        if "choices" in meta:
            kwargs["choices"] = meta["choices"]
        elif "type" in meta:
            kwargs["type"] = _ARG_TYPES.get(meta["type"], meta["type"])
            kwargs["metavar"] = "N" if meta["type"] is int else "SECONDS"
        group.add_argument(*flags, **kwargs)


def create_parser(version: str = "unknown") -> argparse.ArgumentParser:
    """Create the tabifyer argument parser.

    Environment variables are not applied here; :func:`tabifyer.cli.main`
    layers config file values first and environment values on top.
    """
    parser = argparse.ArgumentParser(
        prog="tabifyer",
        description="Convert tables in PDF files into tab-delimited text using pdftotext.",
        epilog="Every option can also be set with a TABIFYER_<OPTION> environment variable "
        "or in .tabifyer.toml / .tabifyer.yaml / .tabifyer.json.",
    )
    parser.add_argument("--version", action="version", version=f"tabifyer {version}")

    paths = parser.add_argument_group("paths")
    paths.add_argument("--pdfs-dir", "--pdfs_dir", dest="pdfs_dir", help="Directory containing the source PDF files")
    paths.add_argument(
        "--output-dir", "--output_dir", dest="output_dir", help="Directory receiving the .spt and .tsv files"
    )
    paths.add_argument("--recursive", "-r", action="store_true", help="Also convert PDFs in subdirectories")
    paths.add_argument(
        "--text",
        dest="text_input",
        metavar="FILE",
        help="Tabify an existing space-delimited text file instead of converting PDFs",
    )
    paths.add_argument("--out", "-o", metavar="FILE", help="Output file for --text (default: stdout)")

    extraction = parser.add_argument_group("extraction options")
    add_option_arguments(extraction)

    run = parser.add_argument_group("execution")
    run.add_argument(
        "--parallel",
        "-p",
        type=positive_int,
        nargs="?",
        const=None,
        default=1,
        help="Convert PDFs in parallel (optionally specify number of workers)",
    )
    run.add_argument("--config", help="Path to a config file (.toml, .yaml, .json or pyproject.toml)")
    run.add_argument("--no-config", action="store_true", help="Do not look for a config file")
    run.add_argument("--rich", action="store_true", help="Enable rich terminal output")
    run.add_argument("--no-summary", action="store_true", help="Do not print the summary after a batch")
    run.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    run.add_argument("--log-file", help="Also write log records to this file")
    run.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")

    return parser


__all__ = [
    "EXIT_DEPENDENCY_ERROR",
    "EXIT_ERROR",
    "EXIT_FILE_ERROR",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "add_option_arguments",
    "apply_env_vars_to_parser",
    "create_parser",
    "get_env_var_value",
    "positive_float",
    "positive_int",
]
