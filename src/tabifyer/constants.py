#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the tabifyer library.

This module centralizes the hardcoded values used across tabifyer so that
the CLI, the option classes and the pipeline agree on the same defaults.

Constants are organized by category:
1. Type Definitions - Literal types used by options and the CLI
2. Segmentation - Characters that drive the column segmenter
3. Extraction - Defaults for the external pdftotext invocation
4. File Naming - Extensions for source, intermediate and output files
5. Configuration - Environment prefix and config file names
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

LayoutMode = Literal["table", "layout"]
EolMode = Literal["unix", "dos", "mac"]

# =============================================================================
# Segmentation
# =============================================================================

# Only the ASCII space separates fields; tabs and other whitespace count as letters.
SPACE_CHAR = " "
FIELD_SEPARATOR = "\t"

# =============================================================================
# Extraction
# =============================================================================

DEFAULT_PDFTOTEXT_EXECUTABLE = "pdftotext"
DEFAULT_EXTRACTION_TIMEOUT = 120.0
DEFAULT_LAYOUT_MODE: LayoutMode = "table"
DEFAULT_EOL: EolMode = "unix"
DEFAULT_TEXT_ENCODING = "utf-8"
DEFAULT_KEEP_INTERMEDIATE = True
DEFAULT_VALIDATE_PDF = True

LAYOUT_MODE_FLAGS: dict[str, str] = {
    "table": "-table",
    "layout": "-layout",
}

EOL_SEQUENCES: dict[str, str] = {
    "unix": "\n",
    "dos": "\r\n",
    "mac": "\r",
}

# pdftotext spells encodings in upper case (e.g. "UTF-8", "Latin1")
PDFTOTEXT_ENCODING_NAMES: dict[str, str] = {
    "utf-8": "UTF-8",
    "utf8": "UTF-8",
    "latin-1": "Latin1",
    "latin1": "Latin1",
    "iso-8859-1": "Latin1",
    "ascii": "ASCII7",
}

# =============================================================================
# File Naming
# =============================================================================

PDF_EXTENSION = ".pdf"
SPACE_DELIMITED_EXTENSION = ".spt"
TAB_DELIMITED_EXTENSION = ".tsv"

# =============================================================================
# Configuration
# =============================================================================

ENV_VAR_PREFIX = "TABIFYER_"
CONFIG_FILENAMES = [".tabifyer.toml", ".tabifyer.yaml", ".tabifyer.yml", ".tabifyer.json"]
PYPROJECT_TOOL_SECTION = "tabifyer"
