#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for PDF table extraction and tabification.

Options are immutable. Use :meth:`TabifyOptions.create_updated` to derive a
modified copy, for example when the CLI layers command-line values on top of
a config file.
"""

from __future__ import annotations

import codecs
import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, get_args

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from tabifyer.constants import (
    DEFAULT_EOL,
    DEFAULT_EXTRACTION_TIMEOUT,
    DEFAULT_KEEP_INTERMEDIATE,
    DEFAULT_LAYOUT_MODE,
    DEFAULT_PDFTOTEXT_EXECUTABLE,
    DEFAULT_TEXT_ENCODING,
    DEFAULT_VALIDATE_PDF,
    EolMode,
    LayoutMode,
)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class TabifyOptions(CloneFrozenMixin):
    """Configuration options for PDF-to-TSV conversion.

    Parameters
    ----------
    first_page : int or None, default None
        First page to extract (1-based). None starts at the first page.
    last_page : int or None, default None
        Last page to extract (1-based, inclusive). None runs to the last page.
    password : str or None, default None
        User password for encrypted PDF documents.
    timeout : float, default 120.0
        Wall-clock seconds allowed for one pdftotext invocation.
    pdftotext_path : str, default "pdftotext"
        Name or path of the pdftotext executable.
    layout_mode : {"table", "layout"}, default "table"
        pdftotext layout flag used to keep columns aligned.
    eol : {"unix", "dos", "mac"}, default "unix"
        Line ending for both the intermediate and the tab-delimited files.
    encoding : str, default "utf-8"
        Text encoding of the intermediate and tab-delimited files.
    keep_intermediate : bool, default True
        Keep the space-delimited ``.spt`` file next to the ``.tsv`` output.
    validate_pdf : bool, default True
        Open each PDF with PyMuPDF before extraction to check it is readable,
        not password-locked, and that the page range fits the document.

    """

    first_page: int | None = field(
        default=None,
        metadata={"help": "First page to extract (1-based)", "type": int, "cli_name": "first-page", "short": "-f"},
    )
    last_page: int | None = field(
        default=None,
        metadata={
            "help": "Last page to extract (1-based, inclusive)",
            "type": int,
            "cli_name": "last-page",
            "short": "-l",
        },
    )
    password: str | None = field(
        default=None,
        metadata={"help": "Password for encrypted PDF documents", "cli_name": "password"},
    )
    timeout: float = field(
        default=DEFAULT_EXTRACTION_TIMEOUT,
        metadata={"help": "Seconds allowed for each pdftotext run", "type": float, "cli_name": "timeout"},
    )
    pdftotext_path: str = field(
        default=DEFAULT_PDFTOTEXT_EXECUTABLE,
        metadata={"help": "Name or path of the pdftotext executable", "cli_name": "pdftotext"},
    )
    layout_mode: LayoutMode = field(
        default=DEFAULT_LAYOUT_MODE,
        metadata={
            "help": "pdftotext layout mode used to keep columns aligned",
            "choices": ["table", "layout"],
            "cli_name": "layout-mode",
        },
    )
    eol: EolMode = field(
        default=DEFAULT_EOL,
        metadata={"help": "Line ending for generated files", "choices": ["unix", "dos", "mac"], "cli_name": "eol"},
    )
    encoding: str = field(
        default=DEFAULT_TEXT_ENCODING,
        metadata={"help": "Text encoding of generated files", "cli_name": "encoding"},
    )
    keep_intermediate: bool = field(
        default=DEFAULT_KEEP_INTERMEDIATE,
        metadata={"help": "Delete the intermediate .spt file after conversion", "cli_name": "no-keep-intermediate"},
    )
    validate_pdf: bool = field(
        default=DEFAULT_VALIDATE_PDF,
        metadata={"help": "Skip opening PDFs with PyMuPDF before extraction", "cli_name": "no-validate-pdf"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges and enumerated values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

        for name in ("first_page", "last_page"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValueError(f"{name} must be 1 or greater, got {value}")

        if self.first_page is not None and self.last_page is not None and self.first_page > self.last_page:
            raise ValueError(f"first_page ({self.first_page}) must not exceed last_page ({self.last_page})")

        if self.layout_mode not in get_args(LayoutMode):
            raise ValueError(f"layout_mode must be one of {get_args(LayoutMode)}, got {self.layout_mode!r}")
        if self.eol not in get_args(EolMode):
            raise ValueError(f"eol must be one of {get_args(EolMode)}, got {self.eol!r}")

        if not self.pdftotext_path:
            raise ValueError("pdftotext_path must not be empty")

        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"encoding must be a known text codec, got {self.encoding!r}") from None

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> TabifyOptions:
        """Build options from a mapping, ignoring keys that are not option fields.

        Used for config file sections and parsed CLI arguments, which carry
        unrelated keys alongside the option values.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in known and value is not None})


__all__ = ["CloneFrozenMixin", "TabifyOptions"]
