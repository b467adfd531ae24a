#  Copyright (c) 2025 Tom Villani, Ph.D.
"""PDF text extraction through the external ``pdftotext`` tool.

``pdftotext`` (Poppler/Xpdf) can render tables as space-aligned text with its
``-table`` or ``-layout`` flags. That text is the input of the column
segmenter. This module wraps one bounded invocation of the tool per PDF and
uses PyMuPDF to check a document before the tool is run.

Each extraction is a single attempt with a wall-clock timeout. Failures are
reported through :class:`ExtractionResult` rather than raised, so that one
bad PDF never stops a batch.

Examples
--------
    >>> extractor = PdftotextExtractor(timeout=60)
    >>> result = extractor.extract("report.pdf", "out/report.spt", first_page=3, last_page=3)
    >>> result.success
    True

"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import fitz

from tabifyer.constants import (
    DEFAULT_EOL,
    DEFAULT_EXTRACTION_TIMEOUT,
    DEFAULT_LAYOUT_MODE,
    DEFAULT_PDFTOTEXT_EXECUTABLE,
    DEFAULT_TEXT_ENCODING,
    LAYOUT_MODE_FLAGS,
    PDFTOTEXT_ENCODING_NAMES,
)
from tabifyer.exceptions import (
    DependencyError,
    ExtractionError,
    ExtractionTimeoutError,
    MalformedFileError,
    PageRangeError,
    PasswordProtectedError,
)
from tabifyer.options import TabifyOptions

logger = logging.getLogger(__name__)

PDFTOTEXT_INSTALL_HINT = "apt install poppler-utils  |  brew install poppler  |  conda install -c conda-forge poppler"


@dataclass(frozen=True)
class PdfInfo:
    """Facts about a PDF gathered before extraction."""

    page_count: int
    is_encrypted: bool


@dataclass
class ExtractionResult:
    """Outcome of one pdftotext invocation.

    Attributes
    ----------
    source : Path
        The PDF that was extracted
    output : Path
        The space-delimited text file the tool was asked to write
    success : bool
        True when the tool exited with status 0 and wrote ``output``
    returncode : int or None
        Exit status, or None when the tool did not finish
    timed_out : bool
        True when the timeout elapsed before the tool finished
    stderr : str
        Captured standard error from the tool
    error : ExtractionError or None
        Exception describing the failure, if any

    """

    source: Path
    output: Path
    success: bool
    returncode: int | None = None
    timed_out: bool = False
    stderr: str = ""
    error: ExtractionError | None = field(default=None, repr=False)


def inspect_pdf(path: str | Path, password: str | None = None) -> PdfInfo:
    """Open a PDF with PyMuPDF and report its page count.

    Parameters
    ----------
    path : str or Path
        PDF file to inspect
    password : str, optional
        Password used when the document is encrypted

    Returns
    -------
    PdfInfo
        Page count and encryption state

    Raises
    ------
    MalformedFileError
        If PyMuPDF cannot open the file
    PasswordProtectedError
        If the document is encrypted and no (or a wrong) password is given

    """
    try:
        doc = fitz.open(filename=str(path))
    except Exception as e:
        raise MalformedFileError(f"Failed to open PDF document: {e!r}", file_path=str(path), original_error=e) from e

    try:
        encrypted = bool(doc.is_encrypted)
        if encrypted:
            if not password:
                raise PasswordProtectedError(
                    message="PDF document is password-protected. Please provide a password using --password.",
                    filename=str(path),
                )
            if doc.authenticate(password) == 0:
                raise PasswordProtectedError(
                    message="Failed to authenticate PDF with provided password. Please check the password is correct.",
                    filename=str(path),
                )
        return PdfInfo(page_count=doc.page_count, is_encrypted=encrypted)
    finally:
        doc.close()


def resolve_page_range(first_page: int | None, last_page: int | None, page_count: int) -> tuple[int, int]:
    """Validate a 1-based inclusive page range against a document.

    ``None`` stands for the first or last page of the document. A last page
    beyond the end of the document is clamped with a warning, matching the
    way pdftotext itself treats it.

    Parameters
    ----------
    first_page : int or None
        First page, 1-based
    last_page : int or None
        Last page, 1-based and inclusive
    page_count : int
        Number of pages in the document

    Returns
    -------
    tuple[int, int]
        The resolved ``(first, last)`` pair

    Raises
    ------
    PageRangeError
        If the range is empty or falls outside the document

    Examples
    --------
    >>> resolve_page_range(None, None, 10)
    (1, 10)
    >>> resolve_page_range(3, 3, 10)
    (3, 3)

    """
    if page_count < 1:
        raise PageRangeError("Document has no pages", parameter_value=(first_page, last_page))

    first = 1 if first_page is None else first_page
    last = page_count if last_page is None else last_page

    if first < 1 or last < 1:
        raise PageRangeError(
            f"Invalid page range {first}-{last}. Pages are 1-based.", parameter_value=(first_page, last_page)
        )
    if first > page_count:
        raise PageRangeError(
            f"First page {first} is out of range. Document has {page_count} pages.",
            parameter_value=(first_page, last_page),
        )
    if first > last:
        raise PageRangeError(
            f"First page {first} is after last page {last}.", parameter_value=(first_page, last_page)
        )
    if last > page_count:
        logger.warning("Last page %d exceeds document length; using %d", last, page_count)
        last = page_count

    return first, last


@dataclass
class PdftotextExtractor:
    """Runs ``pdftotext`` to produce space-aligned table text.

    Parameters
    ----------
    executable : str, default "pdftotext"
        Name or path of the tool
    timeout : float, default 120.0
        Seconds allowed for one invocation
    layout_mode : {"table", "layout"}, default "table"
        Which pdftotext layout flag to pass
    eol : {"unix", "dos", "mac"}, default "unix"
        End-of-line convention for the generated text
    encoding : str, default "utf-8"
        Output text encoding
    password : str, optional
        User password for encrypted documents
    extra_args : sequence of str
        Additional flags passed verbatim before the file arguments

    """

    executable: str = DEFAULT_PDFTOTEXT_EXECUTABLE
    timeout: float = DEFAULT_EXTRACTION_TIMEOUT
    layout_mode: str = DEFAULT_LAYOUT_MODE
    eol: str = DEFAULT_EOL
    encoding: str = DEFAULT_TEXT_ENCODING
    password: str | None = None
    extra_args: Sequence[str] = ()

    @classmethod
    def from_options(cls, options: TabifyOptions) -> PdftotextExtractor:
        """Build an extractor configured from :class:`TabifyOptions`."""
        return cls(
            executable=options.pdftotext_path,
            timeout=options.timeout,
            layout_mode=options.layout_mode,
            eol=options.eol,
            encoding=options.encoding,
            password=options.password,
        )

    def resolve_executable(self) -> str:
        """Locate the tool on PATH.

        Raises
        ------
        DependencyError
            If the executable cannot be found

        """
        resolved = shutil.which(self.executable)
        if resolved is None:
            raise DependencyError(self.executable, install_hint=PDFTOTEXT_INSTALL_HINT)
        return resolved

    def build_command(
        self,
        source: str | Path,
        output: str | Path,
        first_page: int | None = None,
        last_page: int | None = None,
    ) -> list[str]:
        """Assemble the pdftotext argument list."""
        command = [
            self.executable,
            LAYOUT_MODE_FLAGS[self.layout_mode],
            "-eol",
            self.eol,
            "-enc",
            PDFTOTEXT_ENCODING_NAMES.get(self.encoding.lower(), self.encoding),
        ]
        if first_page is not None:
            command += ["-f", str(first_page)]
        if last_page is not None:
            command += ["-l", str(last_page)]
        if self.password:
            command += ["-upw", self.password]
        command.extend(self.extra_args)
        command += [str(source), str(output)]
        return command

    def extract(
        self,
        source: str | Path,
        output: str | Path,
        first_page: int | None = None,
        last_page: int | None = None,
    ) -> ExtractionResult:
        """Run one bounded extraction of ``source`` into ``output``.

        Never raises for tool failures; inspect the returned result instead.
        """
        source = Path(source)
        output = Path(output)
        command = self.build_command(source, output, first_page, last_page)
        logger.debug("Running %s", " ".join(_redact(command)))

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            error = ExtractionTimeoutError(self.timeout, file_path=str(source), original_error=e)
            return ExtractionResult(source, output, success=False, timed_out=True, error=error)
        except OSError as e:
            error = ExtractionError(
                f"Could not run {self.executable}: {e}", file_path=str(source), original_error=e
            )
            return ExtractionResult(source, output, success=False, error=error)

        stderr = (completed.stderr or "").strip()
        if completed.returncode != 0:
            message = f"{self.executable} exited with status {completed.returncode}"
            if stderr:
                message += f": {stderr}"
            error = ExtractionError(message, file_path=str(source), returncode=completed.returncode, stderr=stderr)
            return ExtractionResult(
                source, output, success=False, returncode=completed.returncode, stderr=stderr, error=error
            )

        if not output.is_file():
            error = ExtractionError(
                f"{self.executable} reported success but did not write {output}",
                file_path=str(source),
                returncode=completed.returncode,
                stderr=stderr,
            )
            return ExtractionResult(
                source, output, success=False, returncode=completed.returncode, stderr=stderr, error=error
            )

        return ExtractionResult(source, output, success=True, returncode=completed.returncode, stderr=stderr)


def _redact(command: list[str]) -> list[str]:
    redacted = list(command)
    for i, arg in enumerate(redacted[:-1]):
        if arg in ("-upw", "-opw"):
            redacted[i + 1] = "***"
    return redacted


__all__ = [
    "ExtractionResult",
    "PdfInfo",
    "PdftotextExtractor",
    "inspect_pdf",
    "resolve_page_range",
]
