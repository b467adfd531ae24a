#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Line pipeline: from PDFs to tab-delimited files.

For every PDF in a source directory the pipeline

1. runs pdftotext into ``<output_dir>/<name>.spt`` (space-aligned text),
2. feeds each line of that file through :func:`tabifyer.segmenter.segment`,
3. joins the fields of each line with a tab and writes ``<output_dir>/<name>.tsv``.

Lines are streamed one at a time and every input line produces exactly one
output line, so row positions in the ``.tsv`` match the ``.spt``.

A failure for one PDF (extraction error, timeout, unreadable document) is
reported and the batch moves on. A misconfigured source or output directory
is fatal and is checked once before any file is touched.

Examples
--------
    >>> tabify_line("Name  Age  City\\n")
    'Name\\tAge\\tCity'
    >>> result = tabify_directory("/data/pdfs", "/data/tsv")
    >>> result.successful, result.failed
    (12, 0)

"""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from tabifyer.constants import (
    EOL_SEQUENCES,
    FIELD_SEPARATOR,
    PDF_EXTENSION,
    SPACE_DELIMITED_EXTENSION,
    TAB_DELIMITED_EXTENSION,
)
from tabifyer.exceptions import DirectoryError, ExtractionError, TabifyerError
from tabifyer.extractor import PdftotextExtractor, inspect_pdf, resolve_page_range
from tabifyer.options import TabifyOptions
from tabifyer.progress import ProgressCallback, ProgressEvent, emit_progress
from tabifyer.segmenter import segment

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    """Outcome of converting one PDF."""

    source: Path
    spt_path: Path
    tsv_path: Path
    success: bool
    lines_written: int = 0
    error: str | None = None


@dataclass
class BatchResult:
    """Outcome of converting every PDF in a directory."""

    results: list[FileResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.total - self.successful

    @property
    def failures(self) -> list[FileResult]:
        return [r for r in self.results if not r.success]


def _strip_line_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def tabify_line(line: str) -> str:
    """Convert one space-aligned line into a tab-delimited record.

    The trailing line terminator, if any, is removed first. A line without
    any field becomes an empty string.
    """
    return FIELD_SEPARATOR.join(segment(_strip_line_terminator(line)))


def tabify_lines(lines: Iterable[str]) -> Iterator[str]:
    """Lazily tabify a stream of lines, preserving order and count."""
    for line in lines:
        yield tabify_line(line)


def tabify_text_file(
    source: str | Path,
    destination: str | Path,
    *,
    encoding: str = "utf-8",
    eol: str = "unix",
) -> int:
    """Convert a space-delimited text file into a tab-delimited one.

    Parameters
    ----------
    source : str or Path
        Space-aligned text, usually the ``.spt`` written by pdftotext
    destination : str or Path
        Tab-delimited file to (over)write
    encoding : str, default "utf-8"
        Encoding of both files; undecodable bytes are replaced
    eol : {"unix", "dos", "mac"}, default "unix"
        Line ending written to ``destination``

    Returns
    -------
    int
        Number of lines written

    """
    count = 0
    with open(source, "r", encoding=encoding, errors="replace") as reader, open(
        destination, "w", encoding=encoding, newline=EOL_SEQUENCES[eol]
    ) as writer:
        for record in tabify_lines(reader):
            writer.write(record + "\n")
            count += 1
    return count


def output_paths_for(pdf_path: str | Path, output_dir: str | Path) -> tuple[Path, Path]:
    """Return the ``(.spt, .tsv)`` paths for a PDF inside ``output_dir``."""
    stem = Path(pdf_path).stem
    output_dir = Path(output_dir)
    return output_dir / f"{stem}{SPACE_DELIMITED_EXTENSION}", output_dir / f"{stem}{TAB_DELIMITED_EXTENSION}"


def _check_directory(value: str | Path | None, role: str) -> Path:
    if value is None or str(value).strip() == "":
        raise DirectoryError(f"No {role} directory specified", directory_role=role)

    path = Path(value).expanduser()
    if path.is_absolute():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(
                f"Could not create {role} directory: {path}", directory_role=role, file_path=str(path), original_error=e
            ) from e

    if not path.is_dir():
        raise DirectoryError(f"Invalid {role} directory specified: {path}", directory_role=role, file_path=str(path))
    return path


def prepare_directories(pdfs_dir: str | Path | None, output_dir: str | Path | None) -> tuple[Path, Path]:
    """Check the source and output directories before a batch starts.

    Absolute paths are created when they do not exist yet; relative paths
    must already exist.

    Raises
    ------
    DirectoryError
        If either directory is unset, cannot be created, or is not a directory

    """
    return _check_directory(pdfs_dir, "pdfs"), _check_directory(output_dir, "output")


def find_pdfs(pdfs_dir: str | Path, recursive: bool = False) -> list[Path]:
    """List the PDF files in a directory, sorted by path."""
    pdfs_dir = Path(pdfs_dir)
    candidates = pdfs_dir.rglob("*") if recursive else pdfs_dir.glob("*")
    return sorted(p for p in candidates if p.is_file() and p.suffix.lower() == PDF_EXTENSION)


def tabify_pdf(
    pdf_path: str | Path,
    output_dir: str | Path,
    options: TabifyOptions | None = None,
    extractor: PdftotextExtractor | None = None,
) -> FileResult:
    """Extract one PDF and write its tab-delimited table text.

    Per-file problems never raise; they are logged and returned as a failed
    :class:`FileResult` so the caller can carry on with other files.
    """
    options = options or TabifyOptions()
    extractor = extractor or PdftotextExtractor.from_options(options)
    pdf_path = Path(pdf_path)
    spt_path, tsv_path = output_paths_for(pdf_path, output_dir)
    result = FileResult(source=pdf_path, spt_path=spt_path, tsv_path=tsv_path, success=False)

    try:
        first_page, last_page = options.first_page, options.last_page
        if options.validate_pdf:
            info = inspect_pdf(pdf_path, password=options.password)
            first_page, last_page = resolve_page_range(first_page, last_page, info.page_count)

        extraction = extractor.extract(pdf_path, spt_path, first_page=first_page, last_page=last_page)
        if not extraction.success:
            raise extraction.error or ExtractionError("Process failed", file_path=str(pdf_path))

        result.lines_written = tabify_text_file(spt_path, tsv_path, encoding=options.encoding, eol=options.eol)
        if not options.keep_intermediate:
            spt_path.unlink(missing_ok=True)
    except (TabifyerError, OSError) as e:
        result.error = str(e)
        logger.error("Failed to convert %s: %s", pdf_path, e)
        return result

    result.success = True
    logger.info("Converted %s -> %s (%d lines)", pdf_path, tsv_path, result.lines_written)
    return result


def _report(callback: ProgressCallback | None, result: FileResult, done: int, total: int) -> None:
    if result.success:
        emit_progress(
            callback,
            ProgressEvent(
                "item_done",
                f"Converted {result.source.name}",
                current=done,
                total=total,
                metadata={
                    "item_type": "file",
                    "source": str(result.source),
                    "tsv_path": str(result.tsv_path),
                    "lines": result.lines_written,
                },
            ),
        )
    else:
        emit_progress(
            callback,
            ProgressEvent(
                "error",
                f"Failed to convert {result.source.name}",
                current=done,
                total=total,
                metadata={"error": result.error, "stage": "file", "source": str(result.source)},
            ),
        )


def tabify_directory(
    pdfs_dir: str | Path,
    output_dir: str | Path,
    options: TabifyOptions | None = None,
    *,
    recursive: bool = False,
    parallel: int | None = 1,
    progress_callback: ProgressCallback | None = None,
    extractor: PdftotextExtractor | None = None,
) -> BatchResult:
    """Convert every PDF in ``pdfs_dir`` into a ``.tsv`` in ``output_dir``.

    Parameters
    ----------
    pdfs_dir : str or Path
        Directory holding the source PDFs
    output_dir : str or Path
        Directory receiving the ``.spt`` and ``.tsv`` files
    options : TabifyOptions, optional
        Extraction and output options
    recursive : bool, default False
        Also look for PDFs in subdirectories
    parallel : int or None, default 1
        Number of worker processes. 1 runs sequentially; None lets the
        executor pick one worker per CPU.
    progress_callback : ProgressCallback, optional
        Receives started/item_done/error/finished events
    extractor : PdftotextExtractor, optional
        Preconfigured extractor; built from ``options`` when omitted

    Returns
    -------
    BatchResult
        One :class:`FileResult` per PDF, in sorted path order

    Raises
    ------
    DirectoryError
        If a directory is unusable (checked before any work)
    DependencyError
        If the pdftotext executable cannot be found

    """
    options = options or TabifyOptions()
    source_dir, target_dir = prepare_directories(pdfs_dir, output_dir)
    extractor = extractor or PdftotextExtractor.from_options(options)
    extractor.resolve_executable()

    pdfs = find_pdfs(source_dir, recursive=recursive)
    total = len(pdfs)
    logger.info("Found %d PDF file(s) in %s", total, source_dir)
    emit_progress(progress_callback, ProgressEvent("started", f"Converting {total} PDF file(s)", 0, total))

    results: list[FileResult | None] = [None] * total
    if parallel is None or parallel > 1:
        with ProcessPoolExecutor(max_workers=parallel) as executor:
            futures = {
                executor.submit(tabify_pdf, pdf, target_dir, options, extractor): index
                for index, pdf in enumerate(pdfs)
            }
            for done, future in enumerate(as_completed(futures), start=1):
                result = future.result()
                results[futures[future]] = result
                _report(progress_callback, result, done, total)
    else:
        for index, pdf in enumerate(pdfs):
            result = tabify_pdf(pdf, target_dir, options, extractor)
            results[index] = result
            _report(progress_callback, result, index + 1, total)

    batch = BatchResult(results=[r for r in results if r is not None])
    emit_progress(
        progress_callback,
        ProgressEvent(
            "finished",
            f"Converted {batch.successful}/{batch.total} PDF file(s)",
            current=total,
            total=total,
            metadata={"failed": batch.failed},
        ),
    )
    return batch


__all__ = [
    "BatchResult",
    "FileResult",
    "find_pdfs",
    "output_paths_for",
    "prepare_directories",
    "tabify_directory",
    "tabify_line",
    "tabify_lines",
    "tabify_pdf",
    "tabify_text_file",
]
