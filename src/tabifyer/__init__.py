"""tabifyer - turn PDF tables into tab-delimited records.

tabifyer runs ``pdftotext`` to render PDF tables as space-aligned text and
then re-segments each line into fields, using runs of two or more spaces as
column boundaries. The result is written as tab-separated values.

Basic usage:

    >>> from tabifyer import segment, tabify_directory
    >>> segment("Name  Age  City")
    ['Name', 'Age', 'City']
    >>> batch = tabify_directory("/data/pdfs", "/data/tsv")
    >>> print(f"{batch.successful}/{batch.total} converted")

Use options to restrict pages or change the extraction:

    >>> from tabifyer import TabifyOptions
    >>> options = TabifyOptions(first_page=3, last_page=3, timeout=60)
    >>> batch = tabify_directory("/data/pdfs", "/data/tsv", options)

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "tabifyer requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from tabifyer.exceptions import (  # noqa: E402
    DependencyError,
    DirectoryError,
    ExtractionError,
    ExtractionTimeoutError,
    FileError,
    MalformedFileError,
    PageRangeError,
    PasswordProtectedError,
    TabifyerError,
    ValidationError,
)
from tabifyer.extractor import PdftotextExtractor  # noqa: E402
from tabifyer.options import TabifyOptions  # noqa: E402
from tabifyer.pipeline import (  # noqa: E402
    BatchResult,
    FileResult,
    tabify_directory,
    tabify_line,
    tabify_lines,
    tabify_pdf,
    tabify_text_file,
)
from tabifyer.progress import ProgressCallback, ProgressEvent  # noqa: E402
from tabifyer.segmenter import Field, segment, segment_fields  # noqa: E402

__all__ = [
    "__version__",
    # Core
    "Field",
    "segment",
    "segment_fields",
    # Pipeline
    "BatchResult",
    "FileResult",
    "PdftotextExtractor",
    "TabifyOptions",
    "tabify_directory",
    "tabify_line",
    "tabify_lines",
    "tabify_pdf",
    "tabify_text_file",
    # Progress
    "ProgressCallback",
    "ProgressEvent",
    # Exceptions
    "DependencyError",
    "DirectoryError",
    "ExtractionError",
    "ExtractionTimeoutError",
    "FileError",
    "MalformedFileError",
    "PageRangeError",
    "PasswordProtectedError",
    "TabifyerError",
    "ValidationError",
]
