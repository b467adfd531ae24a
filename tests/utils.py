"""Test utilities for the tabifyer test suite.

Helpers to create PDFs with PyMuPDF and to stand in for the pdftotext
process in unit tests.
"""

import shutil
import subprocess
import tempfile
from pathlib import Path

import fitz
import pytest

TABLE_ROWS = [
    ("Name", "Age", "City"),
    ("Alice Smith", "34", "New York"),
    ("Bob Jones", "27", "San Francisco"),
]


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


def create_table_pdf(path: Path, pages: int = 1, rows=TABLE_ROWS, password: str | None = None) -> Path:
    """Write a PDF whose pages each hold a simple three-column table.

    Columns are placed at fixed x offsets far enough apart that pdftotext
    separates them with two or more spaces.
    """
    doc = fitz.open()
    for page_number in range(pages):
        page = doc.new_page(width=595, height=842)
        page.insert_text((50, 40), f"Page {page_number + 1}", fontsize=10)
        for row_index, row in enumerate(rows):
            y = 80 + row_index * 20
            for x, cell in zip((50, 220, 320), row):
                page.insert_text((x, y), cell, fontsize=10)

    if password:
        doc.save(
            str(path),
            encryption=fitz.PDF_ENCRYPT_AES_256,
            user_pw=password,
            owner_pw=password + "-owner",
        )
    else:
        doc.save(str(path))
    doc.close()
    return path


def fake_pdftotext(text: str, returncode: int = 0, stderr: str = ""):
    """Build a ``subprocess.run`` replacement that writes ``text`` to the output path.

    The output path is the last element of the command, as pdftotext expects.
    """
    calls = []

    def run(command, **kwargs):
        calls.append(command)
        if returncode == 0:
            Path(command[-1]).write_text(text, encoding="utf-8")
        return subprocess.CompletedProcess(command, returncode, stdout="", stderr=stderr)

    run.calls = calls
    return run


requires_pdftotext = pytest.mark.skipif(shutil.which("pdftotext") is None, reason="pdftotext is not installed")
