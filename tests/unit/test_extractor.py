"""Unit tests for the pdftotext wrapper and PyMuPDF inspection."""

import subprocess
from unittest.mock import patch

import pytest
from utils import create_table_pdf, fake_pdftotext

from tabifyer.exceptions import (
    DependencyError,
    ExtractionTimeoutError,
    MalformedFileError,
    PageRangeError,
    PasswordProtectedError,
)
from tabifyer.extractor import PdftotextExtractor, inspect_pdf, resolve_page_range
from tabifyer.options import TabifyOptions


@pytest.mark.unit
class TestBuildCommand:
    def test_default_command(self):
        command = PdftotextExtractor().build_command("in.pdf", "out.spt")
        assert command == ["pdftotext", "-table", "-eol", "unix", "-enc", "UTF-8", "in.pdf", "out.spt"]

    def test_page_range_flags(self):
        command = PdftotextExtractor(eol="dos").build_command("in.pdf", "out.spt", first_page=3, last_page=3)
        assert command == [
            "pdftotext",
            "-table",
            "-eol",
            "dos",
            "-enc",
            "UTF-8",
            "-f",
            "3",
            "-l",
            "3",
            "in.pdf",
            "out.spt",
        ]

    def test_layout_mode_password_and_extra_args(self):
        extractor = PdftotextExtractor(layout_mode="layout", password="s3cret", extra_args=("-nopgbrk",))
        command = extractor.build_command("in.pdf", "out.spt")
        assert command[1] == "-layout"
        assert command[command.index("-upw") + 1] == "s3cret"
        assert command[-3:] == ["-nopgbrk", "in.pdf", "out.spt"]

    def test_encoding_names(self):
        assert "Latin1" in PdftotextExtractor(encoding="latin-1").build_command("a", "b")
        assert "KOI8-R" in PdftotextExtractor(encoding="KOI8-R").build_command("a", "b")

    def test_from_options(self):
        options = TabifyOptions(timeout=30, pdftotext_path="/usr/local/bin/pdftotext", eol="mac", password="pw")
        extractor = PdftotextExtractor.from_options(options)
        assert extractor.timeout == 30
        assert extractor.executable == "/usr/local/bin/pdftotext"
        assert extractor.eol == "mac"
        assert extractor.password == "pw"


@pytest.mark.unit
class TestExtract:
    def test_success(self, tmp_path):
        fake = fake_pdftotext("a  b\n")
        with patch("tabifyer.extractor.subprocess.run", fake):
            result = PdftotextExtractor().extract(tmp_path / "in.pdf", tmp_path / "out.spt")

        assert result.success
        assert result.returncode == 0
        assert result.error is None
        assert (tmp_path / "out.spt").read_text() == "a  b\n"

    def test_timeout_is_passed_to_subprocess(self, tmp_path):
        with patch("tabifyer.extractor.subprocess.run", side_effect=fake_pdftotext("x")) as run:
            PdftotextExtractor(timeout=7.5).extract(tmp_path / "in.pdf", tmp_path / "out.spt")

        assert run.call_args.kwargs["timeout"] == 7.5
        assert run.call_args.kwargs["check"] is False

    def test_timeout_expired(self, tmp_path):
        with patch(
            "tabifyer.extractor.subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="pdftotext", timeout=1)
        ):
            result = PdftotextExtractor(timeout=1).extract(tmp_path / "in.pdf", tmp_path / "out.spt")

        assert not result.success
        assert result.timed_out
        assert result.returncode is None
        assert isinstance(result.error, ExtractionTimeoutError)
        assert result.error.timeout == 1

    def test_nonzero_exit(self, tmp_path):
        with patch("tabifyer.extractor.subprocess.run", fake_pdftotext("", returncode=3, stderr="I/O Error")):
            result = PdftotextExtractor().extract(tmp_path / "in.pdf", tmp_path / "out.spt")

        assert not result.success
        assert result.returncode == 3
        assert result.stderr == "I/O Error"
        assert result.error.returncode == 3
        assert "status 3" in str(result.error)

    def test_missing_output_is_failure(self, tmp_path):
        completed = subprocess.CompletedProcess(["pdftotext"], 0, stdout="", stderr="")
        with patch("tabifyer.extractor.subprocess.run", return_value=completed):
            result = PdftotextExtractor().extract(tmp_path / "in.pdf", tmp_path / "out.spt")

        assert not result.success
        assert "did not write" in str(result.error)

    def test_os_error_is_failure(self, tmp_path):
        with patch("tabifyer.extractor.subprocess.run", side_effect=FileNotFoundError("pdftotext")):
            result = PdftotextExtractor().extract(tmp_path / "in.pdf", tmp_path / "out.spt")

        assert not result.success
        assert "Could not run" in str(result.error)

    def test_single_attempt(self, tmp_path):
        with patch("tabifyer.extractor.subprocess.run", side_effect=fake_pdftotext("", returncode=1)) as run:
            PdftotextExtractor().extract(tmp_path / "in.pdf", tmp_path / "out.spt")
        assert run.call_count == 1


@pytest.mark.unit
class TestResolveExecutable:
    def test_found(self):
        with patch("tabifyer.extractor.shutil.which", return_value="/usr/bin/pdftotext"):
            assert PdftotextExtractor().resolve_executable() == "/usr/bin/pdftotext"

    def test_missing(self):
        with patch("tabifyer.extractor.shutil.which", return_value=None):
            with pytest.raises(DependencyError) as exc_info:
                PdftotextExtractor(executable="pdftotext-nope").resolve_executable()
        assert exc_info.value.tool_name == "pdftotext-nope"
        assert "poppler" in str(exc_info.value)


@pytest.mark.unit
class TestInspectPdf:
    def test_page_count(self, tmp_path):
        pdf = create_table_pdf(tmp_path / "three.pdf", pages=3)
        info = inspect_pdf(pdf)
        assert info.page_count == 3
        assert not info.is_encrypted

    def test_unreadable_file(self, tmp_path):
        missing = tmp_path / "missing.pdf"
        with pytest.raises(MalformedFileError) as exc_info:
            inspect_pdf(missing)
        assert exc_info.value.file_path == str(missing)

    def test_encrypted_without_password(self, tmp_path):
        pdf = create_table_pdf(tmp_path / "locked.pdf", password="letmein")
        with pytest.raises(PasswordProtectedError):
            inspect_pdf(pdf)

    def test_encrypted_with_wrong_password(self, tmp_path):
        pdf = create_table_pdf(tmp_path / "locked.pdf", password="letmein")
        with pytest.raises(PasswordProtectedError, match="authenticate"):
            inspect_pdf(pdf, password="wrong")

    def test_encrypted_with_password(self, tmp_path):
        pdf = create_table_pdf(tmp_path / "locked.pdf", pages=2, password="letmein")
        info = inspect_pdf(pdf, password="letmein")
        assert info.page_count == 2
        assert info.is_encrypted


@pytest.mark.unit
class TestResolvePageRange:
    def test_defaults_to_whole_document(self):
        assert resolve_page_range(None, None, 10) == (1, 10)

    def test_single_page(self):
        assert resolve_page_range(3, 3, 10) == (3, 3)

    def test_open_ended(self):
        assert resolve_page_range(4, None, 10) == (4, 10)
        assert resolve_page_range(None, 2, 10) == (1, 2)

    def test_last_page_is_clamped(self, caplog):
        assert resolve_page_range(2, 50, 10) == (2, 10)
        assert "exceeds document length" in caplog.text

    @pytest.mark.parametrize(
        "first, last, count",
        [
            (0, 3, 10),
            (3, 0, 10),
            (11, None, 10),
            (5, 4, 10),
            (None, None, 0),
        ],
    )
    def test_invalid_ranges(self, first, last, count):
        with pytest.raises(PageRangeError):
            resolve_page_range(first, last, count)
