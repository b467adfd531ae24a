#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the tabifyer library.

This module defines specialized exception classes for the error conditions
that can occur while extracting PDF tables and converting them into
tab-delimited records. The column segmenter itself never raises; everything
here belongs to the plumbing around it.

Exception Hierarchy
-------------------
- TabifyerError (base exception)

  - ValidationError (parameter/option validation)
    - PageRangeError (page range errors)

  - FileError (file access and I/O)
    - DirectoryError (source/output directory preconditions)
    - MalformedFileError (corrupted/unreadable PDF)

  - ExtractionError (external pdftotext failures)
    - ExtractionTimeoutError (pdftotext exceeded its time budget)

  - PasswordProtectedError (encrypted PDFs)

  - DependencyError (missing external tool)

"""

from __future__ import annotations

from typing import Any


class TabifyerError(Exception):
    """Base exception class for all tabifyer-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(TabifyerError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class PageRangeError(ValidationError):
    """Exception raised for invalid page range specifications."""

    def __init__(self, message: str, parameter_value: Any = None, original_error: Exception | None = None):
        """Initialize the page range error."""
        super().__init__(
            message, parameter_name="pages", parameter_value=parameter_value, original_error=original_error
        )


class FileError(TabifyerError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class DirectoryError(FileError):
    """Exception raised when a source or output directory is unusable.

    This is a fatal precondition: it is checked once before any PDF is
    processed and aborts the whole batch.

    Parameters
    ----------
    message : str
        Description of the directory problem
    directory_role : str, optional
        Which directory failed the check (e.g. "pdfs", "output")
    file_path : str, optional
        The offending path
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        directory_role: str | None = None,
        file_path: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the directory error."""
        super().__init__(message, file_path=file_path, original_error=original_error)
        self.directory_role = directory_role


class MalformedFileError(FileError):
    """Exception raised when a PDF cannot be opened or has invalid structure."""

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the malformed file error."""
        super().__init__(message, file_path=file_path, original_error=original_error)


class ExtractionError(TabifyerError):
    """Exception raised when the external text extraction tool fails.

    Parameters
    ----------
    message : str
        Description of the failure
    file_path : str, optional
        The PDF being extracted
    returncode : int, optional
        Exit status of the tool, if it ran to completion
    stderr : str, optional
        Captured standard error from the tool
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the extraction error."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path
        self.returncode = returncode
        self.stderr = stderr


class ExtractionTimeoutError(ExtractionError):
    """Exception raised when the extraction tool does not finish in time."""

    def __init__(
        self,
        timeout: float,
        file_path: str | None = None,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the timeout error."""
        if message is None:
            message = f"Extraction timed out after {timeout:g} seconds"
            if file_path:
                message += f": {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)
        self.timeout = timeout


class PasswordProtectedError(TabifyerError):
    """Exception raised when a PDF requires a password for access.

    Parameters
    ----------
    message : str, optional
        Custom error message. If not provided, uses default message
    filename : str, optional
        Name of the file that requires a password
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self, message: str | None = None, filename: str | None = None, original_error: Exception | None = None
    ):
        """Initialize the password protected error."""
        if message is None:
            if filename:
                message = f"File '{filename}' is password-protected and requires authentication"
            else:
                message = "File is password-protected and requires a password for access"

        super().__init__(message, original_error=original_error)
        self.filename = filename


class DependencyError(TabifyerError):
    """Exception raised when a required external tool is not available.

    Parameters
    ----------
    tool_name : str
        Name of the missing executable
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    install_hint : str, optional
        Suggested way to install the tool

    """

    def __init__(
        self,
        tool_name: str,
        message: str | None = None,
        install_hint: str = "",
        original_error: Exception | None = None,
    ):
        """Initialize the dependency error with tool details."""
        if message is None:
            message = f"Required tool '{tool_name}' was not found on PATH"
            if install_hint:
                message += f"\nInstall with: {install_hint}"
        super().__init__(message, original_error=original_error)
        self.tool_name = tool_name
        self.install_hint = install_hint


__all__ = [
    "TabifyerError",
    "ValidationError",
    "PageRangeError",
    "FileError",
    "DirectoryError",
    "MalformedFileError",
    "ExtractionError",
    "ExtractionTimeoutError",
    "PasswordProtectedError",
    "DependencyError",
]
