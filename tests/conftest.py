"""Pytest configuration and shared fixtures for the tabifyer test suite."""

import os
from pathlib import Path
from typing import Generator

import pytest
from hypothesis import Phase, Verbosity, settings
from utils import cleanup_test_dir, create_test_temp_dir

settings.register_profile("ci", max_examples=300, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=100)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "fuzzing: Property-based tests")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is removed after the test."""
    temp_path = create_test_temp_dir()
    try:
        yield temp_path
    finally:
        cleanup_test_dir(temp_path)


@pytest.fixture
def space_delimited_table() -> str:
    """Space-aligned table text as pdftotext -table renders it."""
    return (
        "Name            Age    City\n"
        "Alice Smith     34     New York\n"
        "Bob Jones       27     San Francisco\n"
        "\n"
        "   Total        2\n"
    )


@pytest.fixture
def no_env_config(monkeypatch, tmp_path):
    """Isolate the CLI from real config files and TABIFYER_* variables."""
    for key in list(os.environ):
        if key.startswith("TABIFYER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    return tmp_path


