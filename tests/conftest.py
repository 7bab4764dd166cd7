"""Pytest configuration and fixtures for jjreconcile tests."""

import tempfile
from pathlib import Path

import pytest

from jjreconcile.core.config import RunMode
from jjreconcile.core.log import ConsoleSink, setup_logger
from tests.fakes import FakeRepository, FakeRevision


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only debug logging for the whole test session."""
    test_log_root = Path(tempfile.gettempdir()) / "jjreconcile-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def simple_pair():
    """One change with two revisions, identical content, no issues."""
    return FakeRepository([
        FakeRevision("kxyz", "aaa111", description="Add parser"),
        FakeRevision("kxyz", "bbb222", description="Add parser"),
        FakeRevision("other", "ccc333", description="Unrelated"),
    ])


@pytest.fixture
def manual_mode():
    return RunMode()


@pytest.fixture
def auto_mode():
    return RunMode(auto=True)
