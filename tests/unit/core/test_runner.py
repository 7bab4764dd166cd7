"""Tests for Runner.execute against real shell commands."""

import pytest
from invoke.exceptions import UnexpectedExit

from jjreconcile.core.runner import Runner


def test_successful_command():
    result = Runner().execute("echo 'Working copy now at: kxyz'")

    assert result.exited == 0
    assert result.stdout == "Working copy now at: kxyz\n"


def test_runs_in_cwd(tmp_path):
    result = Runner().execute("pwd -P", cwd=tmp_path)

    assert result.stdout.strip() == str(tmp_path.resolve())


def test_failure_returned_without_check():
    result = Runner().execute(
        "echo 'Error: Empty revision set' >&2; exit 1", check=False
    )

    assert result.exited == 1
    assert "Empty revision set" in result.stderr


def test_failure_raises_with_check():
    with pytest.raises(UnexpectedExit):
        Runner().execute("exit 3")


def test_timeout_reported_as_minus_one():
    result = Runner().execute("sleep 5", timeout=1, check=False)

    assert result.exited == -1
