"""Tests for JJRepository command construction and output parsing."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml
from invoke import Result

from jjreconcile.core.config import Config, JJConfig
from jjreconcile.core.errors import (
    EmptySelectionError,
    MutationError,
    ResolutionError,
)
from jjreconcile.core.yaml_settings import DEFAULTS_FILE
from jjreconcile.jj import JJRepository, Repository


@pytest.fixture
def config(tmp_path):
    """Config with the packaged command templates."""
    defaults = yaml.safe_load(DEFAULTS_FILE.read_text())
    return Config.model_construct(
        jj=JJConfig(binary="jj", workdir=tmp_path, diff_tool="difft"),
        commands=defaults["config"]["commands"],
    )


@pytest.fixture
def runner():
    mock = MagicMock()
    mock.execute.return_value = Result(stdout="", stderr="", exited=0)
    return mock


@pytest.fixture
def repo(config, runner):
    return JJRepository(config, runner=runner)


def respond(runner, stdout="", stderr="", exited=0):
    runner.execute.return_value = Result(
        stdout=stdout, stderr=stderr, exited=exited
    )


def last_command(runner):
    return runner.execute.call_args.args[0]


def test_satisfies_protocol(repo):
    assert isinstance(repo, Repository)


def test_commands_run_in_workdir_without_check(repo, runner, tmp_path):
    repo.stack()

    kwargs = runner.execute.call_args.kwargs
    assert kwargs["cwd"] == tmp_path
    assert kwargs["check"] is False


def test_list_change_ids_keeps_duplicates(repo, runner):
    respond(runner, stdout="kxyz\nmnop\nkxyz\n\n")

    assert repo.list_change_ids() == ["kxyz", "mnop", "kxyz"]
    assert last_command(runner).startswith("jj log --no-graph")


def test_resolve_change_ids_builds_union_revset(repo, runner):
    respond(runner, stdout="kxyz aaa111\nkxyz bbb222\n")

    infos = repo.resolve_change_ids(["kxyz", "mnop"])

    assert [(i.change_id, i.commit_id) for i in infos] == [
        ("kxyz", "aaa111"),
        ("kxyz", "bbb222"),
    ]
    command = last_command(runner)
    assert 'change_id("kxyz") | change_id("mnop")' in command
    assert "~ descendants(" in command


def test_resolve_nothing_runs_nothing(repo, runner):
    assert repo.resolve_change_ids([]) == []
    runner.execute.assert_not_called()


def test_first_revision_for(repo, runner):
    respond(runner, stdout="aaa111\nbbb222\n")
    assert repo.first_revision_for("kxyz") == "aaa111"

    respond(runner, stdout="")
    assert repo.first_revision_for("gone") is None


def test_description_is_stripped(repo, runner):
    respond(runner, stdout="Add parser\n\nLonger body\n")

    assert repo.description("aaa111") == "Add parser\n\nLonger body"
    assert "-r 'aaa111'" in last_command(runner)


def test_has_conflicts(repo, runner):
    respond(runner, stdout="aaa111\n")
    assert repo.has_conflicts("aaa111") is True
    assert "'aaa111 & conflicts()'" in last_command(runner)

    respond(runner, stdout="")
    assert repo.has_conflicts("aaa111") is False


@pytest.mark.parametrize(
    "stdout,count", [("p1\n", 1), ("p1\np2\n", 2), ("", 0)]
)
def test_parent_count(repo, runner, stdout, count):
    respond(runner, stdout=stdout)

    assert repo.parent_count("aaa111") == count


def test_interdiff_plain_and_external(repo, runner):
    repo.interdiff("aaa111", "bbb222", use_external_tool=False)
    assert last_command(runner) == (
        "jj interdiff --from 'aaa111' --to 'bbb222'"
    )

    repo.interdiff("aaa111", "bbb222", use_external_tool=True)
    assert last_command(runner) == (
        "jj interdiff --from 'aaa111' --to 'bbb222' --tool=difft"
    )


def test_query_failure_raises(repo, runner):
    respond(runner, stderr="Error: no such revision", exited=1)

    with pytest.raises(ResolutionError, match="no such revision"):
        repo.diff("zzz")


def test_rebase_moves_children(repo, runner):
    respond(runner, stderr="Rebased 2 commits\n")

    output = repo.rebase("aaa111", "bbb222")

    assert last_command(runner) == "jj rebase -s 'aaa111+' -d 'bbb222'"
    assert "Rebased 2 commits" in output


def test_rebase_with_no_children_is_empty_selection(repo, runner):
    respond(
        runner,
        stderr="Error: Revset `aaa111+` resolved to no revisions\n"
        "Hint: Empty revision set\n",
        exited=1,
    )

    with pytest.raises(EmptySelectionError) as exc_info:
        repo.rebase("aaa111", "bbb222")
    assert exc_info.value.command == "jj rebase -s 'aaa111+' -d 'bbb222'"


def test_mutation_failure(repo, runner):
    respond(runner, stderr="Error: commit is immutable\n", exited=1)

    with pytest.raises(MutationError) as exc_info:
        repo.abandon("aaa111")
    assert not isinstance(exc_info.value, EmptySelectionError)
    assert "immutable" in exc_info.value.stderr


def test_squash_keeps_destination_description(repo, runner):
    repo.squash("aaa111", "bbb222")

    assert last_command(runner) == (
        "jj squash -u --from 'aaa111' --into 'bbb222'"
    )


def test_binary_substituted(config, runner):
    config.jj.binary = "/opt/jj/bin/jj"
    repo = JJRepository(config, runner=runner)

    repo.abandon("aaa111")

    assert last_command(runner) == "/opt/jj/bin/jj abandon -r 'aaa111'"


def test_timeout_passed_through(config, runner):
    config.jj.timeout = 30
    JJRepository(config, runner=runner).stack()

    assert runner.execute.call_args.kwargs["timeout"] == 30


def test_workdir_defaults_to_cwd():
    assert JJConfig().workdir == Path.cwd()
