"""Tests for the shared value types."""

import itertools

import pytest
from pydantic import ValidationError

from jjreconcile.core.config import RunMode
from jjreconcile.core.model import (
    Assessment,
    CommitInfo,
    DivergentPair,
    ResolutionAction,
)


@pytest.mark.parametrize(
    "flags", list(itertools.product([False, True], repeat=4))
)
def test_has_issues_is_or_of_flags(flags):
    left_conflict, right_conflict, left_merge, right_merge = flags
    assessment = Assessment(
        left_has_conflicts=left_conflict,
        right_has_conflicts=right_conflict,
        left_is_merge=left_merge,
        right_is_merge=right_merge,
    )

    assert assessment.has_conflicts == (left_conflict or right_conflict)
    assert assessment.has_merge_commits == (left_merge or right_merge)
    assert assessment.has_issues == any(flags)


def test_mutating_actions():
    mutating = {a for a in ResolutionAction if a.is_mutating}

    assert mutating == {
        ResolutionAction.ABANDON_LEFT,
        ResolutionAction.ABANDON_RIGHT,
        ResolutionAction.SQUASH_LEFT_INTO_RIGHT,
        ResolutionAction.SQUASH_RIGHT_INTO_LEFT,
    }


def test_pair_is_frozen():
    pair = DivergentPair(
        left=CommitInfo(change_id="k", commit_id="a"),
        right=CommitInfo(change_id="k", commit_id="b"),
    )

    with pytest.raises(ValidationError):
        pair.left = CommitInfo(change_id="k", commit_id="c")


def test_run_mode_is_frozen():
    mode = RunMode(safe=True)

    with pytest.raises(ValidationError):
        mode.auto = True
    assert mode.safe is True
    assert mode.auto is False
