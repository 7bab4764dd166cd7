"""Value types shared by the selector, analyzer and engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CommitInfo(BaseModel):
    """One revision of a change, as reported by jj."""

    model_config = ConfigDict(frozen=True)

    change_id: str
    commit_id: str


class DivergentPair(BaseModel):
    """The two revisions a resolution pass works on."""

    model_config = ConfigDict(frozen=True)

    left: CommitInfo
    right: CommitInfo


class Assessment(BaseModel):
    """Everything known about a pair before choosing an action.

    Only valid until the next mutation; a restart always builds a
    fresh one.
    """

    model_config = ConfigDict(frozen=True)

    left_description: str = ""
    right_description: str = ""
    left_has_conflicts: bool = False
    right_has_conflicts: bool = False
    left_is_merge: bool = False
    right_is_merge: bool = False
    interdiff: str = ""
    interdiff_is_empty: bool = Field(
        default=True,
        description="True when the interdiff has no non-whitespace output",
    )

    @property
    def has_conflicts(self) -> bool:
        return self.left_has_conflicts or self.right_has_conflicts

    @property
    def has_merge_commits(self) -> bool:
        return self.left_is_merge or self.right_is_merge

    @property
    def has_issues(self) -> bool:
        return self.has_conflicts or self.has_merge_commits


class ResolutionAction(str, Enum):
    """Operations offered in the resolution menu."""

    ABANDON_LEFT = "abandon_left"
    ABANDON_RIGHT = "abandon_right"
    SQUASH_LEFT_INTO_RIGHT = "squash_left_into_right"
    SQUASH_RIGHT_INTO_LEFT = "squash_right_into_left"
    PRINT_STACK = "print_stack"
    REFRESH = "refresh"
    SHOW_INTERDIFF = "show_interdiff"
    SHOW_DIFF_LEFT = "show_diff_left"
    SHOW_DIFF_RIGHT = "show_diff_right"

    @property
    def is_mutating(self) -> bool:
        return self in _MUTATING


_MUTATING = frozenset({
    ResolutionAction.ABANDON_LEFT,
    ResolutionAction.ABANDON_RIGHT,
    ResolutionAction.SQUASH_LEFT_INTO_RIGHT,
    ResolutionAction.SQUASH_RIGHT_INTO_LEFT,
})


class Transition(str, Enum):
    """What the loop does after an action.

    CONTINUE: show the menu again for the same pair
    RESTART: discard everything and detect divergence again
    DONE: stop the run
    """

    CONTINUE = "continue"
    RESTART = "restart"
    DONE = "done"


class Outcome(str, Enum):
    """How a run ended."""

    RESOLVED = "resolved"
    ABORTED = "aborted"


__all__ = [
    "CommitInfo",
    "DivergentPair",
    "Assessment",
    "ResolutionAction",
    "Transition",
    "Outcome",
]
