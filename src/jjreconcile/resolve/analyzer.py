"""Pair analysis: gather what is needed to pick a resolution."""

from __future__ import annotations

from jjreconcile.core.config import RunMode
from jjreconcile.core.console import Console
from jjreconcile.core.log import logger
from jjreconcile.core.model import Assessment, DivergentPair
from jjreconcile.jj.base import Repository


def analyze(
    repository: Repository, pair: DivergentPair, mode: RunMode
) -> Assessment:
    """Collect descriptions, conflict and merge flags, and the interdiff.

    Read-only; safe to call any number of times.

    Args:
        repository: Repository to query
        pair: Revisions to compare
        mode: Run mode; auto mode renders the interdiff with the
            external diff tool

    Returns:
        Assessment for this pair
    """
    left = pair.left.commit_id
    right = pair.right.commit_id

    with logger.span("Analyze pair", left=left, right=right):
        left_description = repository.description(left)
        right_description = repository.description(right)
        left_has_conflicts = repository.has_conflicts(left)
        right_has_conflicts = repository.has_conflicts(right)
        left_is_merge = repository.parent_count(left) > 1
        right_is_merge = repository.parent_count(right) > 1
        interdiff = repository.interdiff(
            left, right, use_external_tool=mode.auto
        )

    return Assessment(
        left_description=left_description,
        right_description=right_description,
        left_has_conflicts=left_has_conflicts,
        right_has_conflicts=right_has_conflicts,
        left_is_merge=left_is_merge,
        right_is_merge=right_is_merge,
        interdiff=interdiff,
        interdiff_is_empty=not interdiff.strip(),
    )


def issue_lines(pair: DivergentPair, assessment: Assessment) -> list[str]:
    """One warning line per flagged side."""
    left = pair.left.commit_id
    right = pair.right.commit_id
    lines = []
    if assessment.left_has_conflicts:
        lines.append(f"  - Left commit ({left}) has conflict markers")
    if assessment.right_has_conflicts:
        lines.append(f"  - Right commit ({right}) has conflict markers")
    if assessment.left_is_merge:
        lines.append(f"  - Left commit ({left}) is a merge commit")
    if assessment.right_is_merge:
        lines.append(f"  - Right commit ({right}) is a merge commit")
    return lines


def report(
    console: Console, pair: DivergentPair, assessment: Assessment
) -> None:
    """Show the comparison, warnings and interdiff to the operator."""
    console.show("\nCommit comparison:")
    console.show(f"Left:  {pair.left.change_id} {pair.left.commit_id}")
    console.show(f"Right: {pair.right.change_id} {pair.right.commit_id}")

    console.show("\nCommit descriptions:")
    console.show(f"Left:  {assessment.left_description}")
    console.show(f"Right: {assessment.right_description}")

    if assessment.has_issues:
        console.show("\nWARNING: Issues detected with one or more commits")
        console.show("Squashing these commits may not be recommended")
        for line in issue_lines(pair, assessment):
            console.show(line)
        if assessment.has_conflicts:
            console.show(
                "Commits with conflict markers indicate unresolved "
                "merge conflicts"
            )
        if assessment.has_merge_commits:
            console.show(
                "Merge commits may contain important merge resolution "
                "history"
            )
        logger.warning(
            "Divergent pair has issues",
            conflicts=assessment.has_conflicts,
            merges=assessment.has_merge_commits,
        )

    console.show("\nInterdiff:")
    if assessment.interdiff_is_empty:
        console.show("(empty)")
    else:
        console.show(assessment.interdiff.rstrip())
