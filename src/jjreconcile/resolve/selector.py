"""Divergence detection and choice of the change to work on."""

from __future__ import annotations

from collections import Counter

from jjreconcile.core.config import RunMode
from jjreconcile.core.console import Console
from jjreconcile.core.errors import ResolutionError, StaleSelectionError
from jjreconcile.core.log import logger
from jjreconcile.core.model import CommitInfo, DivergentPair
from jjreconcile.jj.base import Repository

NO_COMMIT_INFO = "[Failed to get commit info]"


class DivergenceSelector:
    """Finds divergent changes and narrows them to a single pair."""

    def __init__(self, repository: Repository, console: Console,
                 mode: RunMode):
        self.repository = repository
        self.console = console
        self.mode = mode

    def find_divergent_change_ids(self) -> list[str]:
        """Change ids that two or more visible revisions share, sorted."""
        counts = Counter(self.repository.list_change_ids())
        return sorted(cid for cid, count in counts.items() if count > 1)

    def resolve(self, change_ids: list[str]) -> list[CommitInfo]:
        return self.repository.resolve_change_ids(change_ids)

    def needs_choice(self, infos: list[CommitInfo]) -> bool:
        """More than one pair's worth of revisions is ambiguous."""
        return len(infos) > 2

    @staticmethod
    def candidates(infos: list[CommitInfo]) -> list[str]:
        """Unique change ids in resolution order."""
        return list(dict.fromkeys(info.change_id for info in infos))

    @staticmethod
    def pair_from(infos: list[CommitInfo]) -> DivergentPair:
        """Build the pair from the first two resolved revisions.

        Raises:
            ResolutionError: If fewer than two revisions resolved
        """
        if len(infos) < 2:
            raise ResolutionError(
                f"Less than 2 commits found ({len(infos)}). Cannot proceed."
            )
        return DivergentPair(left=infos[0], right=infos[1])

    def choose_change_id(self, change_ids: list[str]) -> str | None:
        """List candidates and let the operator pick one.

        Auto mode takes the first candidate. Returns None when the
        operator quits.
        """
        self.console.show(
            "\nMultiple change IDs found. "
            "Please choose which one to work on:"
        )
        for index, change_id in enumerate(change_ids, start=1):
            commit_id = self.repository.first_revision_for(change_id)
            if commit_id:
                description = self.repository.description(commit_id)
                self.console.show(f"{index}. {commit_id} - {description}")
            else:
                self.console.show(f"{index}. {change_id} - {NO_COMMIT_INFO}")

        if self.mode.auto:
            self.console.show(
                "\nAuto mode: choosing option 1 (first change ID)"
            )
            return change_ids[0]

        while True:
            answer = self.console.ask(
                f"\nChoose option (1-{len(change_ids)}) or 'q' to quit: "
            )
            if answer.lower() == "q":
                return None
            if answer.isdecimal() and 1 <= int(answer) <= len(change_ids):
                return change_ids[int(answer) - 1]
            self.console.show("Invalid choice.")

    def resolve_chosen(self, change_id: str) -> DivergentPair:
        """Re-resolve a single chosen change.

        Raises:
            StaleSelectionError: If it no longer has two revisions
        """
        infos = self.resolve([change_id])
        if len(infos) < 2:
            raise StaleSelectionError(change_id, len(infos))
        logger.info("Working with change", change_id=change_id)
        return self.pair_from(infos)
