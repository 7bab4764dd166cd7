"""Repository capability interface consumed by the resolver."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from jjreconcile.core.model import CommitInfo


@runtime_checkable
class Repository(Protocol):
    """Query and mutation operations the resolver needs from jj.

    JJRepository implements this against a real workspace; tests
    substitute an in-memory fake.
    """

    def list_change_ids(self) -> list[str]:
        """Change id of every visible revision, duplicates included."""
        ...

    def resolve_change_ids(self, change_ids: list[str]) -> list[CommitInfo]:
        """Revisions of the given changes, excluding their descendants."""
        ...

    def first_revision_for(self, change_id: str) -> str | None:
        ...

    def description(self, revision: str) -> str:
        ...

    def has_conflicts(self, revision: str) -> bool:
        ...

    def parent_count(self, revision: str) -> int:
        ...

    def interdiff(
        self, from_revision: str, to_revision: str, use_external_tool: bool
    ) -> str:
        ...

    def diff(self, revision: str) -> str:
        ...

    def stack(self) -> str:
        ...

    def current_operation(self) -> str:
        ...

    def rebase(self, root: str, destination: str) -> str:
        """Move the descendants of root onto destination.

        Raises:
            EmptySelectionError: If root has no descendants
            MutationError: On any other failure
        """
        ...

    def abandon(self, revision: str) -> str:
        ...

    def squash(self, from_revision: str, into_revision: str) -> str:
        ...
