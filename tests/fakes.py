"""In-memory stand-ins for the jj repository and the terminal."""

from dataclasses import dataclass

from jjreconcile.core.console import Console
from jjreconcile.core.errors import EmptySelectionError, UserCancelled
from jjreconcile.core.model import CommitInfo


@dataclass
class FakeRevision:
    """One revision in the in-memory repository."""

    change_id: str
    commit_id: str
    description: str = ""
    conflicted: bool = False
    parents: int = 1
    children: int = 0
    diff: str = ""


class FakeRepository:
    """In-memory stand-in for JJRepository.

    Abandon and squash remove the source revision, so resolving a
    pair makes the divergence disappear. Every call is recorded in
    `calls` as a tuple of the method name and its arguments.
    """

    def __init__(self, revisions, interdiffs=None, failures=None):
        self.revisions = {rev.commit_id: rev for rev in revisions}
        self.interdiffs = interdiffs or {}
        self.failures = failures or {}
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, *args))
        if name in self.failures:
            raise self.failures[name]

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]

    def list_change_ids(self):
        self._record("list_change_ids")
        return [rev.change_id for rev in self.revisions.values()]

    def resolve_change_ids(self, change_ids):
        self._record("resolve_change_ids", tuple(change_ids))
        return [
            CommitInfo(change_id=rev.change_id, commit_id=rev.commit_id)
            for rev in self.revisions.values()
            if rev.change_id in change_ids
        ]

    def first_revision_for(self, change_id):
        self._record("first_revision_for", change_id)
        for rev in self.revisions.values():
            if rev.change_id == change_id:
                return rev.commit_id
        return None

    def description(self, revision):
        self._record("description", revision)
        return self.revisions[revision].description

    def has_conflicts(self, revision):
        self._record("has_conflicts", revision)
        return self.revisions[revision].conflicted

    def parent_count(self, revision):
        self._record("parent_count", revision)
        return self.revisions[revision].parents

    def interdiff(self, from_revision, to_revision, use_external_tool):
        self._record(
            "interdiff", from_revision, to_revision, use_external_tool
        )
        return self.interdiffs.get((from_revision, to_revision), "")

    def diff(self, revision):
        self._record("diff", revision)
        return self.revisions[revision].diff

    def stack(self):
        self._record("stack")
        return "\n".join(
            f"{rev.change_id} {rev.commit_id} {rev.description}"
            for rev in self.revisions.values()
        )

    def current_operation(self):
        self._record("current_operation")
        return "abc123 snapshot working copy"

    def rebase(self, root, destination):
        self._record("rebase", root, destination)
        if self.revisions[root].children == 0:
            raise EmptySelectionError(f"No revisions matched: {root}+")
        return f"Rebased {self.revisions[root].children} commits"

    def abandon(self, revision):
        self._record("abandon", revision)
        del self.revisions[revision]
        return f"Abandoned commit {revision}"

    def squash(self, from_revision, into_revision):
        self._record("squash", from_revision, into_revision)
        del self.revisions[from_revision]
        return ""


class ScriptedConsole(Console):
    """Console that answers prompts from a list and records output.

    Running out of answers behaves like end of input.
    """

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.prompts = []
        self.lines = []
        self.errors = []

    def show(self, text: str = "") -> None:
        self.lines.append(text)

    def error(self, text: str) -> None:
        self.errors.append(text)

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise UserCancelled("No more scripted answers")
        return self.answers.pop(0)

    @property
    def output(self) -> str:
        return "\n".join(self.lines)

