"""jj command wrapper."""

from __future__ import annotations

from jjreconcile.core.config import Config
from jjreconcile.core.errors import (
    EmptySelectionError,
    MutationError,
    ResolutionError,
)
from jjreconcile.core.log import logger
from jjreconcile.core.model import CommitInfo
from jjreconcile.core.runner import Runner

# jj's message when a revset matches nothing
EMPTY_REVISION_SET = "Empty revision set"


def _lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


class JJRepository:
    """Runs jj commands from the templates in config.commands["jj"].

    Queries log at debug level; commands that change the repository
    are logged as they execute and raise MutationError on failure.
    """

    def __init__(self, config: Config, runner: Runner | None = None):
        """Initialize jj wrapper.

        Args:
            config: Configuration with jj settings and command templates
            runner: Command runner (a new Runner by default)
        """
        self.config = config
        self.workdir = config.jj.workdir
        self.runner = runner or Runner()

    def _command(self, name: str, **params) -> str:
        template = self.config.commands["jj"][name]
        return template.format(jj=self.config.jj.binary, **params)

    def _query(self, name: str, **params) -> str:
        """Run a read-only command and return its stdout.

        Raises:
            ResolutionError: If jj exits non-zero
        """
        cmd = self._command(name, **params)
        logger.debug("jj query", command=cmd)
        result = self.runner.execute(
            cmd,
            cwd=self.workdir,
            timeout=self.config.jj.timeout,
            check=False,
        )
        if result.exited != 0:
            raise ResolutionError(
                f"jj query failed: exit code {result.exited}\n"
                f"Command: {cmd}\n"
                f"stderr: {result.stderr}"
            )
        return result.stdout

    def _mutate(self, name: str, **params) -> str:
        """Run a command that changes the repository.

        Raises:
            EmptySelectionError: If jj reports an empty revision set
            MutationError: On any other non-zero exit
        """
        cmd = self._command(name, **params)
        logger.info(f"Executing: {cmd}")
        result = self.runner.execute(
            cmd,
            cwd=self.workdir,
            timeout=self.config.jj.timeout,
            check=False,
        )
        if result.exited == 0:
            return result.stdout + result.stderr

        if EMPTY_REVISION_SET in result.stderr:
            raise EmptySelectionError(
                f"No revisions matched: {cmd}",
                command=cmd,
                stderr=result.stderr,
            )
        raise MutationError(
            f"{name} failed: exit code {result.exited}\n"
            f"Command: {cmd}\n"
            f"stderr: {result.stderr}",
            command=cmd,
            stderr=result.stderr,
        )

    def list_change_ids(self) -> list[str]:
        """Change id of every revision in the default log, in log order.

        A change id appearing more than once is divergent.
        """
        return _lines(self._query("change_ids"))

    def resolve_change_ids(self, change_ids: list[str]) -> list[CommitInfo]:
        """Resolve change ids to their revisions.

        Descendants of the matched revisions are excluded, so a
        divergent change yields its own revisions only.
        """
        if not change_ids:
            return []
        query = " | ".join(f'change_id("{cid}")' for cid in change_ids)
        output = self._query("resolve_change_ids", query=query)

        infos = []
        for line in _lines(output):
            change_id, _, commit_id = line.partition(" ")
            infos.append(
                CommitInfo(change_id=change_id, commit_id=commit_id.strip())
            )
        return infos

    def first_revision_for(self, change_id: str) -> str | None:
        revisions = _lines(
            self._query("revisions_for_change", change_id=change_id)
        )
        return revisions[0] if revisions else None

    def description(self, revision: str) -> str:
        return self._query("description", revision=revision).strip()

    def has_conflicts(self, revision: str) -> bool:
        """True if jj's conflicts() revset contains the revision."""
        return bool(_lines(self._query("conflicts", revision=revision)))

    def parent_count(self, revision: str) -> int:
        return len(_lines(self._query("parents", revision=revision)))

    def interdiff(
        self, from_revision: str, to_revision: str, use_external_tool: bool
    ) -> str:
        tool = (
            f" --tool={self.config.jj.diff_tool}" if use_external_tool else ""
        )
        return self._query(
            "interdiff",
            from_revision=from_revision,
            to_revision=to_revision,
            tool=tool,
        )

    def diff(self, revision: str) -> str:
        return self._query("diff", revision=revision)

    def stack(self) -> str:
        return self._query("stack")

    def current_operation(self) -> str:
        return self._query("current_operation")

    def rebase(self, root: str, destination: str) -> str:
        """Rebase the children of root (and their descendants) onto
        destination."""
        return self._mutate("rebase", root=root, destination=destination)

    def abandon(self, revision: str) -> str:
        return self._mutate("abandon", revision=revision)

    def squash(self, from_revision: str, into_revision: str) -> str:
        """Squash from_revision into into_revision, keeping the
        destination's description."""
        return self._mutate(
            "squash",
            from_revision=from_revision,
            into_revision=into_revision,
        )
