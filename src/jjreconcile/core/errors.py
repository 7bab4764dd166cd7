"""Exceptions raised while resolving divergent changes."""


class ResolutionError(Exception):
    """Base class for all resolver failures."""


class UserCancelled(ResolutionError):
    """The operator declined a confirmation or closed the input stream."""


class StaleSelectionError(ResolutionError):
    """A chosen change id no longer resolves to two or more revisions."""

    def __init__(self, change_id: str, found: int):
        super().__init__(
            f"Change {change_id} resolves to {found} revision(s); "
            f"at least 2 are required"
        )
        self.change_id = change_id
        self.found = found


class MutationError(ResolutionError):
    """A jj command that changes repository state failed.

    Attributes:
        command: The command line that was run
        stderr: Captured standard error
    """

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class EmptySelectionError(MutationError):
    """A rebase found no revisions to move."""


class UnattendedLogicError(ResolutionError):
    """An automatically chosen action did not end the resolution pass."""


__all__ = [
    "ResolutionError",
    "UserCancelled",
    "StaleSelectionError",
    "MutationError",
    "EmptySelectionError",
    "UnattendedLogicError",
]
