"""Confirmation gate for safe mode."""

from __future__ import annotations

from enum import Enum

from jjreconcile.core.console import Console
from jjreconcile.core.log import logger


class Confirmation(str, Enum):
    """Operator answer to a safe-mode prompt."""

    PROCEED = "proceed"
    CANCEL = "cancel"
    SKIP = "skip"


_ANSWERS = {
    "y": Confirmation.PROCEED,
    "yes": Confirmation.PROCEED,
    "s": Confirmation.SKIP,
    "skip": Confirmation.SKIP,
}


class ConfirmationGate:
    """Asks before operations when safe mode is on.

    With safe mode off every check returns PROCEED without touching
    the console.
    """

    def __init__(self, console: Console, enabled: bool):
        self.console = console
        self.enabled = enabled

    def check(self, message: str) -> Confirmation:
        """Ask about one underlying operation (y/N/s).

        Anything other than yes or skip cancels.
        """
        if not self.enabled:
            return Confirmation.PROCEED

        answer = self.console.ask(f"{message} (y/N/s): ").lower()
        result = _ANSWERS.get(answer, Confirmation.CANCEL)
        logger.debug("Confirmation answer", prompt=message, answer=result.value)
        return result

    def confirm(self, message: str) -> bool:
        """Ask about a whole action (y/N).

        Skipping a whole action has no meaning, so only an explicit
        yes proceeds.
        """
        if not self.enabled:
            return True

        answer = self.console.ask(f"{message} (y/N): ").lower()
        return _ANSWERS.get(answer) is Confirmation.PROCEED
