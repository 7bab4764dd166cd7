"""Operator-facing terminal output and prompts.

Diagnostics go through the logger; this module is only for text the
operator has to read or answer (menus, diffs, confirmations).
"""

import sys

from jjreconcile.core.errors import UserCancelled


class Console:
    """Line-oriented terminal I/O."""

    def show(self, text: str = "") -> None:
        """Print text to stdout."""
        print(text)

    def error(self, text: str) -> None:
        """Print text to stderr."""
        print(text, file=sys.stderr)

    def ask(self, prompt: str) -> str:
        """Read one answer from the operator.

        Returns:
            The answer with surrounding whitespace removed

        Raises:
            UserCancelled: On end of input or Ctrl+C
        """
        try:
            return input(prompt).strip()
        except (EOFError, KeyboardInterrupt) as e:
            print()
            raise UserCancelled("Input closed by operator") from e
