#!/usr/bin/env python3
"""jjreconcile CLI - resolve divergent changes in a jj workspace."""

import asyncio

from pydantic import Field
from pydantic_settings import CliApp

from jjreconcile.command.resolve import ResolveCommand
from jjreconcile.core.config import RunMode, State
from jjreconcile.core.log import logger


class CliState(State):
    """Find changes whose id points at more than one revision and
    resolve them one pair at a time.

    For each divergent pair the descriptions, conflict and merge
    flags and the interdiff are shown, then one of these is chosen:

      AL  Abandon left commit        P   Print current stack
      AR  Abandon right commit       R   Refresh (restart)
      SL  Squash left into right     I   Show interdiff
      SR  Squash right into left     DL  Show diff of left commit
                                     DR  Show diff of right commit

    Safe mode prompts y/N/s before each jj command that changes the
    repository: y runs it, s skips just that command, anything else
    cancels the action. After every abandon or squash the tool
    starts over from detection, since revision ids may have changed.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.jj.binary value)
    2. Environment variables (JJRECONCILE_CONFIG__JJ__BINARY=value)
    3. .env file
    4. --include files, jjreconcile.yaml in the current directory,
       the user config directory, then the packaged defaults
    """

    safe: bool = Field(
        default=False,
        description="Ask for confirmation before running jj commands "
        "that change the repository",
    )
    auto: bool = Field(
        default=False,
        description="Use the external diff tool for interdiffs, pick the "
        "first candidate change and resolve empty interdiffs "
        "automatically",
    )

    def run_mode(self) -> RunMode:
        """Combine command-line flags with the configured defaults."""
        return RunMode(
            safe=self.safe or self.config.mode.safe,
            auto=self.auto or self.config.mode.auto,
        )

    def cli_cmd(self):
        """Run the resolver, closing log sinks on exit."""
        with logger:
            exit_code = asyncio.run(
                ResolveCommand().run_workflow(self, self.run_mode())
            )
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
