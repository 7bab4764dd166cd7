"""Command execution using the invoke library."""

from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from jjreconcile.core.log import logger


class Runner(Context):
    """invoke.Context with a single execute() entry point."""

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        check: bool = True,
    ) -> Result:
        """Run a shell command with output captured, not echoed.

        Args:
            command: Command line, run through the shell
            cwd: Working directory
            timeout: Seconds before the command is killed (None waits)
            check: Raise on a non-zero exit instead of returning it

        Returns:
            invoke.Result; exited is -1 when the timeout fired

        Raises:
            invoke.UnexpectedExit: If check is True and the command
                failed
        """
        kwargs = {"hide": True, "warn": not check, "in_stream": False}
        if timeout:
            kwargs["timeout"] = timeout

        logger.spew("Running command", command=command, cwd=str(cwd or ""))

        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            logger.warning(
                "Command timed out", command=command, timeout=timeout
            )
            result = e.result
            result.exited = -1

        return result
