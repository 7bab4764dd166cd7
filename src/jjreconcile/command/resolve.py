"""Resolve command - runs the divergence resolution loop."""

from __future__ import annotations

from pydantic import BaseModel

from jjreconcile.core.config import RunMode, State
from jjreconcile.core.console import Console
from jjreconcile.core.log import logger
from jjreconcile.core.model import Outcome
from jjreconcile.core.state import ResolveState


class ResolveCommand(BaseModel):
    """Resolve divergent changes until none remain."""

    def build_state(
        self, state: State, mode: RunMode, console: Console | None = None
    ) -> ResolveState:
        """Create the runtime state for a run against the configured
        workspace."""
        from jjreconcile.jj.repository import JJRepository

        return ResolveState(
            mode=mode,
            repository=JJRepository(state.config),
            console=console or Console(),
        )

    async def run(self, resolve_state: ResolveState) -> Outcome:
        """Drive the workflow graph to completion.

        Returns:
            How the run ended
        """
        from jjreconcile.workflow.graph import create_workflow
        from jjreconcile.workflow.nodes.detect import Detect

        workflow = create_workflow()
        async with workflow.iter(Detect(), state=resolve_state) as run:
            async for _node in run:
                pass
        return run.result.output

    async def run_workflow(self, state: State, mode: RunMode) -> int:
        """Run the resolver and report the result.

        Every failure ends the run; nothing needs rolling back since
        each mutation is followed by fresh detection.

        Returns:
            Exit code (always 0; errors are reported on stderr)
        """
        console = Console()
        if mode.safe:
            console.show(
                "Safe mode enabled - will ask for confirmation before "
                "each jj command that changes the repository"
            )
        if mode.auto:
            console.show(
                "Auto mode enabled - will use the external diff tool for "
                "interdiffs and resolve empty interdiffs automatically"
            )

        resolve_state = self.build_state(state, mode, console)
        try:
            outcome = await self.run(resolve_state)
        except Exception as e:
            logger.error(
                "Resolution failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            console.error(f"Error: {e}")
            return 0

        logger.info(
            "Resolution finished",
            outcome=outcome.value,
            applied=resolve_state.applied,
        )
        return 0
