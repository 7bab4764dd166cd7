"""Select node - narrow several divergent changes down to one."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from jjreconcile.core.errors import UserCancelled
from jjreconcile.core.log import logger
from jjreconcile.core.model import Outcome
from jjreconcile.core.state import ResolveState
from jjreconcile.resolve.selector import DivergenceSelector


@dataclass
class Select(BaseNode[ResolveState, None, Outcome]):
    """Ask which change id to resolve in this pass."""

    change_ids: list[str]

    async def run(
        self, ctx: GraphRunContext[ResolveState]
    ) -> "Analyze | End[Outcome]":
        """Choose a change and re-resolve it.

        Returns:
            Analyze: The chosen change still has two revisions
            End: The operator quit

        Raises:
            StaleSelectionError: If the chosen change no longer
                resolves to two revisions
        """
        state = ctx.state
        selector = DivergenceSelector(
            state.repository, state.console, state.mode
        )

        try:
            chosen = selector.choose_change_id(self.change_ids)
        except UserCancelled:
            logger.info("Selection input closed, stopping")
            chosen = None

        if chosen is None:
            state.console.show("No change ID selected. Exiting.")
            logger.info("Selection aborted by operator")
            state.status = "aborted"
            return End(Outcome.ABORTED)

        state.console.show(f"\nWorking with change ID: {chosen}")
        state.pair = selector.resolve_chosen(chosen)

        from jjreconcile.workflow.nodes.analyze import Analyze
        return Analyze()
