"""Detect node - find divergent changes from scratch."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from jjreconcile.core.log import logger
from jjreconcile.core.model import Outcome
from jjreconcile.core.state import ResolveState
from jjreconcile.resolve.selector import DivergenceSelector


@dataclass
class Detect(BaseNode[ResolveState, None, Outcome]):
    """Start of every resolution pass."""

    async def run(
        self, ctx: GraphRunContext[ResolveState]
    ) -> "Select | Analyze | End[Outcome]":
        """Discard the previous pass and look for divergence again.

        Returns:
            End: No divergent changes remain
            Select: More than one pair of revisions needs a choice
            Analyze: Exactly one pair found
        """
        state = ctx.state
        state.discard_pass()
        state.detections += 1
        state.status = "running"

        state.console.show("Checking for divergent commits...")
        selector = DivergenceSelector(
            state.repository, state.console, state.mode
        )
        change_ids = selector.find_divergent_change_ids()

        if not change_ids:
            state.console.show("No divergent commits found.")
            logger.info(
                "No divergent changes remain",
                detections=state.detections,
                applied=len(state.applied),
            )
            state.status = "resolved"
            return End(Outcome.RESOLVED)

        state.console.show(
            f"Found {len(change_ids)} divergent change IDs: "
            f"{', '.join(change_ids)}"
        )
        infos = selector.resolve(change_ids)

        if selector.needs_choice(infos):
            state.console.show(
                "\nMore than 2 commits found for divergent change IDs."
            )
            state.console.show("You must choose a specific change ID to work on.")
            from jjreconcile.workflow.nodes.select import Select
            return Select(change_ids=selector.candidates(infos))

        from jjreconcile.workflow.nodes.analyze import Analyze
        state.pair = selector.pair_from(infos)
        return Analyze()
