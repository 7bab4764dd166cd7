"""Decide node - pick the next action automatically or from the menu."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from jjreconcile.core.errors import UserCancelled
from jjreconcile.core.log import logger
from jjreconcile.core.model import Outcome
from jjreconcile.core.state import ResolveState
from jjreconcile.resolve.engine import (
    choose_automatic_action,
    prompt_for_action,
)


@dataclass
class Decide(BaseNode[ResolveState, None, Outcome]):
    """Choose one action for the current pair.

    `automatic` is only true on the first visit after Analyze; the
    heuristic is never re-run for a pair the operator is already
    inspecting.
    """

    automatic: bool = True

    async def run(
        self, ctx: GraphRunContext[ResolveState]
    ) -> "Apply | End[Outcome]":
        state = ctx.state
        if state.assessment is None:
            raise ValueError("Decide reached without an assessment")

        from jjreconcile.workflow.nodes.apply import Apply

        if self.automatic and state.mode.auto:
            action = choose_automatic_action(state.assessment, state.mode)
            if action is not None:
                state.console.show(
                    f"Auto mode: interdiff is empty, applying "
                    f"{action.value.replace('_', ' ')}..."
                )
                return Apply(action=action, automatic=True)
            if state.assessment.interdiff_is_empty:
                state.console.show(
                    "Auto mode: interdiff is empty but merge commits "
                    "detected - switching to manual mode"
                )
                state.console.show(
                    "Please review the warnings above and choose an "
                    "action manually"
                )

        try:
            action = prompt_for_action(state.console)
        except UserCancelled:
            logger.info("Menu input closed, stopping")
            state.status = "aborted"
            return End(Outcome.ABORTED)

        return Apply(action=action)
