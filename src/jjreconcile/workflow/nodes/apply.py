"""Apply node - run the chosen action and route on its transition."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from jjreconcile.core.errors import UserCancelled
from jjreconcile.core.log import logger
from jjreconcile.core.model import Outcome, ResolutionAction, Transition
from jjreconcile.core.state import ResolveState
from jjreconcile.resolve.engine import ResolutionEngine


@dataclass
class Apply(BaseNode[ResolveState, None, Outcome]):
    """Apply one resolution action to the current pair."""

    action: ResolutionAction
    automatic: bool = False

    async def run(
        self, ctx: GraphRunContext[ResolveState]
    ) -> "Detect | Decide | End[Outcome]":
        """Apply the action.

        Returns:
            Detect: The repository changed or a refresh was requested
            Decide: Informational action or cancelled confirmation;
                the same pair is offered again
            End: The engine reported the run is done
        """
        state = ctx.state
        engine = ResolutionEngine(state.repository, state.console, state.mode)

        from jjreconcile.workflow.nodes.decide import Decide

        with logger.span(
            "Apply action",
            action=self.action.value,
            automatic=self.automatic,
        ):
            try:
                if self.automatic:
                    transition = engine.apply_automatic(
                        self.action, state.pair
                    )
                else:
                    transition = engine.apply(self.action, state.pair)
            except UserCancelled as e:
                logger.info("Action cancelled", reason=str(e))
                state.console.show("Action cancelled.")
                return Decide(automatic=False)

        if transition is Transition.RESTART:
            if self.action.is_mutating:
                state.applied.append(self.action.value)
            from jjreconcile.workflow.nodes.detect import Detect
            return Detect()
        if transition is Transition.DONE:
            state.status = "resolved"
            return End(Outcome.RESOLVED)
        return Decide(automatic=False)
