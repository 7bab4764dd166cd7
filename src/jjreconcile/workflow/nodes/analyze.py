"""Analyze node - assess the current pair."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from jjreconcile.core.model import Outcome
from jjreconcile.core.state import ResolveState
from jjreconcile.resolve.analyzer import analyze, report


@dataclass
class Analyze(BaseNode[ResolveState, None, Outcome]):
    """Gather descriptions, flags and the interdiff for state.pair."""

    async def run(self, ctx: GraphRunContext[ResolveState]) -> "Decide":
        state = ctx.state
        if state.pair is None:
            raise ValueError("No divergent pair to analyze")

        state.console.show("\nChecking for conflicts and merge commits...")
        state.assessment = analyze(state.repository, state.pair, state.mode)
        report(state.console, state.pair, state.assessment)

        from jjreconcile.workflow.nodes.decide import Decide
        return Decide()
