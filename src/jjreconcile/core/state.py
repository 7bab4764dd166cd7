"""Runtime state carried through the resolution workflow."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from jjreconcile.core.base import BaseState
from jjreconcile.core.config import RunMode
from jjreconcile.core.console import Console
from jjreconcile.core.model import Assessment, DivergentPair


class ResolveState(BaseState):
    """State of one resolver run (mutates during execution).

    `pair` and `assessment` describe the current pass only and are
    cleared every time divergence detection runs again.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mode: RunMode = Field(
        default_factory=RunMode,
        description="Run mode fixed at startup",
    )
    repository: Any = Field(
        description="Repository implementation (JJRepository or a fake)",
    )
    console: Console = Field(
        default_factory=Console,
        description="Operator-facing terminal I/O",
    )
    pair: DivergentPair | None = Field(
        default=None,
        description="Revisions the current pass works on",
    )
    assessment: Assessment | None = Field(
        default=None,
        description="Analysis of the current pair",
    )
    detections: int = Field(
        default=0,
        description="Number of times divergence detection has run",
    )
    applied: list[str] = Field(
        default_factory=list,
        description="Mutating actions applied so far, in order",
    )
    status: str = Field(
        default="pending",
        description="Run status: pending, running, resolved, aborted",
    )

    def discard_pass(self) -> None:
        """Forget everything learned about the previous pair."""
        self.pair = None
        self.assessment = None
