"""Divergence selection, pair analysis and the resolution engine."""

from jjreconcile.resolve.analyzer import analyze, report
from jjreconcile.resolve.engine import (
    ResolutionEngine,
    choose_automatic_action,
    parse_menu_choice,
    prompt_for_action,
)
from jjreconcile.resolve.selector import DivergenceSelector

__all__ = [
    "DivergenceSelector",
    "ResolutionEngine",
    "analyze",
    "choose_automatic_action",
    "parse_menu_choice",
    "prompt_for_action",
    "report",
]
