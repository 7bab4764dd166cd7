"""Workflow nodes for the resolution state machine."""

from jjreconcile.workflow.nodes.analyze import Analyze
from jjreconcile.workflow.nodes.apply import Apply
from jjreconcile.workflow.nodes.decide import Decide
from jjreconcile.workflow.nodes.detect import Detect
from jjreconcile.workflow.nodes.select import Select

__all__ = [
    "Detect",
    "Select",
    "Analyze",
    "Decide",
    "Apply",
]
