"""Graph workflow definition."""

from pydantic_graph import Graph

from jjreconcile.core.log import logger
from jjreconcile.core.state import ResolveState


def create_workflow():
    """Create the resolution workflow graph.

    Detect -> [End | Select | Analyze]
    Select -> [End | Analyze]
    Analyze -> Decide -> [Apply | End]
    Apply -> [Detect (restart) | Decide (same pair) | End]

    Returns:
        Graph workflow with ResolveState as state_type
    """
    logger.debug("Building workflow graph")

    # Imported here so the graph can resolve the nodes' forward
    # references from this namespace
    from jjreconcile.workflow.nodes.analyze import Analyze
    from jjreconcile.workflow.nodes.apply import Apply
    from jjreconcile.workflow.nodes.decide import Decide
    from jjreconcile.workflow.nodes.detect import Detect
    from jjreconcile.workflow.nodes.select import Select

    workflow = Graph(
        nodes=(
            Detect,
            Select,
            Analyze,
            Decide,
            Apply,
        ),
        state_type=ResolveState,
    )

    return workflow
