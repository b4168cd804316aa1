"""Build and compile the LangGraph workflow."""

from typing import List

from langgraph.graph import END, StateGraph

from .sections import (
    TASK_NODES,
    aggregate_research,
    enabled_tasks,
    start_research,
    summarize_research,
)
from .state import ResearchState


def route_topics(state: ResearchState) -> List[str]:
    """Fan out to every task unit enabled for this request."""
    return enabled_tasks(state["input"]) or ["aggregate"]


def build_workflow():
    """Build and compile the LangGraph workflow.

    start -> (task units, one superstep) -> aggregate -> summarize -> END.
    Every unit edges into ``aggregate``, so it runs once after all of them
    settled, and ``summarize`` always sees the final accumulator.
    """
    workflow = StateGraph(ResearchState)

    workflow.add_node("start", start_research)
    for name, node in TASK_NODES.items():
        workflow.add_node(name, node)
    workflow.add_node("aggregate", aggregate_research)
    workflow.add_node("summarize", summarize_research)

    workflow.set_entry_point("start")
    workflow.add_conditional_edges("start", route_topics, [*TASK_NODES, "aggregate"])
    for name in TASK_NODES:
        workflow.add_edge(name, "aggregate")
    workflow.add_edge("aggregate", "summarize")
    workflow.add_edge("summarize", END)

    return workflow.compile()
