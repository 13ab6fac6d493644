"""Built-in sample diagrams.

Used as fixtures and for exercising a drawing surface without a language
model in the loop.
"""

from typing import Dict, Optional

from flowsketch.models.graph_model import GraphEdge, GraphModel, GraphNode


def _node(node_id: str, label: str, node_type: str) -> GraphNode:
    return GraphNode(id=node_id, label=label, type=node_type)


def _edge(edge_id: str, source: str, target: str, label: Optional[str] = None) -> GraphEdge:
    return GraphEdge(id=edge_id, source=source, target=target, label=label)


FLOWCHART = GraphModel(
    nodes=[
        _node("1", "Start", "start"),
        _node("2", "Process Data", "process"),
        _node("3", "Is Valid?", "decision"),
        _node("4", "Save", "process"),
        _node("5", "Error", "end"),
        _node("6", "Success", "end"),
    ],
    edges=[
        _edge("e1", "1", "2"),
        _edge("e2", "2", "3"),
        _edge("e3", "3", "4", "Yes"),
        _edge("e4", "3", "5", "No"),
        _edge("e5", "4", "6"),
    ],
)

LINEAR_PROCESS = GraphModel(
    nodes=[
        _node("1", "Step 1", "start"),
        _node("2", "Step 2", "process"),
        _node("3", "Step 3", "process"),
        _node("4", "Step 4", "end"),
    ],
    edges=[
        _edge("e1", "1", "2"),
        _edge("e2", "2", "3"),
        _edge("e3", "3", "4"),
    ],
)

COMPLEX_DIAGRAM = GraphModel(
    nodes=[
        _node("1", "User Input", "start"),
        _node("2", "Validate", "process"),
        _node("3", "Valid?", "decision"),
        _node("4", "Parse Data", "process"),
        _node("5", "Transform", "process"),
        _node("6", "Check Type", "decision"),
        _node("7", "Type A Handler", "process"),
        _node("8", "Type B Handler", "process"),
        _node("9", "Type C Handler", "process"),
        _node("10", "Store Result", "data"),
        _node("11", "Success", "end"),
        _node("12", "Error", "end"),
    ],
    edges=[
        _edge("e1", "1", "2"),
        _edge("e2", "2", "3"),
        _edge("e3", "3", "4", "Yes"),
        _edge("e4", "3", "12", "No"),
        _edge("e5", "4", "5"),
        _edge("e6", "5", "6"),
        _edge("e7", "6", "7", "Type A"),
        _edge("e8", "6", "8", "Type B"),
        _edge("e9", "6", "9", "Type C"),
        _edge("e10", "7", "10"),
        _edge("e11", "8", "10"),
        _edge("e12", "9", "10"),
        _edge("e13", "10", "11"),
    ],
)

SAMPLE_DIAGRAMS: Dict[str, GraphModel] = {
    "flowchart": FLOWCHART,
    "linear": LINEAR_PROCESS,
    "complex": COMPLEX_DIAGRAM,
}


def get_sample_diagram(name: str) -> GraphModel:
    """Look up a sample diagram by name.

    Raises:
        KeyError: If no sample has that name
    """
    if name not in SAMPLE_DIAGRAMS:
        available = ", ".join(SAMPLE_DIAGRAMS)
        raise KeyError(f"Unknown sample diagram: '{name}'. Available: {available}")
    return SAMPLE_DIAGRAMS[name]
