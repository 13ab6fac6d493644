"""Conversion between GraphModel and NetworkX graphs."""

import logging

import networkx as nx

from flowsketch.models.graph_model import GraphEdge, GraphModel, GraphNode

logger = logging.getLogger(__name__)


class GraphModelConverter:
    """Converts GraphModels to and from NetworkX multigraphs.

    Node insertion order follows ``model.nodes`` and edges are keyed by their
    GraphEdge id, so iteration over the resulting graph is deterministic.
    """

    def to_networkx(self, model: GraphModel) -> nx.MultiDiGraph:
        """Convert a GraphModel to a NetworkX MultiDiGraph.

        Args:
            model: Validated graph model

        Returns:
            MultiDiGraph with ``label``/``type``/``index`` node attributes
            (plus ``metadata`` when set) and ``id``/``label`` edge attributes
        """
        graph = nx.MultiDiGraph()

        for index, node in enumerate(model.nodes):
            attrs = {"label": node.label, "type": node.type.value, "index": index}
            if node.metadata is not None:
                attrs["metadata"] = node.metadata
            graph.add_node(node.id, **attrs)

        for index, edge in enumerate(model.edges):
            if edge.source not in graph or edge.target not in graph:
                logger.warning(
                    f"Edge {edge.id} references unknown node "
                    f"({edge.source} -> {edge.target}), skipping"
                )
                continue
            graph.add_edge(
                edge.source,
                edge.target,
                key=edge.id,
                id=edge.id,
                label=edge.label,
                index=index,
            )

        logger.debug(
            f"Converted graph model: {graph.number_of_nodes()} nodes, "
            f"{graph.number_of_edges()} edges"
        )
        return graph

    def from_networkx(self, graph: nx.MultiDiGraph) -> GraphModel:
        """Rebuild a GraphModel from a graph produced by ``to_networkx``.

        Args:
            graph: MultiDiGraph with the attributes written by to_networkx

        Returns:
            GraphModel with nodes and edges in their original order
        """
        nodes = [
            GraphNode(
                id=node_id,
                label=attrs.get("label", str(node_id)),
                type=attrs.get("type", "default"),
                metadata=attrs.get("metadata"),
            )
            for node_id, attrs in sorted(graph.nodes(data=True), key=lambda item: item[1].get("index", 0))
        ]
        edge_rows = sorted(graph.edges(keys=True, data=True), key=lambda item: item[3].get("index", 0))
        edges = [
            GraphEdge(id=attrs.get("id", key), source=u, target=v, label=attrs.get("label"))
            for u, v, key, attrs in edge_rows
        ]
        return GraphModel(nodes=nodes, edges=edges)


def to_networkx(model: GraphModel) -> nx.MultiDiGraph:
    """Module-level shortcut for ``GraphModelConverter().to_networkx``."""
    return GraphModelConverter().to_networkx(model)


__all__ = [
    "GraphModelConverter",
    "to_networkx",
]
