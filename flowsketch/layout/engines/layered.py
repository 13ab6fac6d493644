"""Layered (Sugiyama-style) layout engine.

Phases, run independently per weakly connected component:
  1. Cycle breaking   (depth-first search, back-edges ignored for ranking)
  2. Rank assignment  (longest path from sources)
  3. Ordering         (virtual nodes on long edges, barycenter sweeps)
  4. Coordinates      (ranks centred on the widest rank, uniform boxes)

Components are then packed side by side across the rank axis. Every step
iterates in input order, so identical input always yields identical output.
The engine works in node-centre coordinates internally and converts to a
top-left origin only when building PositionedNodes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Set, Tuple

import networkx as nx

from flowsketch.converters.graph_converter import GraphModelConverter
from flowsketch.layout.engines.base import LayoutEngine
from flowsketch.models.graph_model import GraphModel
from flowsketch.models.layout_metadata import (
    LayoutOptions,
    LayoutResult,
    PositionedNode,
)

logger = logging.getLogger(__name__)

# (source, target, key) as yielded by MultiDiGraph.edges(keys=True)
EdgeKey = Tuple[str, str, str]


@dataclass(frozen=True)
class VirtualNode:
    """Placeholder for a long edge crossing an intermediate rank."""

    edge_key: str
    step: int


@dataclass
class ComponentLayout:
    """Layout of one weakly connected component, in component-local space.

    Attributes:
        ranks: node id -> rank
        ordering: one list per rank, real and virtual nodes in final order
        perpendicular: node id -> centre along the perpendicular axis
        span: extent of the widest rank along the perpendicular axis
    """

    ranks: Dict[str, int]
    ordering: List[List[Hashable]]
    perpendicular: Dict[str, float] = field(default_factory=dict)
    span: float = 0.0

    @property
    def rank_count(self) -> int:
        return len(self.ordering)


def _out_edges(graph: nx.MultiDiGraph, node: str) -> List[Tuple[str, str, str]]:
    edges = graph.out_edges(node, keys=True, data="index")
    return [(u, v, k) for u, v, k, _ in sorted(edges, key=lambda e: e[3])]


def find_back_edges(graph: nx.MultiDiGraph, node_order: List[str]) -> Set[EdgeKey]:
    """Classify edges with an iterative depth-first search.

    Roots are visited sources-first, then in ``node_order``; successors in
    edge input order. An edge pointing at a node still on the DFS stack
    (including a self-loop) closes a cycle and is returned.

    Args:
        graph: MultiDiGraph from GraphModelConverter
        node_order: Nodes in input order

    Returns:
        Set of (source, target, key) back-edges
    """
    back_edges: Set[EdgeKey] = set()
    visited: Set[str] = set()
    on_stack: Set[str] = set()

    sources = [n for n in node_order if graph.in_degree(n) == 0]
    source_set = set(sources)
    roots = sources + [n for n in node_order if n not in source_set]

    for root in roots:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        stack = [(root, iter(_out_edges(graph, root)))]

        while stack:
            node, edges = stack[-1]
            descended = False
            for u, v, key in edges:
                if v in on_stack:
                    back_edges.add((u, v, key))
                elif v not in visited:
                    visited.add(v)
                    on_stack.add(v)
                    stack.append((v, iter(_out_edges(graph, v))))
                    descended = True
                    break
            if not descended:
                stack.pop()
                on_stack.discard(node)

    return back_edges


def assign_ranks(
    graph: nx.MultiDiGraph,
    node_order: List[str],
    back_edges: Set[EdgeKey],
) -> Dict[str, int]:
    """Longest-path layering over the graph with back-edges removed.

    Args:
        graph: MultiDiGraph of one component (or the whole model)
        node_order: Nodes in input order
        back_edges: Edges to ignore, from find_back_edges

    Returns:
        node id -> rank, sources at rank 0
    """
    position = {node: i for i, node in enumerate(node_order)}
    dag = nx.DiGraph()
    dag.add_nodes_from(node_order)
    for u, v, key in graph.edges(keys=True):
        if u == v or (u, v, key) in back_edges:
            continue
        dag.add_edge(u, v)

    ranks: Dict[str, int] = {}
    for node in nx.lexicographical_topological_sort(dag, key=position.get):
        preds = [ranks[p] + 1 for p in dag.predecessors(node)]
        ranks[node] = max(preds) if preds else 0
    return ranks


def count_crossings(
    upper: List[Hashable],
    lower: List[Hashable],
    segments: List[Tuple[Hashable, Hashable]],
) -> int:
    """Count pairwise crossings of segments between two adjacent ranks."""
    upper_pos = {n: i for i, n in enumerate(upper)}
    lower_pos = {n: i for i, n in enumerate(lower)}
    coords = [(upper_pos[a], lower_pos[b]) for a, b in segments]

    crossings = 0
    for i in range(len(coords)):
        a1, b1 = coords[i]
        for j in range(i + 1, len(coords)):
            a2, b2 = coords[j]
            if (a1 - a2) * (b1 - b2) < 0:
                crossings += 1
    return crossings


class LayeredLayoutEngine(LayoutEngine):
    """Deterministic layered layout for flowchart-style diagrams.

    Example:
        engine = LayeredLayoutEngine()
        result = engine.layout(model, LayoutOptions(direction="LR"))
    """

    def __init__(self):
        self._converter = GraphModelConverter()

    @property
    def name(self) -> str:
        return "layered"

    @property
    def handles_cycles(self) -> bool:
        return True

    def layout(
        self,
        model: GraphModel,
        options: Optional[LayoutOptions] = None,
    ) -> LayoutResult:
        """Compute a layered layout.

        Args:
            model: Validated graph model
            options: Layout options (defaults used when None)

        Returns:
            LayoutResult with nodes in model order and the original edges
        """
        options = options or LayoutOptions()

        if model.is_empty:
            return LayoutResult(nodes=[], edges=list(model.edges), direction=options.direction)

        graph = self._converter.to_networkx(model)
        node_order = [node.id for node in model.nodes]
        position = {node_id: i for i, node_id in enumerate(node_order)}

        components = [
            sorted(component, key=position.get)
            for component in nx.weakly_connected_components(graph)
        ]
        components.sort(key=lambda members: position[members[0]])

        layouts = [
            self._layout_component(graph.subgraph(members), members, options)
            for members in components
        ]
        rank_count = max(c.rank_count for c in layouts)

        # Pack components along the perpendicular axis
        centres: Dict[str, Tuple[float, float]] = {}
        ranks: Dict[str, int] = {}
        cursor = 0.0
        for component in layouts:
            for node_id, perp in component.perpendicular.items():
                rank = component.ranks[node_id]
                ranks[node_id] = rank
                centres[node_id] = self._to_xy(
                    cursor + perp,
                    self._rank_centre(rank, rank_count, options),
                    options,
                )
            cursor += component.span + options.effective_component_spacing

        orders = self._global_orders(ranks, centres, options)

        positioned = [
            PositionedNode.from_center(
                node,
                centres[node.id],
                options.node_width,
                options.node_height,
                rank=ranks[node.id],
                order=orders[node.id],
            )
            for node in model.nodes
        ]

        logger.debug(
            f"Layered layout: {len(positioned)} nodes, {len(components)} component(s), "
            f"{rank_count} rank(s), direction={options.direction.value}"
        )

        return LayoutResult(
            nodes=positioned,
            edges=list(model.edges),
            direction=options.direction,
            rank_count=rank_count,
        )

    def _layout_component(
        self,
        graph: nx.MultiDiGraph,
        members: List[str],
        options: LayoutOptions,
    ) -> ComponentLayout:
        back_edges = find_back_edges(graph, members)
        if back_edges:
            logger.debug(f"Ignoring {len(back_edges)} back-edge(s) for ranking")
        ranks = assign_ranks(graph, members, back_edges)

        ordering, segments = self._build_ranks(graph, members, ranks, back_edges)
        ordering = self._reduce_crossings(ordering, segments, options.ordering_passes)

        component = ComponentLayout(ranks=ranks, ordering=ordering)
        self._assign_perpendicular(component, options)
        return component

    def _build_ranks(
        self,
        graph: nx.MultiDiGraph,
        members: List[str],
        ranks: Dict[str, int],
        back_edges: Set[EdgeKey],
    ) -> Tuple[List[List[Hashable]], List[List[Tuple[Hashable, Hashable]]]]:
        """Insert virtual nodes and build the initial per-rank order.

        Returns:
            (ordering, segments) where segments[r] holds the (upper, lower)
            pairs connecting rank r to rank r + 1
        """
        rank_count = max(ranks.values()) + 1
        sort_key: Dict[Hashable, Tuple[int, int]] = {
            node: (i, 0) for i, node in enumerate(members)
        }
        layer_of: Dict[Hashable, int] = dict(ranks)
        segments: List[List[Tuple[Hashable, Hashable]]] = [[] for _ in range(rank_count)]

        edges = sorted(graph.edges(keys=True, data="index"), key=lambda e: e[3])
        for u, v, key, index in edges:
            if u == v or (u, v, key) in back_edges:
                continue
            previous: Hashable = u
            for step in range(1, ranks[v] - ranks[u]):
                virtual = VirtualNode(edge_key=key, step=step)
                layer_of[virtual] = ranks[u] + step
                sort_key[virtual] = (len(members) + index, step)
                segments[layer_of[previous]].append((previous, virtual))
                previous = virtual
            segments[layer_of[previous]].append((previous, v))

        # Initial order: rank 0 by input order, later ranks by leftmost parent
        ordering: List[List[Hashable]] = [[] for _ in range(rank_count)]
        for node, layer in layer_of.items():
            ordering[layer].append(node)
        ordering[0].sort(key=sort_key.get)
        for layer in range(1, rank_count):
            upper_pos = {n: i for i, n in enumerate(ordering[layer - 1])}
            first_parent: Dict[Hashable, int] = {}
            for a, b in segments[layer - 1]:
                first_parent[b] = min(first_parent.get(b, upper_pos[a]), upper_pos[a])
            ordering[layer].sort(
                key=lambda n: (first_parent.get(n, len(upper_pos)), sort_key[n])
            )

        return ordering, segments

    def _reduce_crossings(
        self,
        ordering: List[List[Hashable]],
        segments: List[List[Tuple[Hashable, Hashable]]],
        passes: int,
    ) -> List[List[Hashable]]:
        """Alternate down/up barycenter sweeps, keeping the best ordering."""
        best = [list(layer) for layer in ordering]
        best_crossings = self._total_crossings(best, segments)
        current = [list(layer) for layer in ordering]

        for sweep in range(passes):
            if best_crossings == 0:
                break
            if sweep % 2 == 0:
                for layer in range(1, len(current)):
                    neighbours = [(b, a) for a, b in segments[layer - 1]]
                    current[layer] = self._barycenter_sort(
                        current[layer], current[layer - 1], neighbours
                    )
            else:
                for layer in range(len(current) - 2, -1, -1):
                    current[layer] = self._barycenter_sort(
                        current[layer], current[layer + 1], segments[layer]
                    )

            crossings = self._total_crossings(current, segments)
            if crossings < best_crossings:
                best = [list(layer) for layer in current]
                best_crossings = crossings

        return best

    @staticmethod
    def _barycenter_sort(
        movable: List[Hashable],
        fixed: List[Hashable],
        links: List[Tuple[Hashable, Hashable]],
    ) -> List[Hashable]:
        """Sort ``movable`` by the mean position of linked nodes in ``fixed``.

        ``links`` are (movable, fixed) pairs. Nodes without links keep their
        current index as barycenter; ties keep current order.
        """
        fixed_pos = {n: i for i, n in enumerate(fixed)}
        totals: Dict[Hashable, List[int]] = {}
        for m, f in links:
            totals.setdefault(m, []).append(fixed_pos[f])

        def barycenter(item: Tuple[int, Hashable]) -> Tuple[float, int]:
            index, node = item
            linked = totals.get(node)
            if not linked:
                return (float(index), index)
            return (sum(linked) / len(linked), index)

        return [node for _, node in sorted(enumerate(movable), key=barycenter)]

    @staticmethod
    def _total_crossings(
        ordering: List[List[Hashable]],
        segments: List[List[Tuple[Hashable, Hashable]]],
    ) -> int:
        return sum(
            count_crossings(ordering[layer], ordering[layer + 1], segments[layer])
            for layer in range(len(ordering) - 1)
        )

    @staticmethod
    def _assign_perpendicular(component: ComponentLayout, options: LayoutOptions) -> None:
        """Centre every rank's real nodes on the component's widest rank."""
        extent = options.perpendicular_extent
        pitch = extent + options.node_spacing

        rows = [[n for n in layer if not isinstance(n, VirtualNode)] for layer in component.ordering]
        widths = [len(row) * extent + max(len(row) - 1, 0) * options.node_spacing for row in rows]
        component.span = max(widths)

        for row, width in zip(rows, widths):
            offset = (component.span - width) / 2
            for i, node in enumerate(row):
                component.perpendicular[node] = offset + i * pitch + extent / 2

    @staticmethod
    def _rank_centre(rank: int, rank_count: int, options: LayoutOptions) -> float:
        if options.direction.is_reversed:
            rank = rank_count - 1 - rank
        extent = options.rank_extent
        return rank * (extent + options.rank_spacing) + extent / 2

    @staticmethod
    def _to_xy(perp: float, along: float, options: LayoutOptions) -> Tuple[float, float]:
        if options.direction.is_vertical:
            return (perp, along)
        return (along, perp)

    @staticmethod
    def _global_orders(
        ranks: Dict[str, int],
        centres: Dict[str, Tuple[float, float]],
        options: LayoutOptions,
    ) -> Dict[str, int]:
        """Number nodes within each rank across all components."""
        axis = 0 if options.direction.is_vertical else 1
        by_rank: Dict[int, List[str]] = {}
        for node_id, rank in ranks.items():
            by_rank.setdefault(rank, []).append(node_id)

        orders: Dict[str, int] = {}
        for members in by_rank.values():
            for i, node_id in enumerate(sorted(members, key=lambda n: centres[n][axis])):
                orders[node_id] = i
        return orders


def layout(model: GraphModel, options: Optional[LayoutOptions] = None) -> LayoutResult:
    """Lay out ``model`` with the layered engine."""
    return LayeredLayoutEngine().layout(model, options)


__all__ = [
    "LayeredLayoutEngine",
    "VirtualNode",
    "ComponentLayout",
    "find_back_edges",
    "assign_ranks",
    "count_crossings",
    "layout",
]
