"""Graph utilities: completing graphs with non-required edges and assigning edge costs."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from itertools import combinations

from linecover.graph import Edge, Graph


class EdgeCostModel(ABC):
    """Computes directed service and deadhead costs for an edge."""

    @abstractmethod
    def service_cost(self, edge: Edge) -> tuple[float, float]:
        """Return the service cost along the edge and in reverse."""

    @abstractmethod
    def deadhead_cost(self, edge: Edge) -> tuple[float, float]:
        """Return the deadhead cost along the edge and in reverse."""


def add_complete_non_required_edges(graph: Graph) -> None:
    """Add a zero-cost non-required edge between every pair of vertices."""
    ids = [v.id for v in graph.vertices]
    graph.add_edges(Edge(a, b, False) for a, b in combinations(ids, 2))


def add_reduced_complete_non_required_edges(graph: Graph) -> None:
    """Add non-required edges between every pair not already joined by a required edge."""
    joined = {
        frozenset(graph.edge_vertex_indices(k, True)) for k in range(graph.m)
    }
    graph.add_edges(
        Edge(graph.vertices[i].id, graph.vertices[j].id, False)
        for i, j in combinations(range(graph.n), 2)
        if frozenset((i, j)) not in joined
    )


def compute_all_edge_costs(graph: Graph, cost_model: EdgeCostModel) -> None:
    """Assign costs from the model to all edges; errors from the model propagate."""
    for e in graph.required_edges:
        e.service_cost, e.service_cost_rev = cost_model.service_cost(dataclasses.replace(e))
        e.deadhead_cost, e.deadhead_cost_rev = cost_model.deadhead_cost(dataclasses.replace(e))
    for e in graph.non_required_edges:
        e.deadhead_cost, e.deadhead_cost_rev = cost_model.deadhead_cost(dataclasses.replace(e))