from itertools import combinations

import pytest

from linecover.graph import Edge, Graph, Vertex
from linecover.graph_utilities import (
    EdgeCostModel,
    add_complete_non_required_edges,
    add_reduced_complete_non_required_edges,
    compute_all_edge_costs,
)


class _IdCostModel(EdgeCostModel):
    def service_cost(self, edge):
        return float(edge.tail_id), float(edge.head_id)

    def deadhead_cost(self, edge):
        return float(edge.tail_id + edge.head_id), float(edge.head_id * 10)


class _FailingModel(EdgeCostModel):
    def service_cost(self, edge):
        raise RuntimeError("cannot compute")

    def deadhead_cost(self, edge):
        raise RuntimeError("cannot compute")


def _graph(required=()):
    vertices = [Vertex(vid, float(vid), 0.0) for vid in (10, 20, 30, 40)]
    return Graph(vertices, [Edge(t, h, True) for t, h in required])


def _nr_pairs(g):
    return sorted(tuple(sorted((e.tail_id, e.head_id))) for e in g.non_required_edges)


def test_abstract_model_cannot_be_instantiated():
    with pytest.raises(TypeError):
        EdgeCostModel()


def test_complete_edges_cover_every_pair_once():
    g = _graph()
    add_complete_non_required_edges(g)
    ids = [v.id for v in g.vertices]
    assert _nr_pairs(g) == sorted(combinations(ids, 2))
    assert all(not e.required for e in g.non_required_edges)
    assert g.m == 0


def test_complete_edges_have_zero_cost():
    g = _graph()
    add_complete_non_required_edges(g)
    assert all(e.deadhead_cost == 0 and e.deadhead_cost_rev == 0 for e in g.non_required_edges)


def test_reduced_complete_skips_required_pairs_in_both_directions():
    g = _graph(required=[(10, 20), (40, 30)])
    add_reduced_complete_non_required_edges(g)
    ids = [v.id for v in g.vertices]
    expected = [p for p in combinations(ids, 2) if p not in {(10, 20), (30, 40)}]
    assert _nr_pairs(g) == sorted(expected)
    assert g.m == 2


def test_reduced_complete_updates_adjacency():
    g = _graph(required=[(10, 20)])
    add_reduced_complete_non_required_edges(g)
    total = sum(len(v.adjacent) for v in g.vertices)
    assert total == g.m + g.m_nr


def test_compute_all_edge_costs_sets_required_and_non_required():
    g = Graph(
        [Vertex(1), Vertex(2), Vertex(3)],
        [Edge(1, 2, True), Edge(2, 3, False)],
    )
    compute_all_edge_costs(g, _IdCostModel())
    req = g.required_edges[0]
    assert (req.service_cost, req.service_cost_rev) == (1.0, 2.0)
    assert (req.deadhead_cost, req.deadhead_cost_rev) == (3.0, 20.0)
    nreq = g.non_required_edges[0]
    assert (nreq.deadhead_cost, nreq.deadhead_cost_rev) == (5.0, 30.0)
    assert (nreq.service_cost, nreq.service_cost_rev) == (0.0, 0.0)


def test_compute_all_edge_costs_propagates_errors():
    g = _graph(required=[(10, 20)])
    with pytest.raises(RuntimeError):
        compute_all_edge_costs(g, _FailingModel())