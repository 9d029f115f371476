from collections import Counter

import pytest

from linecover.graph import Edge, Graph, Vertex
from linecover.slc_ilp import SlcIlpSolver


def _vertices(*ids):
    return [Vertex(vid, float(vid), 0.0) for vid in ids]


def _req(t, h, sc=1.0, scr=1.0, dc=1.0, dcr=1.0):
    return Edge(t, h, True, sc, scr, dc, dcr)


def _triangle():
    return Graph(_vertices(1, 2, 3), [_req(1, 2), _req(2, 3), _req(3, 1)])


def _balanced(graph):
    out_deg = Counter(e.tail_id for e in (*graph.required_edges, *graph.non_required_edges))
    in_deg = Counter(e.head_id for e in (*graph.required_edges, *graph.non_required_edges))
    return all(out_deg[v.id] == in_deg[v.id] for v in graph.vertices)


def test_single_edge_needs_deadhead_back():
    solver = SlcIlpSolver(Graph(_vertices(1, 2), [_req(1, 2)]))
    assert solver.solve() == pytest.approx(2.0)
    sol = solver.solution_graph()
    assert sol.m == 1
    assert sol.m_nr == 1


def test_triangle_served_without_deadheading():
    solver = SlcIlpSolver(_triangle())
    cost = solver.solve()
    sol = solver.solution_graph()
    assert sol.m == 3
    assert sol.m_nr == 0
    assert sum(e.cost for e in sol.required_edges) == pytest.approx(cost)


def test_cheaper_direction_is_chosen():
    graph = Graph(_vertices(1, 2), [_req(1, 2, sc=1.0, scr=5.0, dc=2.0, dcr=2.0)])
    solver = SlcIlpSolver(graph)
    solver.solve()
    sol = solver.solution_graph()
    assert [(e.tail_id, e.head_id) for e in sol.required_edges] == [(1, 2)]
    assert [(e.tail_id, e.head_id) for e in sol.non_required_edges] == [(2, 1)]


def test_solution_is_balanced_and_cost_matches():
    solver = SlcIlpSolver(_triangle())
    cost = solver.solve()
    sol = solver.solution_graph()
    assert _balanced(sol)
    total = sum(e.cost for e in (*sol.required_edges, *sol.non_required_edges))
    assert total == pytest.approx(cost)


def test_disconnected_components_joined_by_non_required_edge():
    edges = [_req(1, 2), _req(3, 4), Edge(2, 3, False, deadhead_cost=1.0, deadhead_cost_rev=1.0)]
    solver = SlcIlpSolver(Graph(_vertices(1, 2, 3, 4), edges))
    solver.solve()
    sol = solver.solution_graph()
    assert sol.m == 2
    used = {frozenset((e.tail_id, e.head_id)) for e in sol.non_required_edges}
    assert frozenset((2, 3)) in used
    assert _balanced(sol)


def test_depot_flow_equals_required_edge_count():
    graph = _triangle()
    solver = SlcIlpSolver(graph)
    solver.solve()
    depot_id = graph.vertices[solver.depot_index].id
    leaving = sum(
        (f.forward if f.tail_id == depot_id else 0) + (f.backward if f.head_id == depot_id else 0)
        for f in solver.flow_values()
    )
    assert leaving == graph.m
    assert len(solver.flow_values()) == graph.m + graph.m_nr


def test_depot_is_tail_of_first_required_edge():
    graph = Graph(_vertices(5, 7), [_req(7, 5)])
    solver = SlcIlpSolver(graph)
    solver.solve()
    assert solver.depot_index == graph.vertex_index(7)


def test_no_required_edges_raises():
    with pytest.raises(ValueError):
        SlcIlpSolver(Graph(_vertices(1, 2))).solve()


def test_solution_before_solve_raises():
    solver = SlcIlpSolver(_triangle())
    with pytest.raises(RuntimeError):
        solver.solution_graph()
    with pytest.raises(RuntimeError):
        solver.flow_values()


def test_variable_and_constraint_counts():
    edges = [_req(1, 2), Edge(2, 3, False)]
    solver = SlcIlpSolver(Graph(_vertices(1, 2, 3), edges))
    assert solver.num_variables == 2 * 1 + 2 * 2 + 2 * 2
    assert solver.num_constraints == 3 + 1 + 3 + 1 + 2 * 1 + 2 * 1