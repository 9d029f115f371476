import io

import pytest

from linecover.graph import Edge, Graph, Vertex
from linecover.graph_io import (
    create_graph,
    graph_from_streams,
    parse_depots,
    parse_non_required_edges,
    parse_required_edges,
    parse_vertices,
    write_non_required_edges,
    write_nodes,
    write_required_edges,
)


def _sample_graph():
    vertices = [
        Vertex(1, 0.5, 1.25, 35.1, -80.2, 200.0),
        Vertex(2, 10.0, 3.0, 35.2, -80.3, 210.0),
        Vertex(3, 7.125, 9.5, 35.3, -80.4, 220.0),
    ]
    edges = [
        Edge(1, 2, True, 1.5, 2.5, 3.5, 4.5),
        Edge(2, 3, True, 5.0, 6.0, 7.0, 8.0),
        Edge(1, 3, False, deadhead_cost=9.25, deadhead_cost_rev=10.75),
    ]
    return Graph(vertices, edges, 2, 1)


def test_parse_vertices_without_lla():
    vertices = parse_vertices(io.StringIO("1 0.5 2.5\n2 3 4\n"))
    assert [(v.id, v.x, v.y) for v in vertices] == [(1, 0.5, 2.5), (2, 3.0, 4.0)]


def test_parse_vertices_with_lla():
    vertices = parse_vertices(io.StringIO("7 1 2 35.5 -80.25 100\n"), with_lla=True)
    assert vertices[0].id == 7
    assert vertices[0].lla == (35.5, -80.25, 100.0)


def test_parse_vertices_stops_at_bad_token():
    vertices = parse_vertices(io.StringIO("1 0 0\nx 1 1\n2 2 2\n"))
    assert [v.id for v in vertices] == [1]


def test_parse_vertices_ignores_incomplete_record():
    vertices = parse_vertices(io.StringIO("1 0 0\n2 5\n"))
    assert [v.id for v in vertices] == [1]


def test_parse_required_edges_with_cost():
    edges = parse_required_edges(io.StringIO("1 2 1.5 2.5 3.5 4.5\n"), with_cost=True)
    e = edges[0]
    assert (e.tail_id, e.head_id, e.required) == (1, 2, True)
    assert (e.service_cost, e.service_cost_rev, e.deadhead_cost, e.deadhead_cost_rev) == (1.5, 2.5, 3.5, 4.5)


def test_parse_required_edges_without_cost():
    edges = parse_required_edges(io.StringIO("1 2\n2 3\n"))
    assert [(e.tail_id, e.head_id) for e in edges] == [(1, 2), (2, 3)]
    assert all(e.required for e in edges)


def test_parse_non_required_edges_with_cost():
    edges = parse_non_required_edges(io.StringIO("3 4 6.5 7.5\n"), with_cost=True)
    e = edges[0]
    assert e.required is False
    assert (e.deadhead_cost, e.deadhead_cost_rev) == (6.5, 7.5)


def test_graph_from_streams_counts():
    g = graph_from_streams(
        io.StringIO("1 0 0\n2 1 0\n3 1 1\n"),
        io.StringIO("1 2\n2 3\n"),
        io.StringIO("3 1\n"),
    )
    assert (g.n, g.m, g.m_nr) == (3, 2, 1)


def test_graph_from_streams_filters_unused_vertices():
    g = graph_from_streams(
        io.StringIO("1 0 0\n2 1 0\n3 1 1\n"),
        io.StringIO("1 2\n"),
        filter_vertices=True,
    )
    assert [v.id for v in g.vertices] == [1, 2]


def test_graph_from_streams_unknown_vertex_raises():
    with pytest.raises(ValueError):
        graph_from_streams(io.StringIO("1 0 0\n"), io.StringIO("1 9\n"))


def test_create_graph_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        create_graph(tmp_path / "missing_nodes", tmp_path / "missing_edges")


def test_write_and_read_round_trip(tmp_path):
    g = _sample_graph()
    nodes, req, nreq = tmp_path / "nodes", tmp_path / "req", tmp_path / "nreq"
    write_nodes(g, nodes, with_lla=True)
    write_required_edges(g, req)
    write_non_required_edges(g, nreq)

    g2 = create_graph(nodes, req, nreq, with_lla=True, with_cost=True)
    assert [(v.id, v.x, v.y, v.lla) for v in g2.vertices] == [
        (v.id, v.x, v.y, v.lla) for v in g.vertices
    ]
    assert g2.required_edges == g.required_edges
    assert g2.non_required_edges == g.non_required_edges


def test_write_nodes_line_format(tmp_path):
    g = Graph([Vertex(4, 2.0, 0.5)])
    path = tmp_path / "nodes"
    write_nodes(g, path)
    assert path.read_text() == "4 2 0.5\n"


def test_write_nodes_without_lla_has_three_fields(tmp_path):
    g = _sample_graph()
    path = tmp_path / "nodes"
    write_nodes(g, path)
    lines = path.read_text().splitlines()
    assert len(lines) == g.n
    assert all(len(line.split()) == 3 for line in lines)


def test_parse_depots(tmp_path):
    path = tmp_path / "depots"
    path.write_text("5\n8\n13\nend 21\n")
    assert parse_depots(path) == [5, 8, 13]