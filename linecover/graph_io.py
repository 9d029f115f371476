"""Reading and writing graphs as whitespace-separated text files."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, Sequence, TextIO

from linecover.graph import Edge, Graph, Vertex

PathLike = str | Path


def _records(stream: TextIO, converters: Sequence[Callable[[str], object]]) -> Iterator[tuple]:
    """Yield fixed-width records of converted tokens.

    Reading stops at the first token that cannot be converted or at an
    incomplete trailing record, as formatted stream extraction does.
    """
    tokens = stream.read().split()
    width = len(converters)
    for start in range(0, len(tokens) - width + 1, width):
        chunk = tokens[start:start + width]
        try:
            yield tuple(convert(token) for convert, token in zip(converters, chunk))
        except ValueError:
            return


def _fmt(value: float) -> str:
    return format(value, ".16g")


def parse_vertices(stream: TextIO, with_lla: bool = False) -> list[Vertex]:
    """Parse vertex records ``id x y`` or ``id x y lat lng alt``."""
    if with_lla:
        return [
            Vertex(vid, x, y, lat, lng, alt)
            for vid, x, y, lat, lng, alt in _records(stream, (int, float, float, float, float, float))
        ]
    return [Vertex(vid, x, y) for vid, x, y in _records(stream, (int, float, float))]


def parse_required_edges(stream: TextIO, with_cost: bool = False) -> list[Edge]:
    """Parse required edges ``t h`` or ``t h service service_rev deadhead deadhead_rev``."""
    if with_cost:
        return [
            Edge(t, h, True, sc, scr, dc, dcr)
            for t, h, sc, scr, dc, dcr in _records(stream, (int, int, float, float, float, float))
        ]
    return [Edge(t, h, True) for t, h in _records(stream, (int, int))]


def parse_non_required_edges(stream: TextIO, with_cost: bool = False) -> list[Edge]:
    """Parse non-required edges ``t h`` or ``t h deadhead deadhead_rev``."""
    if with_cost:
        return [
            Edge(t, h, False, deadhead_cost=dc, deadhead_cost_rev=dcr)
            for t, h, dc, dcr in _records(stream, (int, int, float, float))
        ]
    return [Edge(t, h, False) for t, h in _records(stream, (int, int))]


def graph_from_streams(
    vertex_stream: TextIO,
    edge_stream: TextIO,
    non_required_stream: TextIO | None = None,
    with_lla: bool = False,
    with_cost: bool = False,
    filter_vertices: bool = False,
) -> Graph:
    """Build a graph from vertex, required-edge and optional non-required-edge streams.

    With ``filter_vertices`` only vertices that are an endpoint of some edge are kept.
    """
    vertices = parse_vertices(vertex_stream, with_lla)
    edges = parse_required_edges(edge_stream, with_cost)
    m = len(edges)
    m_nr = 0
    if non_required_stream is not None:
        non_required = parse_non_required_edges(non_required_stream, with_cost)
        m_nr = len(non_required)
        edges.extend(non_required)
    if filter_vertices:
        used = {e.tail_id for e in edges} | {e.head_id for e in edges}
        vertices = [v for v in vertices if v.id in used]
    return Graph(vertices, edges, m, m_nr)


def create_graph(
    vertex_path: PathLike,
    edge_path: PathLike,
    non_required_path: PathLike | None = None,
    with_lla: bool = False,
    with_cost: bool = False,
    filter_vertices: bool = False,
) -> Graph:
    """Build a graph from files; raise OSError if a file cannot be opened."""
    with open(vertex_path, encoding="utf-8") as vertex_file, open(edge_path, encoding="utf-8") as edge_file:
        if non_required_path is None:
            return graph_from_streams(vertex_file, edge_file, None, with_lla, with_cost, filter_vertices)
        with open(non_required_path, encoding="utf-8") as nr_file:
            return graph_from_streams(vertex_file, edge_file, nr_file, with_lla, with_cost, filter_vertices)


def write_nodes(graph: Graph, path: PathLike, with_lla: bool = False) -> None:
    """Write one line per vertex: ``id x y`` and, optionally, ``lat lng alt``."""
    with open(path, "w", encoding="utf-8") as out:
        for v in graph.vertices:
            fields = [str(v.id), _fmt(v.x), _fmt(v.y)]
            if with_lla:
                fields += [_fmt(value) for value in v.lla]
            out.write(" ".join(fields) + "\n")


def write_required_edges(graph: Graph, path: PathLike) -> None:
    """Write required edges with their service and deadhead costs."""
    with open(path, "w", encoding="utf-8") as out:
        for e in graph.required_edges:
            costs = (e.service_cost, e.service_cost_rev, e.deadhead_cost, e.deadhead_cost_rev)
            out.write(" ".join([str(e.tail_id), str(e.head_id), *map(_fmt, costs)]) + "\n")


def write_non_required_edges(graph: Graph, path: PathLike) -> None:
    """Write non-required edges with their deadhead costs."""
    with open(path, "w", encoding="utf-8") as out:
        for e in graph.non_required_edges:
            costs = (e.deadhead_cost, e.deadhead_cost_rev)
            out.write(" ".join([str(e.tail_id), str(e.head_id), *map(_fmt, costs)]) + "\n")


def parse_depots(path: PathLike) -> list[int]:
    """Read depot vertex IDs from a file, stopping at the first non-integer token."""
    with open(path, encoding="utf-8") as in_file:
        return [depot for (depot,) in _records(in_file, (int,))]