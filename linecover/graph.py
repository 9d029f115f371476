"""Graph model for line coverage problems: vertices, edges and the graph itself."""

from __future__ import annotations

import dataclasses
import logging
import sys
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple

logger = logging.getLogger(__name__)

_DBL_MAX = sys.float_info.max


class Point(NamedTuple):
    """A planar coordinate."""

    x: float
    y: float


class Limits(NamedTuple):
    """Bounding box of the vertices of a graph."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float


@dataclass
class Vertex:
    """A vertex with an identifier, planar coordinates and optional geodetic position."""

    id: int
    x: float = 0.0
    y: float = 0.0
    lat: float = 0.0
    lng: float = 0.0
    alt: float = 0.0
    adjacent: list[Edge] = field(default_factory=list, compare=False, repr=False)

    @property
    def xy(self) -> Point:
        return Point(self.x, self.y)

    @xy.setter
    def xy(self, value: tuple[float, float]) -> None:
        self.x, self.y = value

    @property
    def lla(self) -> tuple[float, float, float]:
        return (self.lat, self.lng, self.alt)

    @lla.setter
    def lla(self, value: tuple[float, float, float]) -> None:
        self.lat, self.lng, self.alt = value

    def detached(self) -> Vertex:
        """Return a copy without adjacency information."""
        return dataclasses.replace(self, adjacent=[])


@dataclass
class Edge:
    """A directed edge between two vertex IDs with service and deadhead costs."""

    tail_id: int
    head_id: int
    required: bool = True
    service_cost: float = 0.0
    service_cost_rev: float = 0.0
    deadhead_cost: float = 0.0
    deadhead_cost_rev: float = 0.0
    cost: float = 0.0

    def reverse(self) -> None:
        """Swap the direction of the edge in place, together with its directed costs."""
        self.tail_id, self.head_id = self.head_id, self.tail_id
        self.service_cost, self.service_cost_rev = self.service_cost_rev, self.service_cost
        self.deadhead_cost, self.deadhead_cost_rev = self.deadhead_cost_rev, self.deadhead_cost

    def reversed(self) -> Edge:
        """Return a reversed copy of the edge."""
        other = dataclasses.replace(self)
        other.reverse()
        return other


class Graph:
    """A graph holding required and non-required edges over a set of vertices."""

    def __init__(
        self,
        vertices: Iterable[Vertex],
        edges: Iterable[Edge] = (),
        m: int | None = None,
        m_nr: int | None = None,
    ) -> None:
        # m and m_nr are size hints only; edges are classified by their own flag.
        self.vertices: list[Vertex] = []
        self.required_edges: list[Edge] = []
        self.non_required_edges: list[Edge] = []
        self._vertex_map: dict[int, int] = {}
        self.capacity: float = 0.0
        self.depot: int | None = None
        self.depot_ids: list[int] = []

        for vertex in vertices:
            if vertex.id in self._vertex_map:
                logger.info("Repeated vertex ignored: %s", vertex.id)
                continue
            self._append_vertex(vertex.detached())

        self.add_edges(edges)

    # -- sizes -------------------------------------------------------------

    @property
    def n(self) -> int:
        return len(self.vertices)

    @property
    def m(self) -> int:
        return len(self.required_edges)

    @property
    def m_nr(self) -> int:
        return len(self.non_required_edges)

    def edges_of(self, required: bool = True) -> list[Edge]:
        """Return the required or the non-required edge list."""
        return self.required_edges if required else self.non_required_edges

    def edge(self, index: int, required: bool = True) -> Edge:
        return self.edges_of(required)[index]

    # -- copying -----------------------------------------------------------

    def copy(self) -> Graph:
        """Return an independent copy including depot and capacity settings."""
        g = Graph(self.vertices)
        g.required_edges = [dataclasses.replace(e) for e in self.required_edges]
        g.non_required_edges = [dataclasses.replace(e) for e in self.non_required_edges]
        g.generate_adjacency()
        g.capacity = self.capacity
        g.depot = self.depot
        g.depot_ids = list(self.depot_ids)
        return g

    # -- vertices ----------------------------------------------------------

    def _append_vertex(self, vertex: Vertex) -> None:
        self.vertices.append(vertex)
        self._vertex_map[vertex.id] = len(self.vertices) - 1

    def vertex_index(self, vertex_id: int) -> int:
        """Return the index of the vertex with the given ID; raise KeyError if absent."""
        try:
            return self._vertex_map[vertex_id]
        except KeyError:
            raise KeyError(f"no vertex with ID {vertex_id}") from None

    def vertex(self, vertex_id: int) -> Vertex:
        return self.vertices[self.vertex_index(vertex_id)]

    def has_vertex(self, vertex_id: int) -> bool:
        return vertex_id in self._vertex_map

    def add_vertex(self, vertex: Vertex) -> Vertex:
        """Append a vertex to the graph and return it."""
        self._append_vertex(vertex)
        return vertex

    # -- edges -------------------------------------------------------------

    def add_edge(self, tail_id: int, head_id: int, required: bool = True) -> Edge:
        """Add a new edge between two existing vertices."""
        self.vertex_index(tail_id)
        self.vertex_index(head_id)
        edge = Edge(tail_id, head_id, required)
        self.edges_of(required).append(edge)
        self.generate_adjacency()
        return edge

    def add_edges(self, edges: Iterable[Edge]) -> None:
        """Add copies of the given edges; raise ValueError if any endpoint is unknown."""
        new_edges = [dataclasses.replace(e) for e in edges]
        for e in new_edges:
            if e.tail_id not in self._vertex_map or e.head_id not in self._vertex_map:
                raise ValueError(
                    f"edge list error: edge ({e.tail_id}, {e.head_id}) has an unknown vertex"
                )
        for e in new_edges:
            self.edges_of(e.required).append(e)
        self.generate_adjacency()

    def add_reverse_edges(self) -> None:
        """Append a reversed copy of every existing edge."""
        self.required_edges.extend([e.reversed() for e in self.required_edges])
        self.non_required_edges.extend([e.reversed() for e in self.non_required_edges])
        self.generate_adjacency()

    def edge_vertex_indices(self, index: int, required: bool = True) -> tuple[int, int]:
        e = self.edge(index, required)
        return self.vertex_index(e.tail_id), self.vertex_index(e.head_id)

    def edge_vertex_ids(self, index: int, required: bool = True) -> tuple[int, int]:
        e = self.edge(index, required)
        return e.tail_id, e.head_id

    def edge_coordinates(self, index: int, required: bool = True) -> tuple[Point, Point]:
        t, h = self.edge_vertex_indices(index, required)
        return self.vertices[t].xy, self.vertices[h].xy

    def edge_lla(
        self, index: int, required: bool = True
    ) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
        t, h = self.edge_vertex_indices(index, required)
        return self.vertices[t].lla, self.vertices[h].lla

    def generate_adjacency(self) -> None:
        """Rebuild the outgoing-edge lists of all vertices."""
        for v in self.vertices:
            v.adjacent.clear()
        for e in (*self.required_edges, *self.non_required_edges):
            if e.tail_id not in self._vertex_map or e.head_id not in self._vertex_map:
                raise ValueError(f"edge list error: edge ({e.tail_id}, {e.head_id})")
            self.vertices[self._vertex_map[e.tail_id]].adjacent.append(e)

    # -- geometry ----------------------------------------------------------

    def limits(self) -> Limits:
        min_x = min_y = _DBL_MAX
        max_x = max_y = -_DBL_MAX
        for v in self.vertices:
            min_x = min(min_x, v.x)
            max_x = max(max_x, v.x)
            min_y = min(min_y, v.y)
            max_y = max(max_y, v.y)
        return Limits(min_x, max_x, min_y, max_y)

    def compute_area(self) -> float:
        """Area of the axis-aligned bounding box of the vertices."""
        lim = self.limits()
        return (lim.max_x - lim.min_x) * (lim.max_y - lim.min_y)

    def shift_origin(self) -> None:
        """Translate vertices so that the bounding box starts at the origin."""
        lim = self.limits()
        for v in self.vertices:
            v.x -= lim.min_x
            v.y -= lim.min_y

    # -- depots ------------------------------------------------------------

    def set_depot(self, vertex_id: int) -> None:
        self.depot = self.vertex_index(vertex_id)

    @property
    def is_depot_set(self) -> bool:
        return self.depot is not None

    @property
    def depot_id(self) -> int:
        if self.depot is None:
            raise ValueError("depot is not set")
        return self.vertices[self.depot].id

    @property
    def depot_xy(self) -> Point:
        if self.depot is None:
            raise ValueError("depot is not set")
        return self.vertices[self.depot].xy

    def add_depots(self, vertex_ids: Iterable[int]) -> None:
        ids = list(vertex_ids)
        for vid in ids:
            self.vertex_index(vid)
        self.depot_ids.extend(ids)

    @property
    def is_multiple_depot_set(self) -> bool:
        return bool(self.depot_ids)

    @property
    def depots_xy(self) -> list[Point]:
        return [self.vertex(vid).xy for vid in self.depot_ids]