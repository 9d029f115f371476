"""Exact single-robot line coverage through an integer linear program."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp
from scipy.sparse import coo_matrix

from linecover.graph import Edge, Graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlowValue:
    """Commodity flow carried by an edge along and against its direction."""

    tail_id: int
    head_id: int
    forward: int
    backward: int


class SlcIlpSolver:
    """Solves the single-robot line coverage problem as a mixed integer program.

    Variables, in order: service variables for required edges, deadhead
    variables for required edges, deadhead variables for non-required edges,
    flow variables for required edges and flow variables for non-required
    edges; each edge has one variable per direction.
    """

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self.n = graph.n
        self.m = graph.m
        self.m_nr = graph.m_nr
        self.objective: float | None = None
        self.depot_index: int | None = None
        self._x: np.ndarray | None = None
        self._rows: list[int] = []
        self._cols: list[int] = []
        self._vals: list[float] = []

    # -- variable layout ---------------------------------------------------

    @property
    def num_variables(self) -> int:
        return 2 * self.m + 2 * (self.m + self.m_nr) + 2 * (self.m + self.m_nr)

    @property
    def num_constraints(self) -> int:
        return self.n + self.m + self.n + 1 + 2 * self.m + 2 * self.m_nr

    def _service(self, i: int) -> int:
        return 2 * i

    def _deadhead_req(self, i: int) -> int:
        return 2 * self.m + 2 * i

    def _deadhead_nr(self, i: int) -> int:
        return 4 * self.m + 2 * i

    def _flow_req(self, i: int) -> int:
        return 4 * self.m + 2 * self.m_nr + 2 * i

    def _flow_nr(self, i: int) -> int:
        return 6 * self.m + 2 * self.m_nr + 2 * i

    def _add(self, row: int, col: int, value: float) -> None:
        self._rows.append(row)
        self._cols.append(col)
        self._vals.append(value)

    # -- constraints -------------------------------------------------------

    def _symmetry_constraints(self) -> None:
        g = self.graph
        for i in range(self.m):
            t, h = g.edge_vertex_indices(i, True)
            for col in (self._service(i), self._deadhead_req(i)):
                self._add(h, col, 1.0)
                self._add(t, col, -1.0)
                self._add(h, col + 1, -1.0)
                self._add(t, col + 1, 1.0)
        for i in range(self.m_nr):
            t, h = g.edge_vertex_indices(i, False)
            col = self._deadhead_nr(i)
            self._add(h, col, 1.0)
            self._add(t, col, -1.0)
            self._add(h, col + 1, -1.0)
            self._add(t, col + 1, 1.0)

    def _service_constraints(self) -> None:
        for i in range(self.m):
            self._add(self.n + i, self._service(i), 1.0)
            self._add(self.n + i, self._service(i) + 1, 1.0)

    def _flow_conservation(self) -> None:
        g = self.graph
        start = self.n + self.m
        for i in range(self.m):
            t, h = g.edge_vertex_indices(i, True)
            flow = self._flow_req(i)
            if h != self.depot_index:
                self._add(start + h, self._service(i), -1.0)
                self._add(start + h, flow, 1.0)
                self._add(start + h, flow + 1, -1.0)
            if t != self.depot_index:
                self._add(start + t, self._service(i) + 1, -1.0)
                self._add(start + t, flow, -1.0)
                self._add(start + t, flow + 1, 1.0)
        for i in range(self.m_nr):
            t, h = g.edge_vertex_indices(i, False)
            flow = self._flow_nr(i)
            if h != self.depot_index:
                self._add(start + h, flow, 1.0)
                self._add(start + h, flow + 1, -1.0)
            if t != self.depot_index:
                self._add(start + t, flow, -1.0)
                self._add(start + t, flow + 1, 1.0)

    def _depot_flow(self) -> None:
        g = self.graph
        row = self.n + self.m + self.n
        for i in range(self.m):
            t, h = g.edge_vertex_indices(i, True)
            if h == self.depot_index:
                self._add(row, self._flow_req(i) + 1, 1.0)
            if t == self.depot_index:
                self._add(row, self._flow_req(i), 1.0)
        for i in range(self.m_nr):
            t, h = g.edge_vertex_indices(i, False)
            if h == self.depot_index:
                self._add(row, self._flow_nr(i) + 1, 1.0)
            if t == self.depot_index:
                self._add(row, self._flow_nr(i), 1.0)

    def _flow_limit(self) -> None:
        start = self.n + self.m + self.n + 1
        big = float(self.m)
        for i in range(self.m):
            for d in (0, 1):
                row = start + 2 * i + d
                self._add(row, self._service(i) + d, -big)
                self._add(row, self._deadhead_req(i) + d, -big)
                self._add(row, self._flow_req(i) + d, 1.0)
        start += 2 * self.m
        for i in range(self.m_nr):
            for d in (0, 1):
                row = start + 2 * i + d
                self._add(row, self._deadhead_nr(i) + d, -big)
                self._add(row, self._flow_nr(i) + d, 1.0)

    def _objective(self) -> np.ndarray:
        c = np.zeros(self.num_variables)
        for i, e in enumerate(self.graph.required_edges):
            c[self._service(i)] = e.service_cost
            c[self._service(i) + 1] = e.service_cost_rev
            c[self._deadhead_req(i)] = e.deadhead_cost
            c[self._deadhead_req(i) + 1] = e.deadhead_cost_rev
        for i, e in enumerate(self.graph.non_required_edges):
            c[self._deadhead_nr(i)] = e.deadhead_cost
            c[self._deadhead_nr(i) + 1] = e.deadhead_cost_rev
        return c

    def _row_bounds(self) -> tuple[np.ndarray, np.ndarray]:
        n, m = self.n, self.m
        lower = np.concatenate([
            np.zeros(n),
            np.ones(m),
            np.zeros(n),
            [float(m)],
            np.full(2 * m + 2 * self.m_nr, -np.inf),
        ])
        upper = np.concatenate([
            np.zeros(n),
            np.ones(m),
            np.zeros(n),
            [float(m)],
            np.zeros(2 * m + 2 * self.m_nr),
        ])
        return lower, upper

    # -- solving -----------------------------------------------------------

    def solve(self) -> float:
        """Solve the program and return the optimal tour cost."""
        if self.m == 0:
            raise ValueError("graph has no required edges")
        self.depot_index = self.graph.edge_vertex_indices(0, True)[0]
        self._rows, self._cols, self._vals = [], [], []
        self._symmetry_constraints()
        self._service_constraints()
        self._flow_conservation()
        self._depot_flow()
        self._flow_limit()

        nvars = self.num_variables
        matrix = coo_matrix(
            (self._vals, (self._rows, self._cols)),
            shape=(self.num_constraints, nvars),
        ).tocsr()
        lower, upper = self._row_bounds()
        var_upper = np.full(nvars, np.inf)
        var_upper[: 2 * self.m] = 1.0

        result = milp(
            self._objective(),
            constraints=LinearConstraint(matrix, lower, upper),
            integrality=np.ones(nvars),
            bounds=Bounds(np.zeros(nvars), var_upper),
        )
        if not result.success or result.x is None:
            raise RuntimeError(f"ILP could not be solved: {result.message}")
        self._x = result.x
        self.objective = float(result.fun)
        logger.info("Tour cost: %s", self.objective)
        return self.objective

    def _value(self, col: int) -> int:
        if self._x is None:
            raise RuntimeError("ILP has not been solved")
        return int(round(self._x[col]))

    def solution_graph(self) -> Graph:
        """Return the directed graph of serviced and deadheaded traversals."""
        if self._x is None:
            raise RuntimeError("ILP has not been solved")
        edges: list[Edge] = []
        m = m_nr = 0

        def traversal(e: Edge, cost: float, required: bool, reverse: bool) -> Edge:
            new_edge = Edge(e.tail_id, e.head_id, required, cost=cost)
            if reverse:
                new_edge.reverse()
            return new_edge

        for i, e in enumerate(self.graph.required_edges):
            if self._value(self._service(i)):
                edges.append(traversal(e, e.service_cost, True, False))
                m += 1
            if self._value(self._service(i) + 1):
                edges.append(traversal(e, e.service_cost_rev, True, True))
                m += 1
            for _ in range(max(self._value(self._deadhead_req(i)), 0)):
                edges.append(traversal(e, e.deadhead_cost, False, False))
                m_nr += 1
            for _ in range(max(self._value(self._deadhead_req(i) + 1), 0)):
                edges.append(traversal(e, e.deadhead_cost_rev, False, True))
                m_nr += 1

        for i, e in enumerate(self.graph.non_required_edges):
            for _ in range(max(self._value(self._deadhead_nr(i)), 0)):
                edges.append(traversal(e, e.deadhead_cost, False, False))
                m_nr += 1
            for _ in range(max(self._value(self._deadhead_nr(i) + 1), 0)):
                edges.append(traversal(e, e.deadhead_cost_rev, False, True))
                m_nr += 1

        cost = sum(e.cost for e in edges)
        if self.objective is not None and abs(cost - self.objective) > 1e-10:
            logger.warning("Mismatch in cost: %s %s", cost, self.objective)
        return Graph(self.graph.vertices, edges, m, m_nr)

    def flow_values(self) -> list[FlowValue]:
        """Return the solved flow on every required, then every non-required edge."""
        flows = [
            FlowValue(e.tail_id, e.head_id,
                      self._value(self._flow_req(i)), self._value(self._flow_req(i) + 1))
            for i, e in enumerate(self.graph.required_edges)
        ]
        flows += [
            FlowValue(e.tail_id, e.head_id,
                      self._value(self._flow_nr(i)), self._value(self._flow_nr(i) + 1))
            for i, e in enumerate(self.graph.non_required_edges)
        ]
        return flows