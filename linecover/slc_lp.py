"""Linear programming relaxations for single-robot line coverage."""

from __future__ import annotations

import logging

import numpy as np
from scipy.optimize import linprog
from scipy.sparse import coo_matrix

from linecover.graph import Edge, Graph

logger = logging.getLogger(__name__)

_NEAR_ZERO = 1e-10
_BETA3_TOLERANCE = 1e-5


class _SlcLpBase:
    """Shared model of the line coverage LP relaxation.

    Variables, in order: service variables for required edges, deadhead
    variables for required edges and deadhead variables for non-required
    edges; each edge has one variable per direction. Rows are the symmetry
    constraints (one per vertex) followed by the service constraints (one
    per required edge).
    """

    _tolerance = _NEAR_ZERO

    def __init__(self, graph: Graph) -> None:
        self.graph = graph
        self.n = graph.n
        self.m = graph.m
        self.m_nr = graph.m_nr
        self.objective: float | None = None
        self._x: np.ndarray | None = None
        self._rows: list[int] = []
        self._cols: list[int] = []
        self._vals: list[float] = []

    @property
    def num_variables(self) -> int:
        return 2 * self.m + 2 * (self.m + self.m_nr)

    def _service(self, i: int) -> int:
        return 2 * i

    def _deadhead_req(self, i: int) -> int:
        return 2 * self.m + 2 * i

    def _deadhead_nr(self, i: int) -> int:
        return 4 * self.m + 2 * i

    def _add(self, row: int, col: int, value: float) -> None:
        self._rows.append(row)
        self._cols.append(col)
        self._vals.append(value)

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

    def _solve_lp(self) -> float:
        nvars = self.num_variables
        if nvars == 0:
            self._x = np.zeros(0)
            self.objective = 0.0
            return self.objective
        self._rows, self._cols, self._vals = [], [], []
        self._symmetry_constraints()
        self._service_constraints()
        nrows = self.n + self.m
        matrix = coo_matrix((self._vals, (self._rows, self._cols)), shape=(nrows, nvars)).tocsr()
        rhs = np.concatenate([np.zeros(self.n), np.ones(self.m)])
        bounds = [(0.0, 1.0)] * (2 * self.m) + [(0.0, None)] * (nvars - 2 * self.m)
        result = linprog(
            self._objective(), A_eq=matrix, b_eq=rhs, bounds=bounds, method="highs-ds"
        )
        if not result.success or result.x is None:
            raise RuntimeError(f"LP could not be solved: {result.message}")
        self._x = result.x
        self.objective = float(result.fun)
        logger.info("LP cost: %s", self.objective)
        return self.objective

    def _value(self, col: int) -> float:
        if self._x is None:
            raise RuntimeError("LP has not been solved")
        return float(self._x[col])

    def _count(self, col: int) -> int:
        return max(int(round(self._value(col))), 0)

    def _is_one(self, col: int) -> bool:
        return abs(self._value(col) - 1.0) <= self._tolerance

    @staticmethod
    def _traversal(e: Edge, cost: float, required: bool, reverse: bool) -> Edge:
        new_edge = e.reversed() if reverse else Edge(**{**e.__dict__})
        new_edge.cost = cost
        new_edge.required = required
        return new_edge

    def _directed_edges(self) -> tuple[list[Edge], int, int]:
        if self._x is None:
            raise RuntimeError("LP has not been solved")
        edges: list[Edge] = []
        m = m_nr = 0
        for i, e in enumerate(self.graph.required_edges):
            if self._is_one(self._service(i)):
                edges.append(self._traversal(e, e.service_cost, True, False))
                m += 1
            if self._is_one(self._service(i) + 1):
                edges.append(self._traversal(e, e.service_cost_rev, True, True))
                m += 1
            for _ in range(self._count(self._deadhead_req(i))):
                edges.append(self._traversal(e, e.deadhead_cost, False, False))
                m_nr += 1
            for _ in range(self._count(self._deadhead_req(i) + 1)):
                edges.append(self._traversal(e, e.deadhead_cost_rev, False, True))
                m_nr += 1
        for i, e in enumerate(self.graph.non_required_edges):
            for _ in range(self._count(self._deadhead_nr(i))):
                edges.append(self._traversal(e, e.deadhead_cost, False, False))
                m_nr += 1
            for _ in range(self._count(self._deadhead_nr(i) + 1)):
                edges.append(self._traversal(e, e.deadhead_cost_rev, False, True))
                m_nr += 1
        return edges, m, m_nr


class SlcLpSolver(_SlcLpBase):
    """LP relaxation in which each required edge is serviced in either direction."""

    def __init__(self, graph: Graph) -> None:
        super().__init__(graph)

    def solve(self) -> float:
        """Solve the LP relaxation with the simplex method and return its cost."""
        return self._solve_lp()

    def solution_graphs(self) -> tuple[Graph, Graph]:
        """Return the directed solution graph and the graph of half-serviced edges."""
        edges, m, m_nr = self._directed_edges()
        undirected: list[Edge] = []
        for i, e in enumerate(self.graph.required_edges):
            if abs(self._value(self._service(i)) - 0.5) <= self._tolerance:
                half = Edge(**{**e.__dict__})
                half.required = True
                undirected.append(half)
        digraph = Graph(self.graph.vertices, edges, m, m_nr)
        undirected_graph = Graph(self.graph.vertices, undirected, len(undirected), 0)
        return digraph, undirected_graph


class SlcLpBeta3Solver(_SlcLpBase):
    """LP in which each required edge is serviced in its cheaper direction."""

    _tolerance = _BETA3_TOLERANCE

    def __init__(self, graph: Graph) -> None:
        super().__init__(graph)

    def solve(self) -> float:
        """Solve the LP with the simplex method and return its cost."""
        return self._solve_lp()

    def _service_constraints(self) -> None:
        for i, e in enumerate(self.graph.required_edges):
            if e.service_cost < e.service_cost_rev:
                self._add(self.n + i, self._service(i), 1.0)
            else:
                self._add(self.n + i, self._service(i) + 1, 1.0)

    def solution_graph(self) -> Graph:
        """Return the directed graph of serviced and deadheaded traversals."""
        edges, m, m_nr = self._directed_edges()
        return Graph(self.graph.vertices, edges, m, m_nr)