# linecover

Tools for line coverage problems. You have a network of line segments (roads,
pipes, field rows) and want one closed route that services every required
segment at least once while keeping travel cost low.

## Modules

- `linecover.graph`: `Vertex`, `Edge` and `Graph`.
  - `Vertex` has an `id`, planar `x`/`y` (also as `xy`), and optional
    `lat`/`lng`/`alt` (also as `lla`).
  - `Edge` joins `tail_id` to `head_id`. It is either `required` (it must be
    serviced) or not (it may only be deadheaded, that is, traversed without
    servicing). It carries `service_cost`, `service_cost_rev`,
    `deadhead_cost` and `deadhead_cost_rev`, plus a single `cost` used in
    solution graphs. `reverse()` flips an edge in place. `reversed()` returns
    a flipped copy.
  - `Graph(vertices, edges, m, m_nr)` copies the vertices, ignoring repeated
    IDs. It sorts copies of the edges into `required_edges` and
    `non_required_edges` by their own flag. `m` and `m_nr` are size hints
    only. The graph offers:
    - sizes `n`, `m` and `m_nr`;
    - lookup with `vertex`, `vertex_index` and `has_vertex`, which raise
      `KeyError` for unknown IDs;
    - `add_vertex`, `add_edge`, `add_edges`, which raise `ValueError` for an
      unknown endpoint, and `add_reverse_edges`;
    - per-edge lookups `edge_vertex_indices`, `edge_vertex_ids`,
      `edge_coordinates` and `edge_lla`;
    - bounding-box helpers `limits`, `compute_area` and `shift_origin`;
    - a single depot through `set_depot`, `is_depot_set`, `depot_id` and
      `depot_xy`, and several depots through `add_depots`,
      `is_multiple_depot_set` and `depots_xy`;
    - `copy()`.
- `linecover.graph_io`: parsers and writers for whitespace-separated text
  files.
  - `parse_vertices`, `parse_required_edges`, `parse_non_required_edges` and
    `parse_depots` read the formats below.
  - `graph_from_streams` and `create_graph` build a `Graph`. The second reads
    from paths, and both can drop vertices that no edge touches
    (`filter_vertices`).
  - `write_nodes`, `write_required_edges` and `write_non_required_edges`
    write a graph back, with 16 significant digits.
- `linecover.graph_utilities`:
  - `add_complete_non_required_edges` adds a non-required edge between every
    vertex pair.
  - `add_reduced_complete_non_required_edges` does the same only for pairs
    not already joined by a required edge.
  - `compute_all_edge_costs` fills in costs from a subclass of the abstract
    `EdgeCostModel`, which implements `service_cost(edge)` and
    `deadhead_cost(edge)`, each returning `(forward, reverse)`.
- `linecover.slc_ilp`: `SlcIlpSolver`, an exact mixed integer programme for
  single-robot line coverage, solved with `scipy.optimize.milp`.
  - The depot is the tail of the first required edge.
  - `solve()` returns the optimal cost. It raises `ValueError` if there are no
    required edges and `RuntimeError` if the solver fails.
  - `solution_graph()` returns a directed graph with one edge per serviced or
    deadheaded traversal.
  - `flow_values()` returns `FlowValue` records (`tail_id`, `head_id`,
    `forward`, `backward`) for the connectivity flow on each edge.
- `linecover.slc_lp`: linear relaxations solved with `scipy.optimize.linprog`.
  - `SlcLpSolver`: `solve()` returns the LP cost. `solution_graphs()` returns
    the directed graph of traversals whose values are integral, together with
    a graph of the required edges serviced at one half.
  - `SlcLpBeta3Solver` fixes each required edge to be serviced in its cheaper
    direction. Its `solution_graph()` returns the directed solution.
- `linecover.plot`: gnuplot data files and scripts.
  - `plot_required_edges` and `plot_non_required_edges` write line segments.
  - `plot_required_edges_arrows` and `plot_non_required_edges_arrows` write
    `x y dx dy color` vectors.
  - `gnuplot_map`, `gnuplot_map_multi` (several graphs in one plot) and
    `gnuplot_map_arrows` write data files plus a script that renders
    `<output>.pdf` and `<output>.png`.
  - `run_gnuplot(script)` runs `gnuplot` and raises `RuntimeError` on a
    non-zero exit status. It needs `gnuplot` on the `PATH`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## File formats

Vertices, one per line: `id x y`, or `id x y lat lng alt` with `with_lla=True`.

Required edges: `tail head`, or
`tail head service service_rev deadhead deadhead_rev` with `with_cost=True`.

Non-required edges: `tail head`, or `tail head deadhead deadhead_rev` with
`with_cost=True`.

Depots: whitespace-separated vertex IDs.

Reading stops at the first token that does not parse or at an incomplete
trailing record.

## Example

```python
from linecover.graph import Edge, Graph, Vertex
from linecover.slc_ilp import SlcIlpSolver
from linecover.plot import gnuplot_map, run_gnuplot

vertices = [Vertex(1, 0, 0), Vertex(2, 10, 0), Vertex(3, 10, 10), Vertex(4, 0, 10)]
edges = [
    Edge(1, 2, True, 10, 10, 10, 10),
    Edge(2, 3, True, 10, 10, 10, 10),
    Edge(3, 4, True, 10, 10, 10, 10),
    Edge(4, 1, True, 10, 10, 10, 10),
]
graph = Graph(vertices, edges, 4, 0)

solver = SlcIlpSolver(graph)
cost = solver.solve()
tour_graph = solver.solution_graph()
print("tour cost:", cost)

gnuplot_map(tour_graph, "plot_data", "plot.gp", "route", plot_non_required=True)
run_gnuplot("plot.gp")
```

Graphs can also be read from files:

```python
from linecover.graph_io import create_graph

graph = create_graph("nodes", "req_edges", "nonreq_edges", with_cost=True)
```

## What this package does not do

- It has no command-line program and reads no configuration files. It is
  used as a library.
- The solvers produce solution graphs, not ordered routes. There is no Euler
  tour construction, route improvement, or route export (KML, GeoJSON,
  waypoints).
- There are no multi-robot or capacitated solvers and no heuristic solvers
  beyond the LP relaxations.