"""Gnuplot data files and scripts for drawing graphs and routes."""

from __future__ import annotations

import math
import subprocess
from pathlib import Path
from typing import Iterator, Sequence

from linecover.graph import Graph, Limits, Point

PathLike = str | Path

_PALETTE = (
    'set palette defined (0 "#d62728", 1 "#1f77b4", 2 "#2ca02c", 3 "#9467bd", '
    '4 "#000000", 5 "#8c564b", 6 "#e377c2", 7 "#ff7f0e", 8 "#bcbd22", 9 "#17becf", '
    '10 "#d69f9f", 11 "#89b2cf", 12 "#91ca91", 13 "#beabcf", 14 "#dbdbdb", '
    '15 "#bfa6a1", 16 "#d5b6cc", 17 "#eeb98b", 18 "#d5d5a2", 19 "#a3ccd1")\n'
)

_PALETTE_MULTI = (
    "set palette defined (0 '#1b4f72', 1 '#d98880', 2 '#bcbd22', 3 '#9467bd', "
    "4 '#89b2cf', 5 '#8c564b', 6 '#e377c2', 7 '#ff7f0e', 8 '#d62728', 9 '#17becf', "
    "10 '#d69f9f', 11 '#000000', 12 \"#91ca91\", 13 \"#beabcf\", 14 \"#dbdbdb\", "
    '15 "#bfa6a1", 16 "#d5b6cc", 17 "#eeb98b", 18 "#d5d5a2", 19 "#a3ccd1")\n'
)


def _g(value: float) -> str:
    return format(value, ".16g")


def _segments(graph: Graph, required: bool) -> Iterator[tuple[Point, Point]]:
    for index in range(len(graph.edges_of(required))):
        yield graph.edge_coordinates(index, required)


def _write_lines(graph: Graph, path: PathLike, color: str, required: bool) -> bool:
    exists = False
    with open(path, "w", encoding="utf-8") as out:
        for tail, head in _segments(graph, required):
            exists = True
            out.write(f"{_g(tail.x)} {_g(tail.y)} {color}\n")
            out.write(f"{_g(head.x)} {_g(head.y)} {color}\n")
            out.write("\n")
    return exists


def _write_arrows(
    graph: Graph, path: PathLike, color: str, required: bool, separate: bool
) -> bool:
    exists = False
    with open(path, "w", encoding="utf-8") as out:
        for tail, head in _segments(graph, required):
            exists = True
            out.write(
                f"{_g(tail.x)} {_g(tail.y)} {_g(head.x - tail.x)} {_g(head.y - tail.y)} {color}\n"
            )
            if separate:
                out.write("\n")
    return exists


def plot_required_edges(graph: Graph, path: PathLike, color: str = "1") -> None:
    """Write required edges as line segments in gnuplot data format."""
    _write_lines(graph, path, color, True)


def plot_non_required_edges(graph: Graph, path: PathLike, color: str = "1") -> bool:
    """Write non-required edges as line segments; return whether any were written."""
    return _write_lines(graph, path, color, False)


def plot_required_edges_arrows(graph: Graph, path: PathLike, color: str = "1") -> None:
    """Write required edges as ``x y dx dy color`` vectors."""
    _write_arrows(graph, path, color, True, separate=False)


def plot_non_required_edges_arrows(graph: Graph, path: PathLike, color: str = "1") -> bool:
    """Write non-required edges as vectors; return whether any were written."""
    return _write_arrows(graph, path, color, False, separate=True)


def _order(span: float) -> int:
    # Any non-positive span ends up clamped to order 1 below.
    return int(math.log10(span)) if span > 0 else 0


def _layout(lim: Limits) -> tuple[float, int, float]:
    width = lim.max_x - lim.min_x
    ratio = 1.0 if width < 1e-10 else (lim.max_y - lim.min_y) / width
    scale_order = max(_order(width), _order(lim.max_y - lim.min_y))
    if scale_order < 1:
        scale_order = 1
    return ratio, scale_order, float(10 ** scale_order)


def _map_header(
    output_path: PathLike, lim: Limits, ratio: float, scale_order: int, scale: float, palette: str
) -> list[str]:
    size_x = 12.0
    size_y = ratio * size_x
    return [
        f"set terminal pdfcairo enhanced font 'Times,14' size {_g(size_x)}cm, {_g(size_y)}cm crop\n",
        f'set o "{output_path}.pdf"\n',
        "unset key\nunset colorbox\nunset grid\n",
        "set cbrange [0:19]\n",
        f"set xrange [{_g(lim.min_x / scale - 0.05)}:{_g(lim.max_x / scale + 0.05)}]\n",
        f"set yrange [{_g(lim.min_y / scale - 0.05)}:{_g(lim.max_y / scale + 0.05)}]\n",
        palette,
        f"set xlabel 'X-axis (x 10^{scale_order} m)' offset 0,1.0 \n",
        f"set ylabel 'Y-axis (x 10^{scale_order} m)' offset 2.0,0\n",
        "set size ratio -1\n",
        "set xtics -10,0.5,10\n",
        "set ytics -10,0.5,10\n",
        "set style textbox noborder\n",
        "set xtics border offset -0.0,0.3\n",
    ]


def _map_footer(output_path: PathLike, ratio: float, png_width: float, font: str) -> list[str]:
    return [
        f"set terminal pngcairo enhanced font '{font}' size {_g(png_width)}, {_g(ratio * png_width)}\n",
        f'set o "{output_path}.png"\n',
        "replot",
    ]


def _lines_term(path: str, scale: float, dashed: bool) -> str:
    s = _g(scale)
    style = "w lines lw 1 dashtype 2 palette" if dashed else "w lines lw 1 palette"
    return f'"{path}" u ($1/{s}):($2/{s}):3  {style}'


def _point_term(point: Point, scale: float) -> str:
    return (
        f"\"< echo '{point.x / scale:f} {point.y / scale:f}' \"  "
        'w points pt 5 ps 1 lc rgb "0x000000 " '
    )


def gnuplot_map(
    graph: Graph,
    data_path: PathLike,
    script_path: PathLike,
    output_path: PathLike,
    plot_non_required: bool = False,
) -> None:
    """Write edge data and a gnuplot script that draws the graph to PDF and PNG."""
    data = str(data_path)
    nr_data = data + "_nr"
    plot_required_edges(graph, data)
    if plot_non_required:
        plot_non_required = plot_non_required_edges(graph, nr_data)

    lim = graph.limits()
    ratio, scale_order, scale = _layout(lim)
    parts = _map_header(output_path, lim, ratio, scale_order, scale, _PALETTE)
    if plot_non_required:
        parts.append("plot " + _lines_term(data, scale, False) + ", ")
        parts.append(_lines_term(nr_data, scale, True))
    else:
        parts.append("plot " + _lines_term(data, scale, False))
    if graph.is_multiple_depot_set:
        for point in graph.depots_xy:
            parts.append(", " + _point_term(point, scale))
    elif graph.is_depot_set:
        parts.append(", " + _point_term(graph.depot_xy, scale))
    parts.append("\n\n")
    parts += _map_footer(output_path, ratio, 900.0, "Times,14")
    Path(script_path).write_text("".join(parts), encoding="utf-8")


def gnuplot_map_multi(
    graphs: Sequence[Graph],
    data_path: PathLike,
    script_path: PathLike,
    output_path: PathLike,
    plot_non_required: bool = False,
) -> None:
    """Draw several graphs in one plot, each in its own palette colour."""
    if not graphs:
        return
    data = str(data_path)
    first = graphs[0]
    plot_required_edges(first, data, "0")
    this_non_required = False
    if plot_non_required:
        this_non_required = plot_non_required_edges(first, data + "_nr", "0")

    lim = first.limits()
    ratio, scale_order, scale = _layout(lim)
    parts = _map_header(output_path, lim, ratio, scale_order, scale, _PALETTE_MULTI)
    if this_non_required:
        parts.append("plot " + _lines_term(data, scale, False) + ",")
        parts.append(_lines_term(data + "_nr", scale, True))
    else:
        parts.append("plot " + _lines_term(data, scale, False))
    if first.is_depot_set:
        parts.append(", " + _point_term(first.depot_xy, scale))

    for i, graph in enumerate(graphs[1:], start=1):
        suffix = str(i)
        plot_required_edges(graph, data + suffix, suffix)
        if plot_non_required:
            this_non_required = plot_non_required_edges(graph, data + "_nr" + suffix, suffix)
        parts.append(", " + _lines_term(data + suffix, scale, False))
        if this_non_required:
            parts.append(", " + _lines_term(data + "_nr" + suffix, scale, True))
        if graph.is_depot_set:
            parts.append(", " + _point_term(graph.depot_xy, scale))

    parts.append("\n\n")
    parts += _map_footer(output_path, ratio, 900.0, "Times,14")
    Path(script_path).write_text("".join(parts), encoding="utf-8")


def gnuplot_map_arrows(
    graph: Graph,
    data_path: PathLike,
    script_path: PathLike,
    output_path: PathLike,
    plot_non_required: bool = False,
) -> None:
    """Write edge vectors and a gnuplot script that draws the graph with arrows."""
    data = str(data_path)
    nr_data = data + "_nr"
    plot_required_edges_arrows(graph, data)
    if plot_non_required:
        plot_non_required = plot_non_required_edges_arrows(graph, nr_data)

    lim = graph.limits()
    ratio, _, _ = _layout(lim)
    scale = 1.0
    size_x = 12.0
    incrange = 20.0
    parts = [
        f"set terminal pdfcairo enhanced font 'Times,14' size {_g(size_x)}cm, {_g(ratio * size_x)}cm crop\n",
        f'set o "{output_path}.pdf"\n',
        "unset key\nunset colorbox\nunset grid\n",
        "set cbrange [0:19]\n",
        f"set xrange [{_g(lim.min_x / scale - incrange)}:{_g(lim.max_x / scale + incrange)}]\n",
        f"set yrange [{_g(lim.min_y / scale - incrange)}:{_g(lim.max_y / scale + incrange)}]\n",
        _PALETTE,
        "set xlabel 'X-axis (m)'\n",
        "set ylabel 'Y-axis (m)'\n",
        "set size ratio -1\n",
        "set style arrow 100 head size screen 0.015,10,60 filled fixed palette\n",
        "set style arrow 101 head size screen 0.015,10,60 filled fixed palette dt 2\n",
        "set style textbox noborder\n",
        "set xtics border offset -0.0,0.3\n",
    ]
    if plot_non_required:
        parts.append(f'plot "{data}" i 0 u 1:2:3:4:5  w vectors as 100, ')
        parts.append(f'"{nr_data}" i 0 u 1:2:3:4:5 w vectors as 101\n')
    else:
        parts.append(f'plot "{data}" i 0 u 1:2:3:4:5  w vectors as 100\n')
    parts += _map_footer(output_path, ratio, 3600.0, "Times,40")
    Path(script_path).write_text("".join(parts), encoding="utf-8")


def run_gnuplot(script_path: PathLike) -> None:
    """Run gnuplot on a script; raise RuntimeError if it fails."""
    result = subprocess.run(["gnuplot", str(script_path)], check=False)
    if result.returncode != 0:
        raise RuntimeError(f"gnuplot failed with status {result.returncode}")