"""Line coverage routing: graph model, text file I/O, single-robot LP/ILP solvers and gnuplot output."""

__version__ = "0.1.0"
__all__ = ["graph", "graph_io", "graph_utilities", "slc_ilp", "slc_lp", "plot"]