[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linecover"
version = "0.1.0"
description = "Line coverage routing on graphs: graph model, text file I/O, single-robot LP/ILP solvers and gnuplot output"
requires-python = ">=3.10"
keywords = [
    "line coverage",
    "arc routing",
    "graph",
    "integer programming",
    "linear programming",
    "gnuplot",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["linecover"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
