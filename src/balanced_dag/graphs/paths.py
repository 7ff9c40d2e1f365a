"""Start-to-End path enumeration.

Enumeration is exhaustive: the number of paths grows exponentially with the
branching factor, so callers should pass ``max_paths`` for untrusted input.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Optional

from balanced_dag.errors import CyclicInputError, PathLimitError
from balanced_dag.graphs.edges import Edge
from balanced_dag.graphs.vertices import ARTIFICIAL_START, VertexRef

logger = logging.getLogger(__name__)

Path = tuple[VertexRef, ...]


def all_paths(
    edges: Mapping[VertexRef, Mapping[VertexRef, Edge]],
    *,
    start: VertexRef = ARTIFICIAL_START,
    max_paths: Optional[int] = None,
) -> list[Path]:
    """List every path from ``start`` to a vertex without an edge row.

    Children are visited in the row's insertion order, so the result matches a
    recursive pre-order walk. Paths come back sorted longest first; the sort is
    stable, so equal-length paths keep their traversal order.
    """
    paths: list[Path] = []
    # Children are pushed in reverse so they pop in insertion order.
    stack: list[Path] = [(start,)]
    while stack:
        path = stack.pop()
        vertex = path[-1]
        row = edges.get(vertex)
        if row is None:
            paths.append(path)
            if max_paths is not None and len(paths) > max_paths:
                raise PathLimitError(
                    f"Graph has more than {max_paths} start-to-end paths.",
                    user_message=(
                        f"Path enumeration stopped after {max_paths} paths; "
                        "raise max_paths or split the graph."
                    ),
                    context={"max_paths": max_paths},
                )
            continue
        for child in reversed(tuple(row)):
            if child in path:
                cycle = path[path.index(child):] + (child,)
                raise CyclicInputError(
                    f"Cycle detected through {child!r}.",
                    context={"cycle": list(cycle)},
                )
            stack.append(path + (child,))

    paths.sort(key=len, reverse=True)
    logger.debug("Enumerated %d paths from %r.", len(paths), start)
    return paths


__all__ = ["Path", "all_paths"]
