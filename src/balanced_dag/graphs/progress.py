"""Vertex progress accumulation and sentinel stripping."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from fractions import Fraction
import logging
from typing import TypeVar

from balanced_dag.errors import BalancingInvariantError, UnknownVertexError
from balanced_dag.graphs.edges import Edge, get_edge
from balanced_dag.graphs.paths import Path
from balanced_dag.graphs.vertices import (
    ARTIFICIAL_END,
    ARTIFICIAL_START,
    Vertex,
    VertexRef,
)

logger = logging.getLogger(__name__)

_V = TypeVar("_V")


@dataclass(frozen=True)
class VertexProgress:
    progress: float
    progress_fraction: Fraction

    @classmethod
    def from_fraction(cls, value: Fraction) -> "VertexProgress":
        return cls(progress=float(value), progress_fraction=value)


def balanced_progresses(
    vertices: Mapping[VertexRef, Vertex],
    edges: Mapping[VertexRef, Mapping[VertexRef, Edge]],
    paths: Sequence[Path],
) -> dict[VertexRef, VertexProgress]:
    """Record, per vertex, the weight accumulated before leaving it.

    The first path (in list order) to reach a vertex decides its progress;
    later paths never overwrite it.
    """
    progresses: dict[VertexRef, VertexProgress] = {}
    for path in paths:
        cumulative = Fraction(0)
        for index, va in enumerate(path):
            if va not in vertices:
                raise UnknownVertexError(
                    f"Path visits unknown vertex {va!r}.",
                    context={"vertex": va, "path": list(path)},
                )
            if va not in progresses:
                progresses[va] = VertexProgress.from_fraction(cumulative)
            if index + 1 < len(path):
                weight = get_edge(edges, va, path[index + 1]).weight
                if weight is None:
                    raise BalancingInvariantError(
                        f"Edge {va!r} -> {path[index + 1]!r} was never weighted.",
                        context={"from": va, "to": path[index + 1]},
                    )
                cumulative += weight
    logger.debug("Recorded progress for %d vertices.", len(progresses))
    return progresses


def without_artificial_vertices(
    progresses: Mapping[VertexRef, _V],
) -> dict[VertexRef, _V]:
    return {
        vertex: value
        for vertex, value in progresses.items()
        if vertex is not ARTIFICIAL_START and vertex is not ARTIFICIAL_END
    }


def without_artificial_vertex_edges(
    edges: Mapping[VertexRef, Mapping[VertexRef, Edge]],
) -> dict[VertexRef, dict[VertexRef, Edge]]:
    stripped: dict[VertexRef, dict[VertexRef, Edge]] = {}
    for va, row in edges.items():
        if va is ARTIFICIAL_START:
            continue
        stripped[va] = {
            vb: edge for vb, edge in row.items() if vb is not ARTIFICIAL_END
        }
    return stripped


__all__ = [
    "VertexProgress",
    "balanced_progresses",
    "without_artificial_vertex_edges",
    "without_artificial_vertices",
]
