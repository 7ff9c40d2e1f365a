"""Source/sink discovery and edge table construction."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from fractions import Fraction
import logging
from typing import Optional

from balanced_dag.errors import BalancingInvariantError, UnknownVertexError
from balanced_dag.graphs.vertices import (
    ARTIFICIAL_END,
    ARTIFICIAL_START,
    Vertex,
    VertexId,
    VertexRef,
)

logger = logging.getLogger(__name__)

ZERO_WEIGHT = Fraction(0)


@dataclass
class Edge:
    """Directed edge whose weight is assigned at most once."""

    weight: Optional[Fraction] = None

    @property
    def is_weighted(self) -> bool:
        return self.weight is not None

    def assign(self, weight: Fraction) -> None:
        if self.weight is not None:
            raise BalancingInvariantError(
                f"Edge already weighted {self.weight}; refusing to reassign {weight}.",
                context={"weight": str(self.weight), "new_weight": str(weight)},
            )
        self.weight = Fraction(weight)


EdgeTable = dict[VertexRef, dict[VertexRef, Edge]]


@dataclass(frozen=True)
class SourcesAndSinks:
    sources: tuple[VertexId, ...]
    sinks: tuple[VertexId, ...]


def sources_and_sinks(
    adjacency: Mapping[VertexId, Iterable[VertexId]],
) -> SourcesAndSinks:
    """Find vertices without incoming edges and without outgoing edges.

    Every key that is never a target is a source, including keys with no
    successors; their empty rows are dead ends during enumeration.
    """
    outgoing: dict[VertexId, bool] = {}
    targets: dict[VertexId, None] = {}
    for va, adjs in adjacency.items():
        adjs = tuple(adjs)
        outgoing[va] = outgoing.get(va, False) or bool(adjs)
        for vb in adjs:
            targets.setdefault(vb, None)

    sources = tuple(va for va in outgoing if va not in targets)
    sinks = tuple(vb for vb in targets if not outgoing.get(vb, False))
    return SourcesAndSinks(sources=sources, sinks=sinks)


def _require_vertex(
    vertices: Mapping[VertexRef, Vertex],
    vid: VertexRef,
    *,
    referenced_by: VertexRef,
) -> Vertex:
    vertex = vertices.get(vid)
    if vertex is None:
        raise UnknownVertexError(
            f"Edge from {referenced_by!r} references unknown vertex {vid!r}.",
            context={"from": referenced_by, "to": vid},
        )
    return vertex


def edges_with_sources_and_sinks(
    adjacency: Mapping[VertexId, Iterable[VertexId]],
    vertices: Mapping[VertexRef, Vertex],
) -> EdgeTable:
    """Build the edge table including the artificial Start and End edges.

    Start -> source edges are pre-weighted with zero for sources that do not
    count toward progress; every sink -> End edge is pre-weighted with zero.
    """
    boundary = sources_and_sinks(adjacency)
    edges: EdgeTable = {}

    for va, adjs in adjacency.items():
        _require_vertex(vertices, va, referenced_by=va)
        row: dict[VertexRef, Edge] = {}
        for vb in adjs:
            _require_vertex(vertices, vb, referenced_by=va)
            row[vb] = Edge()
        edges[va] = row

    start_row: dict[VertexRef, Edge] = {}
    for source in boundary.sources:
        vertex = _require_vertex(vertices, source, referenced_by=ARTIFICIAL_START)
        start_row[source] = Edge(ZERO_WEIGHT if vertex.progress is False else None)
    edges[ARTIFICIAL_START] = start_row

    for sink in boundary.sinks:
        edges[sink] = {ARTIFICIAL_END: Edge(ZERO_WEIGHT)}

    logger.debug(
        "Materialized %d edge rows (%d sources, %d sinks).",
        len(edges),
        len(boundary.sources),
        len(boundary.sinks),
    )
    return edges


def copy_edge_table(edges: Mapping[VertexRef, Mapping[VertexRef, Edge]]) -> EdgeTable:
    return {
        va: {vb: Edge(edge.weight) for vb, edge in row.items()}
        for va, row in edges.items()
    }


def path_edges(path: Sequence[VertexRef]) -> list[tuple[VertexRef, VertexRef]]:
    return [(path[index], path[index + 1]) for index in range(len(path) - 1)]


def get_edge(
    edges: Mapping[VertexRef, Mapping[VertexRef, Edge]],
    va: VertexRef,
    vb: VertexRef,
) -> Edge:
    row = edges.get(va)
    if row is None or vb not in row:
        raise UnknownVertexError(
            f"No edge {va!r} -> {vb!r} in the edge table.",
            context={"from": va, "to": vb},
        )
    return row[vb]


def edge_weight_sum(
    edges: Mapping[VertexRef, Mapping[VertexRef, Edge]],
    path: Sequence[VertexRef],
) -> Fraction:
    total = Fraction(0)
    for va, vb in path_edges(path):
        edge = get_edge(edges, va, vb)
        if edge.weight is None:
            raise BalancingInvariantError(
                f"Edge {va!r} -> {vb!r} has no weight.",
                context={"from": va, "to": vb},
            )
        total += edge.weight
    return total


__all__ = [
    "Edge",
    "EdgeTable",
    "SourcesAndSinks",
    "ZERO_WEIGHT",
    "copy_edge_table",
    "edge_weight_sum",
    "edges_with_sources_and_sinks",
    "get_edge",
    "path_edges",
    "sources_and_sinks",
]
