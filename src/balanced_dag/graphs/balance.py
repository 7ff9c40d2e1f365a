"""Exact rational edge-weight balancing.

Paths are balanced longest first. Each path spreads whatever is left of the
basis weight evenly over its still-unweighted edges; an edge, once weighted,
keeps its weight, so shorter paths inherit the commitments made by longer
paths that share their edges.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from fractions import Fraction
from itertools import groupby
import logging

from balanced_dag.errors import BalancingInvariantError
from balanced_dag.graphs.edges import (
    Edge,
    EdgeTable,
    copy_edge_table,
    edge_weight_sum,
    get_edge,
    path_edges,
)
from balanced_dag.graphs.paths import Path
from balanced_dag.graphs.vertices import VertexRef

logger = logging.getLogger(__name__)

BASIS_WEIGHT = Fraction(1)

EdgeKey = tuple[VertexRef, VertexRef]


@dataclass(frozen=True)
class GroupedEdges:
    weighted: tuple[EdgeKey, ...]
    unweighted: tuple[EdgeKey, ...]

    def existing_weight(
        self, edges: Mapping[VertexRef, Mapping[VertexRef, Edge]]
    ) -> Fraction:
        total = Fraction(0)
        for va, vb in self.weighted:
            total += edges[va][vb].weight
        return total


def grouped_edges(
    edges: Mapping[VertexRef, Mapping[VertexRef, Edge]],
    path: Sequence[VertexRef],
) -> GroupedEdges:
    weighted: list[EdgeKey] = []
    unweighted: list[EdgeKey] = []
    for va, vb in path_edges(path):
        if get_edge(edges, va, vb).is_weighted:
            weighted.append((va, vb))
        else:
            unweighted.append((va, vb))
    return GroupedEdges(weighted=tuple(weighted), unweighted=tuple(unweighted))


def _balance_path(edges: EdgeTable, path: Path) -> int:
    grouped = grouped_edges(edges, path)
    existing = grouped.existing_weight(edges)
    remaining = BASIS_WEIGHT - existing
    if not grouped.unweighted:
        if remaining != 0:
            raise BalancingInvariantError(
                f"Path sums to {existing} with no unweighted edges left.",
                user_message=(
                    "Edge weights cannot be balanced: a path was fully "
                    f"weighted by other paths and sums to {existing}, not 1."
                ),
                context={"path": list(path), "sum": str(existing)},
            )
        return 0
    if remaining < 0:
        raise BalancingInvariantError(
            f"Path already carries {existing}, more than the basis weight.",
            user_message=(
                "Edge weights cannot be balanced: shared edges already carry "
                f"{existing} on a path, more than 1."
            ),
            context={"path": list(path), "sum": str(existing)},
        )
    share = remaining / len(grouped.unweighted)
    for va, vb in grouped.unweighted:
        edges[va][vb].assign(share)
    return len(grouped.unweighted)


def balanced_edges(
    edges: Mapping[VertexRef, Mapping[VertexRef, Edge]],
    paths: Sequence[Path],
) -> EdgeTable:
    """Return a copy of ``edges`` in which every path sums to the basis weight.

    The input table is left untouched. Weights already present in the input
    are kept as they are; only unweighted edges are assigned.
    """
    balanced = copy_edge_table(edges)
    ordered = sorted(paths, key=len, reverse=True)
    assigned = 0
    for length, group in groupby(ordered, key=len):
        group_paths = list(group)
        # Unweighted counts are taken once, before any path in the group runs.
        pending = {
            index: len(grouped_edges(balanced, path).unweighted)
            for index, path in enumerate(group_paths)
        }
        order = sorted(pending, key=lambda index: pending[index], reverse=True)
        for index in order:
            assigned += _balance_path(balanced, group_paths[index])
        logger.debug(
            "Balanced %d paths with %d edges.", len(group_paths), length - 1
        )
    logger.debug("Assigned %d edge weights.", assigned)
    return balanced


def unbalanced_paths(
    edges: Mapping[VertexRef, Mapping[VertexRef, Edge]],
    paths: Sequence[Path],
) -> list[Path]:
    return [
        path for path in paths if edge_weight_sum(edges, path) != BASIS_WEIGHT
    ]


__all__ = [
    "BASIS_WEIGHT",
    "EdgeKey",
    "GroupedEdges",
    "balanced_edges",
    "grouped_edges",
    "unbalanced_paths",
]
