"""Entry point tying the balancing stages together."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from fractions import Fraction
import logging
from typing import Any, Optional

from balanced_dag.errors import BalancingInvariantError, ValidationError
from balanced_dag.graphs.balance import balanced_edges, unbalanced_paths
from balanced_dag.graphs.edges import Edge, EdgeTable, edges_with_sources_and_sinks
from balanced_dag.graphs.paths import Path, all_paths
from balanced_dag.graphs.progress import (
    VertexProgress,
    balanced_progresses,
    without_artificial_vertex_edges,
    without_artificial_vertices,
)
from balanced_dag.graphs.vertices import (
    Adjacency,
    Vertex,
    VertexId,
    VertexRef,
    normalize_adjacency,
    normalize_vertices,
    with_artificial_vertices,
)
from balanced_dag.validators import validate_adjacency, validate_settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_PATHS = 100_000


@dataclass(frozen=True)
class BalanceSettings:
    max_paths: Optional[int] = DEFAULT_MAX_PATHS
    validate_acyclic: bool = True
    verify: bool = True


@dataclass(frozen=True)
class BalancedDag:
    vertex_progresses: dict[VertexId, VertexProgress]
    edge_weights: dict[VertexId, dict[VertexId, Edge]]
    paths: list[Path] = field(default_factory=list)

    def weight(self, va: VertexId, vb: VertexId) -> Fraction:
        return self.edge_weights[va][vb].weight

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly payload; fractions are rendered as ``"n/d"`` strings.

        Vertex ids become ``str`` keys. Distinct ids that render to the same
        string raise ValidationError instead of overwriting each other.
        """
        keys = _string_keys(
            [
                *self.vertex_progresses,
                *self.edge_weights,
                *(vb for row in self.edge_weights.values() for vb in row),
            ]
        )
        return {
            "vertex_progresses": {
                keys[vid]: {
                    "progress": entry.progress,
                    "progress_fraction": format_fraction(entry.progress_fraction),
                }
                for vid, entry in self.vertex_progresses.items()
            },
            "edge_weights": {
                keys[va]: {
                    keys[vb]: {
                        "weight": None
                        if edge.weight is None
                        else format_fraction(edge.weight)
                    }
                    for vb, edge in row.items()
                }
                for va, row in self.edge_weights.items()
            },
        }


def _string_keys(ids: Iterable[VertexId]) -> dict[VertexId, str]:
    keys: dict[VertexId, str] = {}
    owners: dict[str, VertexId] = {}
    clashes: dict[str, list[VertexId]] = {}
    for vid in ids:
        if vid in keys:
            continue
        key = str(vid)
        owner = owners.setdefault(key, vid)
        if owner != vid:
            clashes.setdefault(key, [owner]).append(vid)
        keys[vid] = key
    if clashes:
        rendered = ", ".join(
            f"{key!r} <- {vids!r}" for key, vids in clashes.items()
        )
        raise ValidationError(
            f"Vertex ids collide when rendered as strings: {rendered}",
            user_message=(
                "Vertex ids must stay distinct as strings to be serialized; "
                f"colliding ids: {rendered}."
            ),
            context={"collisions": {key: list(vids) for key, vids in clashes.items()}},
        )
    return keys


def format_fraction(value: Fraction) -> str:
    return f"{value.numerator}/{value.denominator}"


def _prepare(
    adjacency: Mapping[VertexId, Iterable[VertexId]],
    vertices: Optional[Mapping[VertexId, Any]],
    settings: BalanceSettings,
) -> tuple[Adjacency, dict[VertexRef, Vertex], EdgeTable, list[Path]]:
    validate_settings(settings)
    adjacency = normalize_adjacency(adjacency)
    if settings.validate_acyclic:
        validate_adjacency(adjacency)
    augmented = with_artificial_vertices(normalize_vertices(adjacency, vertices))
    edges = edges_with_sources_and_sinks(adjacency, augmented)
    paths = all_paths(edges, max_paths=settings.max_paths)
    return adjacency, augmented, edges, paths


def enumerate_paths(
    adjacency: Mapping[VertexId, Iterable[VertexId]],
    vertices: Optional[Mapping[VertexId, Any]] = None,
    *,
    settings: Optional[BalanceSettings] = None,
) -> list[Path]:
    """Start-to-End paths of the augmented graph, longest first."""
    _, _, _, paths = _prepare(adjacency, vertices, settings or BalanceSettings())
    return paths


def balanced_dag(
    adjacency: Mapping[VertexId, Iterable[VertexId]],
    vertices: Optional[Mapping[VertexId, Any]] = None,
    *,
    settings: Optional[BalanceSettings] = None,
) -> BalancedDag:
    """Compute progress per vertex and weight per edge for a DAG.

    Every path from a source to a sink ends up with edge weights summing to
    exactly one. Vertices not on any such path get no progress entry.
    """
    settings = settings or BalanceSettings()
    adjacency, augmented, edges, paths = _prepare(adjacency, vertices, settings)
    edges = balanced_edges(edges, paths)

    if settings.verify:
        broken = unbalanced_paths(edges, paths)
        if broken:
            raise BalancingInvariantError(
                f"{len(broken)} of {len(paths)} paths do not sum to 1.",
                context={"paths": [list(path) for path in broken]},
            )

    progresses = balanced_progresses(augmented, edges, paths)
    stripped = without_artificial_vertex_edges(edges)
    edge_weights = {va: stripped.get(va, {}) for va in adjacency}

    logger.info(
        "Balanced %d vertices over %d paths.",
        len(augmented) - 2,
        len(paths),
    )
    return BalancedDag(
        vertex_progresses=without_artificial_vertices(progresses),
        edge_weights=edge_weights,
        paths=paths,
    )


__all__ = [
    "DEFAULT_MAX_PATHS",
    "BalanceSettings",
    "BalancedDag",
    "balanced_dag",
    "enumerate_paths",
    "format_fraction",
]
