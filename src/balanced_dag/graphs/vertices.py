"""Vertex records, sentinel vertices and adjacency normalization."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Optional, Union

from balanced_dag.errors import ValidationError

logger = logging.getLogger(__name__)

VertexId = Hashable


class Sentinel(Enum):
    """Artificial boundary vertices; never equal to a caller-supplied id."""

    START = "start"
    END = "end"

    def __repr__(self) -> str:
        return f"<{self.name}>"


ARTIFICIAL_START = Sentinel.START
ARTIFICIAL_END = Sentinel.END

VertexRef = Union[VertexId, Sentinel]
Adjacency = dict[VertexId, tuple[VertexId, ...]]


class Boundary(Enum):
    """Role a vertex plays at the edge of the graph."""

    SOURCE = "source"
    SINK = "sink"
    NONE = "none"


@dataclass(frozen=True)
class Vertex:
    """Per-vertex record; ``progress=False`` zeroes a source's Start edge."""

    progress: bool = True
    artificial: bool = False
    boundary: Boundary = Boundary.NONE


_VERTEX_FIELDS = frozenset({"progress", "artificial", "boundary"})


def _coerce_boundary(value: Any, label: str) -> Boundary:
    if isinstance(value, Boundary):
        return value
    if value is None:
        return Boundary.NONE
    try:
        return Boundary(str(value))
    except ValueError as exc:
        options = ", ".join(item.value for item in Boundary)
        raise ValidationError(
            f"{label}.boundary must be one of: {options}."
        ) from exc


def coerce_vertex(value: Any, *, label: str = "vertex") -> Vertex:
    """Build a Vertex from a Vertex, a mapping of fields, or a progress bool."""
    if isinstance(value, Vertex):
        return value
    if isinstance(value, bool):
        return Vertex(progress=value)
    if isinstance(value, Mapping):
        unknown = sorted(str(key) for key in value if key not in _VERTEX_FIELDS)
        if unknown:
            raise ValidationError(f"{label} has unknown fields: {unknown}.")
        progress = value.get("progress", True)
        artificial = value.get("artificial", False)
        if not isinstance(progress, bool):
            raise ValidationError(f"{label}.progress must be a boolean.")
        if not isinstance(artificial, bool):
            raise ValidationError(f"{label}.artificial must be a boolean.")
        return Vertex(
            progress=progress,
            artificial=artificial,
            boundary=_coerce_boundary(value.get("boundary"), label),
        )
    raise ValidationError(
        f"{label} must be a Vertex, a mapping or a boolean, got {type(value).__name__}."
    )


def _require_vertex_id(value: Any, label: str) -> VertexId:
    if isinstance(value, Sentinel):
        raise ValidationError(f"{label} must not be an artificial vertex.")
    try:
        hash(value)
    except TypeError as exc:
        raise ValidationError(f"{label} must be hashable, got {value!r}.") from exc
    return value


def normalize_adjacency(adjacency: Mapping[Any, Iterable[Any]]) -> Adjacency:
    """Copy an adjacency mapping into an insertion-ordered dict of tuples."""
    if not isinstance(adjacency, Mapping):
        raise ValidationError("adjacency must be a mapping of vertex -> successors.")
    normalized: Adjacency = {}
    for va, adjs in adjacency.items():
        va = _require_vertex_id(va, "adjacency key")
        if adjs is None:
            adjs = ()
        if isinstance(adjs, (str, bytes, bytearray)) or not isinstance(adjs, Iterable):
            raise ValidationError(
                f"Successors of {va!r} must be a collection of vertex ids."
            )
        successors: list[VertexId] = []
        for vb in adjs:
            vb = _require_vertex_id(vb, f"successor of {va!r}")
            if vb == va:
                raise ValidationError(
                    f"Self-loop on {va!r} is not allowed.",
                    context={"vertex": va},
                )
            if vb not in successors:
                successors.append(vb)
        normalized[va] = tuple(successors)
    return normalized


def normalize_vertices(
    adjacency: Mapping[VertexId, Iterable[VertexId]],
    vertices: Optional[Mapping[VertexId, Any]] = None,
) -> dict[VertexId, Vertex]:
    """Return a vertex record for every id referenced by the adjacency."""
    supplied = dict(vertices) if vertices else {}
    normalized: dict[VertexId, Vertex] = {}

    def _add(vid: VertexId) -> None:
        if vid in normalized:
            return
        if vid in supplied:
            normalized[vid] = coerce_vertex(supplied[vid], label=f"vertices[{vid!r}]")
        else:
            normalized[vid] = Vertex(progress=True)

    for va, adjs in adjacency.items():
        _add(va)
        for vb in adjs:
            _add(vb)

    dropped = [vid for vid in supplied if vid not in normalized]
    if dropped:
        logger.debug("Ignoring vertex records outside the adjacency: %s", dropped)
    return normalized


def with_artificial_vertices(
    vertices: Mapping[VertexId, Vertex],
) -> dict[VertexRef, Vertex]:
    """Copy of ``vertices`` with the Start and End sentinels added."""
    if ARTIFICIAL_START in vertices or ARTIFICIAL_END in vertices:
        raise ValidationError("vertices already contain artificial boundary vertices.")
    augmented: dict[VertexRef, Vertex] = dict(vertices)
    augmented[ARTIFICIAL_START] = Vertex(
        progress=True, artificial=True, boundary=Boundary.SOURCE
    )
    augmented[ARTIFICIAL_END] = Vertex(
        progress=False, artificial=True, boundary=Boundary.SINK
    )
    return augmented


def is_artificial(vertex: VertexRef) -> bool:
    return isinstance(vertex, Sentinel)


__all__ = [
    "ARTIFICIAL_END",
    "ARTIFICIAL_START",
    "Adjacency",
    "Boundary",
    "Sentinel",
    "Vertex",
    "VertexId",
    "VertexRef",
    "coerce_vertex",
    "is_artificial",
    "normalize_adjacency",
    "normalize_vertices",
    "with_artificial_vertices",
]
