"""Input validators for adjacency graphs and balancing settings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Optional

import networkx as nx

from balanced_dag.errors import CyclicInputError, ValidationError


def _raise_missing(label: str, missing: Sequence[str]) -> None:
    if not missing:
        return
    missing_list = ", ".join(missing)
    raise ValidationError(f"{label} validation failed: {missing_list}")


def adjacency_graph(adjacency: Mapping[Any, Iterable[Any]]) -> nx.DiGraph:
    """Build a networkx DiGraph preserving the adjacency insertion order."""
    graph = nx.DiGraph()
    for va, adjs in adjacency.items():
        graph.add_node(va)
        for vb in adjs:
            graph.add_edge(va, vb)
    return graph


def validate_adjacency(adjacency: Mapping[Any, Iterable[Any]]) -> nx.DiGraph:
    """Raise CyclicInputError when the adjacency graph is not a DAG."""
    graph = adjacency_graph(adjacency)
    if nx.is_directed_acyclic_graph(graph):
        return graph
    cycle = [va for va, _ in nx.find_cycle(graph)]
    cycle.append(cycle[0])
    rendered = " -> ".join(repr(vertex) for vertex in cycle)
    raise CyclicInputError(
        f"Adjacency graph contains a cycle: {rendered}",
        user_message=f"Input graph must be acyclic; found cycle {rendered}.",
        context={"cycle": cycle},
    )


def validate_max_paths(value: Optional[int], missing: list[str]) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        missing.append(f"max_paths must be a positive integer or null, got {value!r}")


def validate_settings(settings: Any) -> None:
    missing: list[str] = []
    validate_max_paths(getattr(settings, "max_paths", None), missing)
    for flag in ("validate_acyclic", "verify"):
        if not isinstance(getattr(settings, flag, None), bool):
            missing.append(f"{flag} must be a boolean")
    _raise_missing("Balance settings", missing)


__all__ = [
    "adjacency_graph",
    "validate_adjacency",
    "validate_max_paths",
    "validate_settings",
]
