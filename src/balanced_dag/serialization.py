"""Graph file loading and result payloads."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
from pathlib import Path
from typing import Any, Union

import yaml

from balanced_dag.core import BalancedDag
from balanced_dag.errors import ConfigError, ValidationError
from balanced_dag.io_utils import (
    read_json,
    read_yaml_payload,
    write_json_atomic,
    write_yaml_payload,
)
from balanced_dag.graphs.paths import Path as VertexPath
from balanced_dag.graphs.vertices import is_artificial

GRAPH_SUFFIXES = (".json", ".yaml", ".yml")


def load_graph_file(
    path: Union[str, Path],
) -> tuple[dict[str, list[str]], dict[str, Any]]:
    """Read ``adjacency`` and optional ``vertices`` from a JSON or YAML file."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Graph file not found: {path}")
    if path.suffix.lower() not in GRAPH_SUFFIXES:
        raise ConfigError(
            f"Unsupported graph file type {path.suffix!r}; use .json, .yaml or .yml."
        )
    try:
        if path.suffix.lower() == ".json":
            payload = read_json(path)
        else:
            payload = read_yaml_payload(path)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read graph file {path}: {exc}") from exc
    return parse_graph_payload(payload, label=str(path))


def parse_graph_payload(
    payload: Any,
    *,
    label: str = "graph",
) -> tuple[dict[str, list[str]], dict[str, Any]]:
    if not isinstance(payload, Mapping):
        raise ValidationError(f"{label} must be a mapping with an 'adjacency' key.")
    adjacency = payload.get("adjacency")
    if not isinstance(adjacency, Mapping):
        raise ValidationError(f"{label}.adjacency must be a mapping.")
    normalized: dict[str, list[str]] = {}
    for va, adjs in adjacency.items():
        if adjs is None:
            adjs = []
        if isinstance(adjs, str) or not isinstance(adjs, Sequence):
            raise ValidationError(f"{label}.adjacency[{va!r}] must be a list.")
        normalized[str(va)] = [str(vb) for vb in adjs]
    vertices = payload.get("vertices") or {}
    if not isinstance(vertices, Mapping):
        raise ValidationError(f"{label}.vertices must be a mapping.")
    return normalized, {str(vid): record for vid, record in vertices.items()}


def format_path(path: VertexPath) -> list[str]:
    return [
        f"<{vertex.name.lower()}>" if is_artificial(vertex) else str(vertex)
        for vertex in path
    ]


def result_payload(
    result: BalancedDag,
    *,
    include_paths: bool = False,
) -> dict[str, Any]:
    payload = result.to_dict()
    if include_paths:
        payload["paths"] = [format_path(path) for path in result.paths]
    return payload


def write_result(
    path: Union[str, Path],
    result: BalancedDag,
    *,
    include_paths: bool = False,
) -> Path:
    path = Path(path)
    payload = result_payload(result, include_paths=include_paths)
    if path.suffix.lower() in (".yaml", ".yml"):
        write_yaml_payload(path, payload, sort_keys=False)
    else:
        write_json_atomic(path, payload)
    return path


__all__ = [
    "GRAPH_SUFFIXES",
    "format_path",
    "load_graph_file",
    "parse_graph_payload",
    "result_payload",
    "write_result",
]
