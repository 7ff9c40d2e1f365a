"""Tabular export of balancing results."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

import pandas as pd

from balanced_dag.core import BalancedDag, format_fraction

PROGRESS_COLUMNS = ("vertex", "progress", "progress_fraction")
EDGE_COLUMNS = ("source", "target", "weight", "weight_fraction")
PROGRESS_TABLE_NAME = "vertex_progresses.csv"
EDGE_TABLE_NAME = "edge_weights.csv"


def progress_frame(result: BalancedDag) -> pd.DataFrame:
    rows: list[dict[str, Any]] = [
        {
            "vertex": vid,
            "progress": entry.progress,
            "progress_fraction": format_fraction(entry.progress_fraction),
        }
        for vid, entry in result.vertex_progresses.items()
    ]
    return pd.DataFrame(rows, columns=list(PROGRESS_COLUMNS))


def edge_frame(result: BalancedDag) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for va, row in result.edge_weights.items():
        for vb, edge in row.items():
            rows.append(
                {
                    "source": va,
                    "target": vb,
                    "weight": None if edge.weight is None else float(edge.weight),
                    "weight_fraction": None
                    if edge.weight is None
                    else format_fraction(edge.weight),
                }
            )
    return pd.DataFrame(rows, columns=list(EDGE_COLUMNS))


def write_tables(result: BalancedDag, out_dir: Union[str, Path]) -> dict[str, Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "vertex_progresses": out_dir / PROGRESS_TABLE_NAME,
        "edge_weights": out_dir / EDGE_TABLE_NAME,
    }
    progress_frame(result).to_csv(paths["vertex_progresses"], index=False)
    edge_frame(result).to_csv(paths["edge_weights"], index=False)
    return paths


__all__ = [
    "EDGE_COLUMNS",
    "EDGE_TABLE_NAME",
    "PROGRESS_COLUMNS",
    "PROGRESS_TABLE_NAME",
    "edge_frame",
    "progress_frame",
    "write_tables",
]
