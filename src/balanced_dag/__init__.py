"""Exact rational progress weights for directed acyclic graphs."""

__version__ = "0.1.0"

from balanced_dag.core import (  # noqa: E402
    BalancedDag,
    BalanceSettings,
    balanced_dag,
    enumerate_paths,
)
from balanced_dag.graphs.balance import BASIS_WEIGHT  # noqa: E402
from balanced_dag.graphs.vertices import ARTIFICIAL_END, ARTIFICIAL_START  # noqa: E402

__all__ = [
    "__version__",
    "ARTIFICIAL_END",
    "ARTIFICIAL_START",
    "BASIS_WEIGHT",
    "BalanceSettings",
    "BalancedDag",
    "balanced_dag",
    "enumerate_paths",
]
