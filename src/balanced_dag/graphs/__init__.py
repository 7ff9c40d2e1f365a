"""Graph stages of the weight-balancing pipeline."""

from balanced_dag.graphs.balance import (
    BASIS_WEIGHT,
    GroupedEdges,
    balanced_edges,
    grouped_edges,
    unbalanced_paths,
)
from balanced_dag.graphs.edges import (
    Edge,
    EdgeTable,
    SourcesAndSinks,
    edges_with_sources_and_sinks,
    sources_and_sinks,
)
from balanced_dag.graphs.paths import Path, all_paths
from balanced_dag.graphs.progress import (
    VertexProgress,
    balanced_progresses,
    without_artificial_vertex_edges,
    without_artificial_vertices,
)
from balanced_dag.graphs.vertices import (
    ARTIFICIAL_END,
    ARTIFICIAL_START,
    Boundary,
    Sentinel,
    Vertex,
    normalize_adjacency,
    normalize_vertices,
    with_artificial_vertices,
)

__all__ = [
    "ARTIFICIAL_END",
    "ARTIFICIAL_START",
    "BASIS_WEIGHT",
    "Boundary",
    "Edge",
    "EdgeTable",
    "GroupedEdges",
    "Path",
    "Sentinel",
    "SourcesAndSinks",
    "Vertex",
    "VertexProgress",
    "all_paths",
    "balanced_edges",
    "balanced_progresses",
    "edges_with_sources_and_sinks",
    "grouped_edges",
    "normalize_adjacency",
    "normalize_vertices",
    "sources_and_sinks",
    "unbalanced_paths",
    "with_artificial_vertices",
    "without_artificial_vertex_edges",
    "without_artificial_vertices",
]
