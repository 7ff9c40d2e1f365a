import pytest

from balanced_dag.errors import ValidationError
from balanced_dag.graphs.vertices import (
    ARTIFICIAL_END,
    ARTIFICIAL_START,
    Boundary,
    Vertex,
    coerce_vertex,
    normalize_adjacency,
    normalize_vertices,
    with_artificial_vertices,
)


def test_normalize_vertices_covers_keys_and_successors() -> None:
    adjacency = {
        "foo": ["bar", "baz"],
        "bar": ["baz"],
        "baz": ["bing"],
    }

    vertices = normalize_vertices(adjacency)

    assert list(vertices) == ["foo", "bar", "baz", "bing"]
    assert all(vertex == Vertex(progress=True) for vertex in vertices.values())


def test_normalize_vertices_uses_caller_records(example_adjacency) -> None:
    supplied = {"zip": {"progress": False}, "bing": Vertex(progress=False)}

    vertices = normalize_vertices(example_adjacency, supplied)

    expected_ids = set(example_adjacency)
    for adjs in example_adjacency.values():
        expected_ids.update(adjs)
    assert set(vertices) == expected_ids
    assert vertices["zip"].progress is False
    assert vertices["bing"].progress is False
    assert vertices["foo"].progress is True
    assert supplied == {"zip": {"progress": False}, "bing": Vertex(progress=False)}


def test_normalize_vertices_drops_records_outside_adjacency() -> None:
    vertices = normalize_vertices({"a": ["b"]}, {"ghost": {"progress": False}})

    assert set(vertices) == {"a", "b"}


def test_with_artificial_vertices_adds_two_sentinels() -> None:
    vertices = normalize_vertices({"start": ["end"]})

    augmented = with_artificial_vertices(vertices)

    assert len(augmented) == len(vertices) + 2
    assert ARTIFICIAL_START in augmented and ARTIFICIAL_END in augmented
    assert ARTIFICIAL_START not in vertices
    assert ARTIFICIAL_START != "start" and ARTIFICIAL_END != "end"
    assert augmented[ARTIFICIAL_START] == Vertex(
        progress=True, artificial=True, boundary=Boundary.SOURCE
    )
    assert augmented[ARTIFICIAL_END] == Vertex(
        progress=False, artificial=True, boundary=Boundary.SINK
    )
    assert len(vertices) == 2


def test_with_artificial_vertices_rejects_existing_sentinel() -> None:
    with pytest.raises(ValidationError):
        with_artificial_vertices({ARTIFICIAL_START: Vertex()})


def test_coerce_vertex_variants() -> None:
    assert coerce_vertex(False) == Vertex(progress=False)
    assert coerce_vertex({}) == Vertex()
    assert coerce_vertex({"boundary": "sink"}).boundary is Boundary.SINK

    with pytest.raises(ValidationError) as exc:
        coerce_vertex({"progress": "no"}, label="vertices['a']")
    assert "vertices['a'].progress" in str(exc.value)

    with pytest.raises(ValidationError):
        coerce_vertex({"weight": 1})

    with pytest.raises(ValidationError):
        coerce_vertex(3)


def test_normalize_adjacency_keeps_order_and_drops_duplicates() -> None:
    adjacency = normalize_adjacency({"a": ["c", "b", "c"], "b": None, "c": ("d",)})

    assert adjacency == {"a": ("c", "b"), "b": (), "c": ("d",)}
    assert list(adjacency) == ["a", "b", "c"]


@pytest.mark.parametrize(
    "adjacency",
    [
        {"a": ["a"]},
        {"a": "bc"},
        {"a": [ARTIFICIAL_END]},
        {"a": [["b"]]},
        [("a", ["b"])],
    ],
)
def test_normalize_adjacency_rejects_bad_input(adjacency) -> None:
    with pytest.raises(ValidationError):
        normalize_adjacency(adjacency)
