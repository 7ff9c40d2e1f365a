from fractions import Fraction

import pytest

from balanced_dag import BASIS_WEIGHT, BalanceSettings, balanced_dag, enumerate_paths
from balanced_dag.errors import CyclicInputError, PathLimitError, ValidationError
from balanced_dag.graphs.vertices import ARTIFICIAL_END, ARTIFICIAL_START


def _path_sum(result, path):
    total = Fraction(0)
    inner = [
        vertex for vertex in path if vertex not in (ARTIFICIAL_START, ARTIFICIAL_END)
    ]
    for va, vb in zip(inner, inner[1:]):
        total += result.weight(va, vb)
    return total


def test_example_result(example_adjacency) -> None:
    result = balanced_dag(example_adjacency)

    assert set(result.vertex_progresses) == {
        "foo", "zip", "bar", "baz", "zappity", "zop", "zoop", "bing",
    }
    assert list(result.edge_weights) == list(example_adjacency)
    for va, adjs in example_adjacency.items():
        assert list(result.edge_weights[va]) == adjs
    assert result.weight("foo", "baz") == Fraction(1, 2)
    assert result.weight("zappity", "zoop") == Fraction(1, 2)
    assert result.vertex_progresses["zop"].progress_fraction == Fraction(3, 4)
    assert result.vertex_progresses["zop"].progress == 0.75
    assert len(result.paths) == 5


def test_every_path_sums_to_one_exactly() -> None:
    adjacency = {
        "s": ["a", "b", "c"],
        "a": ["t"],
        "b": ["b1"],
        "b1": ["t"],
        "c": ["c1"],
        "c1": ["c2"],
        "c2": ["c3"],
        "c3": ["c4"],
        "c4": ["t"],
    }

    result = balanced_dag(adjacency)

    for path in result.paths:
        start_weight = Fraction(0)
        if path[1] in result.vertex_progresses:
            start_weight = result.vertex_progresses[path[1]].progress_fraction
        assert start_weight + _path_sum(result, path) == BASIS_WEIGHT
    for row in result.edge_weights.values():
        for edge in row.values():
            assert isinstance(edge.weight, Fraction)
            assert 0 <= edge.weight <= 1
    assert result.weight("c", "c1") == Fraction(1, 7)


def test_non_progress_source_starts_at_zero() -> None:
    adjacency = {"a": ["b"], "b": ["c"]}

    plain = balanced_dag(adjacency)
    flagged = balanced_dag(adjacency, {"a": {"progress": False}})

    assert plain.vertex_progresses["a"].progress_fraction == Fraction(1, 3)
    assert flagged.vertex_progresses["a"].progress_fraction == 0
    assert flagged.weight("a", "b") == Fraction(1, 2)
    assert flagged.vertex_progresses["c"].progress_fraction == 1


def test_results_are_deterministic(example_adjacency) -> None:
    first = balanced_dag({va: list(adjs) for va, adjs in example_adjacency.items()})
    second = balanced_dag({va: list(adjs) for va, adjs in example_adjacency.items()})

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_disconnected_vertex_gets_no_progress() -> None:
    result = balanced_dag({"a": ["b"], "lonely": [], "b": []})

    assert "lonely" not in result.vertex_progresses
    assert result.edge_weights["lonely"] == {}
    assert result.edge_weights["b"] == {}
    assert result.weight("a", "b") == Fraction(1, 2)


def test_sentinel_lookalike_ids() -> None:
    result = balanced_dag({"start": ["end"]})

    assert set(result.vertex_progresses) == {"start", "end"}
    assert result.vertex_progresses["end"].progress_fraction == 1


def test_cycle_is_rejected() -> None:
    with pytest.raises(CyclicInputError) as exc:
        balanced_dag({"a": ["b"], "b": ["c"], "c": ["a"]})

    assert "acyclic" in exc.value.user_message
    assert exc.value.context["cycle"][0] == exc.value.context["cycle"][-1]


def test_cycle_is_caught_during_enumeration_without_validation() -> None:
    settings = BalanceSettings(validate_acyclic=False)

    with pytest.raises(CyclicInputError):
        balanced_dag({"s": ["a"], "a": ["b"], "b": ["a", "t"]}, settings=settings)


def test_path_limit_from_settings(example_adjacency) -> None:
    with pytest.raises(PathLimitError):
        balanced_dag(example_adjacency, settings=BalanceSettings(max_paths=2))
    assert len(enumerate_paths(example_adjacency)) == 5


def test_invalid_settings_are_rejected(example_adjacency) -> None:
    with pytest.raises(ValidationError) as exc:
        balanced_dag(example_adjacency, settings=BalanceSettings(max_paths=0))

    assert "max_paths" in str(exc.value)


def test_to_dict_renders_fractions(example_adjacency) -> None:
    payload = balanced_dag(example_adjacency).to_dict()

    assert payload["edge_weights"]["foo"]["baz"] == {"weight": "1/2"}
    assert payload["vertex_progresses"]["bing"] == {
        "progress": 1.0,
        "progress_fraction": "1/1",
    }


def test_to_dict_rejects_ids_with_the_same_string_form() -> None:
    result = balanced_dag({1: [2], "1": ["x"]})
    assert 1 in result.edge_weights and "1" in result.edge_weights

    with pytest.raises(ValidationError) as exc:
        result.to_dict()

    assert "'1'" in exc.value.user_message
    assert exc.value.context["collisions"] == {"1": [1, "1"]}


def test_to_dict_keeps_non_string_ids_that_stay_distinct() -> None:
    payload = balanced_dag({1: [2], 2: [3]}).to_dict()

    assert payload["edge_weights"]["1"]["2"] == {"weight": "1/3"}
    assert set(payload["vertex_progresses"]) == {"1", "2", "3"}
