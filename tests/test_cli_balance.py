import json

GRAPH_YAML = """\
adjacency:
  foo: [bar, baz]
  zip: [bar, zappity]
  bar: [baz]
  zappity: [zop, zoop]
  zop: [bing]
  baz: [bing]
vertices:
  zip:
    progress: true
"""


def _write_graph(tmp_path, text=GRAPH_YAML, name="graph.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_balance_writes_result(run_cli, tmp_path) -> None:
    graph = _write_graph(tmp_path)
    output = tmp_path / "out" / "result.json"

    result = run_cli(
        "balance",
        "--output",
        str(output),
        "--tables",
        str(tmp_path / "tables"),
        str(graph),
        cwd=tmp_path,
    )

    assert result.returncode == 0, result.stderr
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["edge_weights"]["foo"]["baz"] == {"weight": "1/2"}
    assert payload["vertex_progresses"]["zop"]["progress_fraction"] == "3/4"
    assert (tmp_path / "tables" / "edge_weights.csv").exists()
    assert (tmp_path / "tables" / "vertex_progresses.csv").exists()


def test_balance_prints_json_with_paths(run_cli, tmp_path) -> None:
    graph = _write_graph(tmp_path)

    result = run_cli("balance", "--include-paths", str(graph), cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["paths"][0] == ["<start>", "foo", "bar", "baz", "bing", "<end>"]
    assert len(payload["paths"]) == 5


def test_paths_lists_longest_first(run_cli, tmp_path) -> None:
    graph = _write_graph(tmp_path)

    result = run_cli("paths", str(graph), cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    lines = result.stdout.strip().splitlines()
    assert len(lines) == 5
    assert lines[-1] == "<start> -> zip -> zappity -> zoop -> <end>"


def test_balance_reports_cycles(run_cli, tmp_path) -> None:
    graph = _write_graph(
        tmp_path,
        text='{"adjacency": {"a": ["b"], "b": ["a"]}}',
        name="cycle.json",
    )

    result = run_cli("balance", str(graph), cwd=tmp_path)

    assert result.returncode == 1
    assert "acyclic" in result.stderr


def test_balance_path_limit_override(run_cli, tmp_path) -> None:
    graph = _write_graph(tmp_path)

    result = run_cli("balance", str(graph), "balance.max_paths=2", cwd=tmp_path)

    assert result.returncode == 1
    assert "max_paths" in result.stderr


def test_balance_accepts_options_after_graph(run_cli, tmp_path) -> None:
    graph = _write_graph(tmp_path)
    output = tmp_path / "result.json"

    result = run_cli(
        "balance",
        str(graph),
        "--max-paths",
        "5",
        "--output",
        str(output),
        "--include-paths",
        cwd=tmp_path,
    )

    assert result.returncode == 0, result.stderr
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert len(payload["paths"]) == 5
    assert payload["edge_weights"]["zappity"]["zoop"] == {"weight": "1/2"}


def test_max_paths_option_after_graph_is_enforced(run_cli, tmp_path) -> None:
    graph = _write_graph(tmp_path)

    result = run_cli("balance", str(graph), "--max-paths", "2", cwd=tmp_path)

    assert result.returncode == 1
    assert "max_paths" in result.stderr


def test_overrides_after_options_are_forwarded(run_cli, tmp_path) -> None:
    graph = _write_graph(tmp_path)

    result = run_cli(
        "paths",
        str(graph),
        "--config-name",
        "default",
        "balance.max_paths=2",
        cwd=tmp_path,
    )

    assert result.returncode == 1
    assert "max_paths" in result.stderr


def test_unknown_trailing_argument_is_rejected(run_cli, tmp_path) -> None:
    graph = _write_graph(tmp_path)

    result = run_cli("balance", str(graph), "--bogus", cwd=tmp_path)

    assert result.returncode == 2
    assert "unrecognized arguments" in result.stderr
