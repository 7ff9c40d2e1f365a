from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_path = str(src_root)
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


@pytest.fixture
def example_adjacency() -> dict[str, list[str]]:
    return {
        "foo": ["bar", "baz"],
        "zip": ["bar", "zappity"],
        "bar": ["baz"],
        "zappity": ["zop", "zoop"],
        "zop": ["bing"],
        "baz": ["bing"],
    }


@pytest.fixture
def run_cli():
    src_root = Path(__file__).resolve().parents[1] / "src"

    def _run(*args: str, cwd=None) -> subprocess.CompletedProcess[str]:
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            [str(src_root), *filter(None, [env.get("PYTHONPATH")])]
        )
        return subprocess.run(
            [sys.executable, "-m", "balanced_dag.cli", *args],
            capture_output=True,
            text=True,
            cwd=cwd,
            env=env,
        )

    return _run
