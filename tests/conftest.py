from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _clear_pathhandle_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings inherited from the parent shell out of the tests."""

    for name in (
        "PATHHANDLE_ENCODING",
        "PATHHANDLE_ATOMIC_WRITES",
        "PATHHANDLE_LOG_LEVEL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A project-like working directory with a manifest and a data folder."""

    project = tmp_path / "path-handle"
    project.mkdir()
    (project / "package.json").write_text(
        json.dumps({"name": "path-handle", "version": "1.4.0"}),
        encoding="utf-8",
    )
    data = project / "data"
    data.mkdir()
    (data / "blob.bin").write_bytes(bytes(range(256)))
    (data / "notes.txt").write_text("first line\nsecond line\n", encoding="utf-8")
    monkeypatch.chdir(project)
    return project
