from __future__ import annotations

import os
from pathlib import Path

import pytest

from pathhandle import fs


@pytest.mark.parametrize(
    ("fullname", "name", "ext"),
    [
        ("package.json", "package", ".json"),
        ("archive.tar.gz", "archive.tar", ".gz"),
        (".env", ".env", ""),
        (".eslintrc.json", ".eslintrc", ".json"),
        ("README", "README", ""),
        ("trailing.", "trailing", "."),
    ],
)
def test_split_path(fullname: str, name: str, ext: str):
    parts = fs.split_path(os.path.join(os.sep, "srv", fullname))

    assert parts.root == os.path.join(os.sep, "srv")
    assert parts.fullname == fullname
    assert parts.name == name
    assert parts.ext == ext


def test_resolve_skips_empty_segments(workspace: Path):
    assert fs.resolve("", "data", "") == str(workspace / "data")
    assert fs.resolve() == str(workspace)


def test_normalize_ext():
    assert fs.normalize_ext(".json") == "json"
    assert fs.normalize_ext("json") == "json"
    assert fs.normalize_ext("") == ""


def test_entry_type(workspace: Path):
    assert fs.entry_type(str(workspace / "package.json")) == "file"
    assert fs.entry_type(str(workspace / "data")) == "directory"
    assert fs.entry_type(str(workspace / "missing")) is None


def test_atomic_write_bytes_cleans_up_on_failure(workspace: Path, monkeypatch: pytest.MonkeyPatch):
    def failing_replace(src, dst):
        raise PermissionError("replace denied")

    monkeypatch.setattr(fs.os, "replace", failing_replace)

    with pytest.raises(PermissionError):
        fs.atomic_write_bytes(str(workspace / "package.json"), b"{}")

    assert sorted(os.listdir(workspace)) == ["data", "package.json"]
    assert (workspace / "package.json").read_text(encoding="utf-8").startswith('{"name"')
