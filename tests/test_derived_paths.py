from __future__ import annotations

import os
from pathlib import Path

import pytest

from pathhandle import NotADirectoryPathError, NotAFileError, PathHandle, WrongTypeError


def test_resolve_from_directory_uses_the_directory(workspace: Path):
    data = PathHandle("data")

    assert data.resolve("notes.txt") == str(workspace / "data" / "notes.txt")
    assert data.resolve("..", "package.json") == str(workspace / "package.json")


def test_resolve_from_file_uses_its_root(workspace: Path):
    notes = PathHandle("data/notes.txt")

    assert notes.resolve("blob.bin") == str(workspace / "data" / "blob.bin")


def test_resolve_absolute_ignores_the_receiver(workspace: Path, tmp_path: Path):
    notes = PathHandle("data/notes.txt")
    target = str(tmp_path / "elsewhere" / "x.txt")

    assert notes.resolve(target) == target


def test_resolve_follows_heuristic_for_missing_paths(workspace: Path):
    assert PathHandle("future").resolve("a.txt") == str(workspace / "future" / "a.txt")
    assert PathHandle("future.txt").resolve("a.txt") == str(workspace / "a.txt")


def test_resolve_without_fragments_returns_the_base(workspace: Path):
    assert PathHandle("data").resolve() == str(workspace / "data")
    assert PathHandle("data/notes.txt").resolve() == str(workspace / "data")


@pytest.mark.parametrize("new_ext", ["yaml", ".yaml"])
def test_change_file_ext_normalizes_the_dot(workspace: Path, new_ext: str):
    handle = PathHandle("package.json")

    assert handle.change_file_ext(new_ext) == str(workspace / "package.yaml")


def test_change_file_ext_on_directory_fails(workspace: Path):
    with pytest.raises(NotAFileError) as excinfo:
        PathHandle("data").change_file_ext("txt")

    assert isinstance(excinfo.value, WrongTypeError)
    assert "change_file_ext" in str(excinfo.value)


def test_change_file_name(workspace: Path):
    handle = PathHandle("package.json")

    assert handle.change_file_name("manifest") == str(workspace / "manifest.json")
    assert handle.change_file_name("manifest", "toml") == str(workspace / "manifest.toml")
    assert handle.change_file_name("manifest", ".toml") == str(workspace / "manifest.toml")
    assert handle.change_file_name(None, "lock") == str(workspace / "package.lock")


def test_change_file_name_does_not_mutate_the_receiver(workspace: Path):
    handle = PathHandle("package.json")
    handle.change_file_name("other", "txt")

    assert handle.fullname == "package.json"
    assert handle.path == str(workspace / "package.json")


def test_change_file_name_for_extensionless_file(workspace: Path):
    (workspace / "Makefile").write_text("all:\n", encoding="utf-8")
    handle = PathHandle("Makefile")

    assert handle.change_file_name("GNUmakefile") == str(workspace / "GNUmakefile.")
    assert handle.change_file_name(None, "mk") == str(workspace / "Makefile.mk")


def test_empty_extension_keeps_the_dot(workspace: Path):
    handle = PathHandle("package.json")

    assert handle.change_file_ext("") == str(workspace / "package.")
    assert handle.change_file_name("manifest", "") == str(workspace / "manifest.")


def test_change_file_name_on_directory_fails(workspace: Path):
    with pytest.raises(NotAFileError):
        PathHandle("data").change_file_name("other")


def test_change_dir_name(workspace: Path):
    data = PathHandle("data")

    assert data.change_dir_name("assets") == str(workspace / "assets")
    assert data.change_dir_name("assets.v2") == str(workspace / "assets.v2")


def test_change_dir_name_on_file_fails(workspace: Path):
    with pytest.raises(NotADirectoryPathError) as excinfo:
        PathHandle("package.json").change_dir_name("other")

    assert excinfo.value.path == str(workspace / "package.json")


def test_derived_paths_do_not_touch_the_filesystem(workspace: Path):
    before = sorted(os.listdir(workspace))
    handle = PathHandle("package.json")
    handle.change_file_ext("yaml")
    handle.change_file_name("x", "y")
    PathHandle("data").change_dir_name("z")

    assert sorted(os.listdir(workspace)) == before
