from __future__ import annotations

from pathlib import Path

import pytest

from pathhandle import PathHandle, PathNotFoundError


def test_existing_file_is_file(workspace: Path):
    handle = PathHandle("./package.json")

    assert handle.exists()
    assert handle.type() == "file"
    assert handle.strict_type() == "file"
    assert handle.is_file_path()
    assert not handle.is_dir_path()


def test_existing_directory_is_directory(workspace: Path):
    handle = PathHandle("./")

    assert handle.exists()
    assert handle.type() == "directory"
    assert handle.strict_type() == "directory"
    assert handle.is_dir_path()


def test_missing_path_with_extension_is_guessed_file(workspace: Path):
    handle = PathHandle("./package.json2")

    assert not handle.exists()
    assert handle.type() == "file"
    with pytest.raises(PathNotFoundError) as excinfo:
        handle.strict_type()
    assert handle.path in str(excinfo.value)
    assert "strict_type" in str(excinfo.value)


def test_missing_path_without_extension_is_guessed_directory(workspace: Path):
    handle = PathHandle("build")

    assert handle.type() == "directory"
    assert handle.is_dir_path()
    with pytest.raises(PathNotFoundError):
        handle.strict_type()


def test_existing_entries_ignore_the_extension_heuristic(workspace: Path):
    (workspace / "LICENSE").write_text("MIT", encoding="utf-8")
    (workspace / "assets.d").mkdir()

    assert PathHandle("LICENSE").type() == "file"
    assert PathHandle("assets.d").type() == "directory"


def test_missing_entries_are_misclassified_by_the_heuristic(workspace: Path):
    assert PathHandle("LICENSE").type() == "directory"
    assert PathHandle("assets.d").type() == "file"


def test_classification_is_not_cached(workspace: Path):
    handle = PathHandle("later.d")
    assert handle.type() == "file"

    (workspace / "later.d").mkdir()
    assert handle.type() == "directory"

    (workspace / "later.d").rmdir()
    assert handle.type() == "file"
