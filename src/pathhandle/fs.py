"""Path algebra and filesystem inspection helpers used by path handles."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Literal, Optional, Union

PathType = Literal["file", "directory"]

StrPath = Union[str, os.PathLike]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathParts:
    """The identity fields derived from an absolute path."""

    root: str
    fullname: str
    name: str
    ext: str


def resolve(*segments: StrPath) -> str:
    """Resolve *segments* into an absolute, normalized path.

    Relative segments are joined onto the current working directory and an
    absolute segment restarts resolution from itself. Symlinks are left alone.
    With no segments the current working directory is returned.
    """

    parts = [os.fspath(segment) for segment in segments]
    parts = [part for part in parts if part]
    if not parts:
        return os.getcwd()
    return os.path.abspath(os.path.join(*parts))


def split_path(path: str) -> PathParts:
    """Split an absolute *path* into root, fullname, name and extension.

    Leading dots never start an extension, so ``.env`` has none while
    ``archive.tar.gz`` has ``.gz``.
    """

    root = os.path.dirname(path)
    fullname = os.path.basename(path)
    name, ext = os.path.splitext(fullname)
    return PathParts(root=root, fullname=fullname, name=name, ext=ext)


def is_path(*segments: StrPath) -> bool:
    """Return whether the resolved *segments* point at an existing entry."""

    return os.path.exists(resolve(*segments))


def entry_type(path: str) -> Optional[PathType]:
    """Inspect *path* on disk, returning ``None`` when nothing is there."""

    if not os.path.exists(path):
        return None
    return "file" if os.path.isfile(path) else "directory"


def classify(path: str, ext: str) -> PathType:
    """Classify *path*, guessing from *ext* when the entry does not exist."""

    found = entry_type(path)
    if found is not None:
        return found
    return "file" if ext else "directory"


def normalize_ext(ext: str) -> str:
    """Strip a single leading dot from an extension."""

    return ext[1:] if ext.startswith(".") else ext


def atomic_write_bytes(path: str, data: bytes) -> None:
    """Write *data* to a sibling temp file and move it over *path*."""

    directory = os.path.dirname(path) or "."
    with tempfile.NamedTemporaryFile(
        dir=directory,
        prefix=f".{os.path.basename(path)}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        temp_path = tmp.name
        try:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        except BaseException:
            tmp.close()
            _discard(temp_path)
            raise
    try:
        os.replace(temp_path, path)
    except BaseException:
        _discard(temp_path)
        raise
    logger.debug("replaced file atomically", extra={"path": path})


def _discard(temp_path: str) -> None:
    try:
        os.unlink(temp_path)
    except FileNotFoundError:
        pass
