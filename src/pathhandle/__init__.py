"""Filesystem path handles bundling path identity with file and directory I/O."""

from importlib.metadata import version, PackageNotFoundError

from .errors import (
    AlreadyExistsError,
    ErrorPayload,
    InvalidArgumentError,
    NotADirectoryPathError,
    NotAFileError,
    ParseError,
    PathHandleError,
    PathNotFoundError,
    WrongTypeError,
    build_error_payload,
)
from .fs import PathType, is_path, resolve
from .handle import PathHandle, to_handle
from .logging_conf import configure_logging
from .records import PathRecord
from .streams import FileWriteStream

try:  # pragma: no cover - metadata lookup is cached by packaging
    __version__ = version("pathhandle")
except PackageNotFoundError:  # pragma: no cover - fallback for local development
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "AlreadyExistsError",
    "ErrorPayload",
    "FileWriteStream",
    "InvalidArgumentError",
    "NotADirectoryPathError",
    "NotAFileError",
    "ParseError",
    "PathHandle",
    "PathHandleError",
    "PathNotFoundError",
    "PathRecord",
    "PathType",
    "WrongTypeError",
    "build_error_payload",
    "configure_logging",
    "is_path",
    "resolve",
    "to_handle",
]
