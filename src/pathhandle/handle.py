"""The :class:`PathHandle` value and its file and directory operations."""

from __future__ import annotations

import json
import logging
import os
import shutil
from collections import abc
from typing import (
    IO,
    Any,
    AsyncIterable,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Type,
    Union,
)

import anyio
import anyio.to_thread
from anyio import AsyncFile
from pydantic import TypeAdapter, ValidationError

from .config import atomic_writes_enabled, default_encoding
from .errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotADirectoryPathError,
    NotAFileError,
    ParseError,
    PathNotFoundError,
)
from .fs import (
    PathType,
    StrPath,
    atomic_write_bytes,
    classify,
    entry_type,
    is_path,
    normalize_ext,
    resolve,
    split_path,
)
from .records import PathRecord
from .streams import FileWriteStream

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]
WriteChunk = Union[str, BytesLike]
WriteData = Union[WriteChunk, Iterable[WriteChunk]]
AsyncWriteData = Union[WriteData, AsyncIterable[WriteChunk]]


def _encode_chunk(chunk: WriteChunk, encoding: Optional[str]) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode(encoding or default_encoding())
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return bytes(chunk)
    raise TypeError(f"expected str or bytes-like data, got {type(chunk).__name__}")


def _to_bytes(data: WriteData, encoding: Optional[str]) -> bytes:
    if isinstance(data, (str, bytes, bytearray, memoryview)):
        return _encode_chunk(data, encoding)
    return b"".join(_encode_chunk(chunk, encoding) for chunk in data)


async def _collect_bytes(data: AsyncWriteData, encoding: Optional[str]) -> bytes:
    if isinstance(data, abc.AsyncIterable):
        chunks = [_encode_chunk(chunk, encoding) async for chunk in data]
        return b"".join(chunks)
    return _to_bytes(data, encoding)


def _decode(raw: bytes, encoding: Optional[str]) -> Union[bytes, str]:
    if encoding is None:
        return raw
    return raw.decode(encoding)


class PathHandle:
    """An immutable handle on a filesystem location.

    The handle resolves its fragments once, at construction, into an absolute
    path and derives ``root``, ``fullname``, ``name`` and ``ext`` from it. The
    filesystem is only consulted by the methods, never by the constructor, so
    a handle may point at something that does not exist yet.

    Relative fragments are resolved from the current working directory. A
    ``PathHandle`` may be passed as the first fragment, in which case the
    remaining fragments are resolved against its path::

        >>> config = PathHandle("/srv/app", "config.json")
        >>> config.name, config.ext
        ('config', '.json')
        >>> PathHandle(config, "..", "logs").path
        '/srv/app/logs'

    Every I/O method has an asynchronous twin prefixed with ``a``
    (``read_file`` / ``aread_file``) that runs on :mod:`anyio`.
    """

    __slots__ = ("_path", "_parts")

    def __init__(self, *paths: Union["PathHandle", StrPath]) -> None:
        fragments: List[str] = []
        has_handle = False
        for index, fragment in enumerate(paths):
            if isinstance(fragment, PathHandle):
                if has_handle:
                    raise InvalidArgumentError(
                        "Two or more PathHandle instances can't be used as PathHandle constructor arguments.",
                        operation="__init__",
                    )
                has_handle = True
                if index != 0:
                    raise InvalidArgumentError(
                        "The given PathHandle argument is not the first argument.",
                        operation="__init__",
                    )
                fragments.append(fragment.path)
                continue
            fragments.append(os.fspath(fragment))

        self._path = resolve(*fragments)
        self._parts = split_path(self._path)

    # Factories

    @classmethod
    def from_segments(cls, *segments: StrPath) -> "PathHandle":
        """Build a handle from raw path segments only."""

        for segment in segments:
            if isinstance(segment, PathHandle):
                raise InvalidArgumentError(
                    "PathHandle.from_segments() only accepts raw path segments; use PathHandle.from_handle().",
                    operation="from_segments",
                )
        return cls(*segments)

    @classmethod
    def from_handle(cls, handle: "PathHandle", *segments: StrPath) -> "PathHandle":
        """Build a handle from *handle* followed by raw segments."""

        if not isinstance(handle, PathHandle):
            raise InvalidArgumentError(
                f"PathHandle.from_handle() expects a PathHandle, got {type(handle).__name__}.",
                operation="from_handle",
            )
        return cls(handle, *segments)

    @classmethod
    def coerce(cls, value: Union["PathHandle", StrPath]) -> "PathHandle":
        """Return *value* unchanged if it is a handle, otherwise wrap it."""

        if isinstance(value, PathHandle):
            return value
        return cls(value)

    @staticmethod
    def is_path(*segments: StrPath) -> bool:
        return is_path(*segments)

    # Identity

    @property
    def path(self) -> str:
        """The absolute, normalized path of this handle."""

        return self._path

    @property
    def root(self) -> str:
        """The directory containing :attr:`path`."""

        return self._parts.root

    @property
    def fullname(self) -> str:
        """The final path segment, extension included."""

        return self._parts.fullname

    @property
    def name(self) -> str:
        """The final path segment without its extension."""

        return self._parts.name

    @property
    def ext(self) -> str:
        """The extension with its leading dot, or an empty string."""

        return self._parts.ext

    def __fspath__(self) -> str:
        return self._path

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._path!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PathHandle):
            return self._path == other._path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._path)

    # Guards

    def _not_found(self, operation: str, expected: Optional[PathType] = None) -> PathNotFoundError:
        return PathNotFoundError(
            f'Provided path "{self._path}" does not exist to perform PathHandle.{operation}() operation. '
            f"Please, provide a path that resolves to an actual {expected or 'file or directory'}.",
            path=self._path,
            operation=operation,
        )

    def _check_existence(self, operation: str, expected: Optional[PathType] = None) -> None:
        if not self.exists():
            raise self._not_found(operation, expected)

    def _check_as_file(self, operation: str) -> None:
        if not os.path.isfile(self._path):
            raise NotAFileError(
                f'Provided path "{self._path}" is not a file to perform file operation PathHandle.{operation}().',
                path=self._path,
                operation=operation,
            )

    def _check_as_directory(self, operation: str) -> None:
        if not os.path.isdir(self._path):
            raise NotADirectoryPathError(
                f'Provided path "{self._path}" is not a directory to perform directory operation PathHandle.{operation}().',
                path=self._path,
                operation=operation,
            )

    def _require_file(self, operation: str) -> None:
        self._check_existence(operation, "file")
        self._check_as_file(operation)

    def _require_directory(self, operation: str) -> None:
        self._check_existence(operation, "directory")
        self._check_as_directory(operation)

    def _check_writable_target(self, operation: str) -> None:
        if self.exists():
            self._check_as_file(operation)

    def _destination(self, target: StrPath, operation: str) -> str:
        raw = os.fspath(target)
        destination = resolve(self.root, raw)
        if os.path.exists(destination):
            shown = f'"{destination}"' if os.path.isabs(raw) else f'(resolved to "{destination}")'
            raise AlreadyExistsError(
                f"Provided path {shown} already exists to perform PathHandle.{operation}() operation. "
                "Please, choose another file name.",
                path=destination,
                operation=operation,
            )
        return destination

    def _new_file_on_dir(self, filename: StrPath, operation: str) -> str:
        self._require_directory(operation)
        target = resolve(self._path, filename)
        if os.path.exists(target):
            raise AlreadyExistsError(
                f'File on path "{target}" already exists to perform PathHandle.{operation}() operation.',
                path=target,
                operation=operation,
            )
        return target

    def _check_new_directory(self, operation: str) -> None:
        if self.exists():
            raise AlreadyExistsError(
                f'Directory on path "{self._path}" already exists to perform PathHandle.{operation}() operation.',
                path=self._path,
                operation=operation,
            )

    @staticmethod
    def _check_range(byte_offset: int, byte_length: Optional[int], operation: str) -> None:
        if byte_offset < 0:
            raise InvalidArgumentError(
                f"PathHandle.{operation}() byte offset must not be negative, got {byte_offset}.",
                operation=operation,
            )
        if byte_length is not None and byte_length < 0:
            raise InvalidArgumentError(
                f"PathHandle.{operation}() byte length must not be negative, got {byte_length}.",
                operation=operation,
            )

    # Classification

    def exists(self) -> bool:
        """Return whether the path resolves to an existing entry."""

        return os.path.exists(self._path)

    def type(self) -> PathType:
        """Return whether the path is a ``"file"`` or a ``"directory"``.

        Existing entries are inspected on disk. For a missing path the type is
        guessed from the extension, so an extension-less file reads as a
        directory and a dotted directory name reads as a file.
        """

        return classify(self._path, self.ext)

    def strict_type(self) -> PathType:
        """Like :meth:`type`, but raise instead of guessing.

        Raises:
            PathNotFoundError: If the path does not exist.
        """

        found = entry_type(self._path)
        if found is None:
            raise self._not_found("strict_type")
        return found

    def is_file_path(self) -> bool:
        return self.type() == "file"

    def is_dir_path(self) -> bool:
        return self.type() == "directory"

    # Derived paths

    def resolve(self, *paths: StrPath) -> str:
        """Resolve *paths* relative to this handle.

        Absolute paths resolve on their own. Relative paths resolve from the
        handle itself when it is a directory and from :attr:`root` when it is
        a file, so siblings of a file are addressed by name.
        """

        if paths and os.path.isabs(os.fspath(paths[0])):
            return resolve(*paths)
        base = self._path if self.is_dir_path() else self.root
        return resolve(base, *paths)

    def change_file_name(self, new_file_name: Optional[str], new_file_ext: Optional[str] = None) -> str:
        """Return this file's path with a new name and, optionally, extension.

        ``None`` as *new_file_name* keeps the current name. The extension may
        be given with or without its leading dot. The dot is always kept, so
        an empty extension leaves the name ending in ``.``.

        Raises:
            NotAFileError: If the handle is a directory.
        """

        if self.is_dir_path():
            raise NotAFileError(
                f'Provided path "{self._path}" is not a file to execute PathHandle.change_file_name() operation.',
                path=self._path,
                operation="change_file_name",
            )
        name = self.name if new_file_name is None else new_file_name
        ext = normalize_ext(self.ext if new_file_ext is None else new_file_ext)
        return resolve(self.root, f"{name}.{ext}")

    def change_file_ext(self, new_file_ext: str) -> str:
        """Return this file's path with its extension replaced.

        Raises:
            NotAFileError: If the handle is a directory.
        """

        if self.is_dir_path():
            raise NotAFileError(
                f'Provided path "{self._path}" is not a file to execute PathHandle.change_file_ext() operation.',
                path=self._path,
                operation="change_file_ext",
            )
        ext = normalize_ext(new_file_ext)
        return resolve(self.root, f"{self.name}.{ext}")

    def change_dir_name(self, new_dir_name: str) -> str:
        """Return this directory's path with its last segment replaced.

        Raises:
            NotADirectoryPathError: If the handle is a file.
        """

        if self.is_file_path():
            raise NotADirectoryPathError(
                f'Provided path "{self._path}" is not a directory to execute PathHandle.change_dir_name() operation.',
                path=self._path,
                operation="change_dir_name",
            )
        return resolve(self.root, new_dir_name)

    # Serialization

    def to_record(self) -> PathRecord:
        """Snapshot the handle, checking the filesystem at call time."""

        return PathRecord(
            path=self._path,
            exists=self.exists(),
            type=self.type(),
            root=self.root,
            name=self.name,
            fullname=self.fullname,
            ext=self.ext,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_record().model_dump()

    def to_json(self, fields: Optional[Sequence[Union[str, int]]] = None, indent: int = 0) -> str:
        """Serialize :meth:`to_record` to JSON text.

        *fields* restricts the output to the listed keys, in that order.
        *indent* is clamped to 10; zero or less gives compact output.
        """

        data = self.to_dict()
        if fields is not None:
            data = {key: data[key] for key in dict.fromkeys(str(field) for field in fields) if key in data}
        if indent and indent > 0:
            return json.dumps(data, ensure_ascii=False, indent=min(indent, 10))
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))

    # File methods

    def open_file(self, mode: str = "rb", encoding: Optional[str] = None) -> IO[Any]:
        """Open the file. The caller must close the returned object."""

        self._require_file("open_file")
        return open(self._path, mode, encoding=encoding)

    async def aopen_file(self, mode: str = "rb", encoding: Optional[str] = None) -> AsyncFile[Any]:
        self._require_file("aopen_file")
        return await anyio.open_file(self._path, mode, encoding=encoding)

    def read_file(self, encoding: Optional[str] = None) -> Union[bytes, str]:
        """Return the file contents as bytes, or as text when *encoding* is given."""

        self._require_file("read_file")
        with open(self._path, "rb") as handle:
            raw = handle.read()
        return _decode(raw, encoding)

    async def aread_file(self, encoding: Optional[str] = None) -> Union[bytes, str]:
        self._require_file("aread_file")
        raw = await anyio.Path(self._path).read_bytes()
        return _decode(raw, encoding)

    def _parse_json(self, raw: bytes, encoding: Optional[str], model: Optional[Type[Any]], operation: str) -> Any:
        try:
            data = json.loads(raw.decode(encoding or default_encoding()))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ParseError(
                f'Failed to parse "{self._path}" in PathHandle.{operation}(): {exc}',
                path=self._path,
                operation=operation,
            ) from exc
        if model is None:
            return data
        try:
            return TypeAdapter(model).validate_python(data)
        except ValidationError as exc:
            raise ParseError(
                f'Failed to parse "{self._path}" in PathHandle.{operation}(): {exc}',
                path=self._path,
                operation=operation,
            ) from exc

    def read_json_file(self, encoding: Optional[str] = None, model: Optional[Type[Any]] = None) -> Any:
        """Read and parse the file as JSON.

        When *model* is given the parsed data is validated into it with
        pydantic.

        Raises:
            ParseError: If the content is not valid JSON or does not match *model*.
        """

        with open(self._path, "rb") as handle:
            raw = handle.read()
        return self._parse_json(raw, encoding, model, "read_json_file")

    async def aread_json_file(self, encoding: Optional[str] = None, model: Optional[Type[Any]] = None) -> Any:
        raw = await anyio.Path(self._path).read_bytes()
        return self._parse_json(raw, encoding, model, "aread_json_file")

    def write_file(self, data: WriteData, encoding: Optional[str] = None) -> str:
        """Write *data* to the path and return the path.

        An existing file is deleted before the new content is written, which
        leaves a window where neither version exists. Set
        ``PATHHANDLE_ATOMIC_WRITES=1`` to replace the file in one step instead.
        """

        self._check_writable_target("write_file")
        payload = _to_bytes(data, encoding)
        if atomic_writes_enabled():
            atomic_write_bytes(self._path, payload)
        else:
            if self.exists():
                self.delete_file()
            with open(self._path, "wb") as handle:
                handle.write(payload)
        logger.debug("wrote file", extra={"path": self._path, "size": len(payload)})
        return self._path

    async def awrite_file(self, data: AsyncWriteData, encoding: Optional[str] = None) -> str:
        self._check_writable_target("awrite_file")
        payload = await _collect_bytes(data, encoding)
        if atomic_writes_enabled():
            await anyio.to_thread.run_sync(atomic_write_bytes, self._path, payload)
        else:
            if self.exists():
                await self.adelete_file()
            await anyio.Path(self._path).write_bytes(payload)
        logger.debug("wrote file", extra={"path": self._path, "size": len(payload)})
        return self._path

    def delete_file(self) -> None:
        self._require_file("delete_file")
        os.unlink(self._path)
        logger.debug("deleted file", extra={"path": self._path})

    async def adelete_file(self) -> None:
        self._require_file("adelete_file")
        await anyio.Path(self._path).unlink()
        logger.debug("deleted file", extra={"path": self._path})

    def check_then_delete_file(self) -> None:
        """Delete the file if it exists; do nothing otherwise.

        Raises:
            NotAFileError: If the handle is a directory.
        """

        if self.is_dir_path():
            raise NotAFileError(
                f'Provided path "{self._path}" is not a file to execute PathHandle.check_then_delete_file() operation.',
                path=self._path,
                operation="check_then_delete_file",
            )
        if self.exists():
            self.delete_file()

    async def acheck_then_delete_file(self) -> None:
        if self.is_dir_path():
            raise NotAFileError(
                f'Provided path "{self._path}" is not a file to execute PathHandle.acheck_then_delete_file() operation.',
                path=self._path,
                operation="acheck_then_delete_file",
            )
        if self.exists():
            await self.adelete_file()

    def rename_file(self, new_path: StrPath) -> str:
        """Move the file to *new_path* and return the new location.

        Relative destinations resolve from :attr:`root`.

        Raises:
            AlreadyExistsError: If something already exists at the destination.
        """

        self._require_file("rename_file")
        destination = self._destination(new_path, "rename_file")
        os.rename(self._path, destination)
        logger.debug("renamed file", extra={"path": self._path, "destination": destination})
        return destination

    async def arename_file(self, new_path: StrPath) -> str:
        self._require_file("arename_file")
        destination = self._destination(new_path, "arename_file")
        await anyio.Path(self._path).rename(destination)
        logger.debug("renamed file", extra={"path": self._path, "destination": destination})
        return destination

    def copy_file(self, dest_path: StrPath) -> str:
        """Copy the file to *dest_path* and return the copy's location.

        Relative destinations resolve from :attr:`root`.

        Raises:
            AlreadyExistsError: If something already exists at the destination.
        """

        self._require_file("copy_file")
        destination = self._destination(dest_path, "copy_file")
        shutil.copyfile(self._path, destination)
        logger.debug("copied file", extra={"path": self._path, "destination": destination})
        return destination

    async def acopy_file(self, dest_path: StrPath) -> str:
        self._require_file("acopy_file")
        destination = self._destination(dest_path, "acopy_file")
        await anyio.to_thread.run_sync(shutil.copyfile, self._path, destination)
        logger.debug("copied file", extra={"path": self._path, "destination": destination})
        return destination

    async def acreate_file_write_stream(self) -> FileWriteStream:
        """Open a fresh write stream on the path, deleting any existing file.

        The returned stream exposes ``wait_closed()``, which completes once the
        stream has been closed with ``aclose()``.
        """

        self._check_writable_target("acreate_file_write_stream")
        if self.exists():
            await self.adelete_file()
        return await FileWriteStream.open(self._path)

    def read_file_offset(self, byte_offset: int, byte_length: Optional[int] = None) -> bytes:
        """Read bytes starting at *byte_offset*.

        With *byte_length*, exactly that many bytes are returned, padded with
        zero bytes past the end of the file. Without it, the rest
        of the file is returned.
        """

        self._require_file("read_file_offset")
        self._check_range(byte_offset, byte_length, "read_file_offset")
        if byte_length is not None:
            with open(self._path, "rb") as handle:
                handle.seek(byte_offset)
                return handle.read(byte_length).ljust(byte_length, b"\x00")
        with open(self._path, "rb") as handle:
            return handle.read()[byte_offset:]

    async def aread_file_offset(self, byte_offset: int, byte_length: Optional[int] = None) -> bytes:
        self._require_file("aread_file_offset")
        self._check_range(byte_offset, byte_length, "aread_file_offset")
        if byte_length is not None:
            async with await anyio.open_file(self._path, "rb") as handle:
                await handle.seek(byte_offset)
                chunk = await handle.read(byte_length)
                return chunk.ljust(byte_length, b"\x00")
        raw = await anyio.Path(self._path).read_bytes()
        return raw[byte_offset:]

    # Directory methods

    def create_file_on_dir(
        self,
        filename: StrPath,
        data: Optional[WriteData] = None,
        encoding: Optional[str] = None,
    ) -> str:
        """Create *filename* inside this directory and return its path.

        Raises:
            AlreadyExistsError: If the file already exists.
        """

        target = self._new_file_on_dir(filename, "create_file_on_dir")
        payload = _to_bytes(data if data is not None else b"", encoding)
        with open(target, "xb") as handle:
            handle.write(payload)
        logger.debug("created file", extra={"path": target, "size": len(payload)})
        return target

    async def acreate_file_on_dir(
        self,
        filename: StrPath,
        data: Optional[AsyncWriteData] = None,
        encoding: Optional[str] = None,
    ) -> str:
        target = self._new_file_on_dir(filename, "acreate_file_on_dir")
        payload = await _collect_bytes(data if data is not None else b"", encoding)
        async with await anyio.open_file(target, "xb") as handle:
            await handle.write(payload)
        logger.debug("created file", extra={"path": target, "size": len(payload)})
        return target

    def read_dir(self, as_absolute_paths: bool = False) -> List[str]:
        """List the directory entries, sorted by name."""

        self._require_directory("read_dir")
        entries = sorted(os.listdir(self._path))
        if as_absolute_paths:
            return [os.path.join(self._path, entry) for entry in entries]
        return entries

    async def aread_dir(self, as_absolute_paths: bool = False) -> List[str]:
        self._require_directory("aread_dir")
        entries = sorted([entry.name async for entry in anyio.Path(self._path).iterdir()])
        if as_absolute_paths:
            return [os.path.join(self._path, entry) for entry in entries]
        return entries

    def mk_dir(self, recursive: bool = False) -> str:
        """Create the directory, and its parents when *recursive* is set.

        Raises:
            AlreadyExistsError: If anything already exists at the path.
        """

        self._check_new_directory("mk_dir")
        if recursive:
            os.makedirs(self._path)
        else:
            os.mkdir(self._path)
        logger.debug("created directory", extra={"path": self._path, "recursive": recursive})
        return self._path

    async def amk_dir(self, recursive: bool = False) -> str:
        self._check_new_directory("amk_dir")
        await anyio.Path(self._path).mkdir(parents=recursive)
        logger.debug("created directory", extra={"path": self._path, "recursive": recursive})
        return self._path

    def delete_dir(self, recursive: bool = True) -> None:
        """Delete the directory.

        With *recursive* the whole tree goes; otherwise the directory must be
        empty.
        """

        self._require_directory("delete_dir")
        if recursive:
            shutil.rmtree(self._path)
        else:
            os.rmdir(self._path)
        logger.debug("deleted directory", extra={"path": self._path, "recursive": recursive})

    async def adelete_dir(self, recursive: bool = True) -> None:
        self._require_directory("adelete_dir")
        if recursive:
            await anyio.to_thread.run_sync(shutil.rmtree, self._path)
        else:
            await anyio.Path(self._path).rmdir()
        logger.debug("deleted directory", extra={"path": self._path, "recursive": recursive})


def to_handle(value: Union[PathHandle, StrPath]) -> PathHandle:
    """Coerce a raw path or an existing handle into a :class:`PathHandle`."""

    return PathHandle.coerce(value)
