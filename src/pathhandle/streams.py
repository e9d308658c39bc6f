"""Asynchronous file write streams."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Optional, Type, Union

import anyio
from anyio import AsyncFile

from .config import default_encoding

logger = logging.getLogger(__name__)


class FileWriteStream:
    """A binary output stream paired with a completion signal.

    The signal fires once :meth:`aclose` has finalized the underlying file, so
    one task can write while another waits on :meth:`wait_closed`. The caller
    owns the stream and must close it on every exit path.
    """

    def __init__(self, path: str, stream: AsyncFile[bytes]) -> None:
        self.path = path
        self.stream = stream
        self._finished = anyio.Event()
        self._bytes_written = 0

    @classmethod
    async def open(cls, path: str) -> "FileWriteStream":
        stream = await anyio.open_file(path, "wb")
        logger.debug("opened write stream", extra={"path": path})
        return cls(path, stream)

    @property
    def closed(self) -> bool:
        return self._finished.is_set()

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    async def write(self, data: Union[bytes, bytearray, memoryview, str]) -> int:
        if self.closed:
            raise ValueError(f"write stream for \"{self.path}\" is already closed")
        payload = data.encode(default_encoding()) if isinstance(data, str) else bytes(data)
        written = await self.stream.write(payload)
        self._bytes_written += written
        return written

    async def aclose(self) -> None:
        if self.closed:
            return
        try:
            await self.stream.aclose()
        finally:
            self._finished.set()
            logger.debug(
                "closed write stream",
                extra={"path": self.path, "bytes_written": self._bytes_written},
            )

    async def wait_closed(self) -> None:
        """Suspend until the stream has been finalized."""

        await self._finished.wait()

    async def __aenter__(self) -> "FileWriteStream":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
