from __future__ import annotations
"""Read-only handle over a single object body."""
from typing import BinaryIO

from botocore.exceptions import BotoCoreError

from .errors import ClosedHandleError, NotDirectoryError, TransportError
from .models import EntryMetadata


class FileHandle:
    """Owns the body stream of one object until closed."""

    def __init__(self, body: BinaryIO, info: EntryMetadata):
        self._body = body
        self._info = info
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def stat(self) -> EntryMetadata:
        return self._info

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (everything left when negative).

        Returns ``b""`` at the end of the stream.
        """

        self._check_open()
        try:
            if size is None or size < 0:
                return self._body.read()
            return self._body.read(size)
        except (BotoCoreError, OSError) as exc:
            raise TransportError(f"error reading s3 object {self._info.name}: {exc}") from exc

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        data = self.read(len(view))
        view[: len(data)] = data
        return len(data)

    def read_entries(self, n: int = -1):
        raise NotDirectoryError(f"not a directory: {self._info.name}")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._body.close()

    def __enter__(self) -> "FileHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FileHandle(name={self._info.name!r}, size={self._info.size}, closed={self._closed})"

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedHandleError(f"file is closed: {self._info.name}")
