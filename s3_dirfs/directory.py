from __future__ import annotations
"""Directory listings and the resumable directory entry reader."""
import logging
from typing import Iterator

from .errors import ClosedHandleError, InvalidNameError, NotAFileError
from .models import EntryMetadata
from .paths import SEPARATOR
from .services import ObjectStoreClient, iter_pages

LOGGER = logging.getLogger(__name__)


def list_directory(client: ObjectStoreClient, bucket: str, prefix: str) -> list[EntryMetadata]:
    """Return every child of ``prefix`` in listing order.

    Each page contributes its objects first, then its common prefixes. The
    order is not alphabetical. An object stored under the directory key
    itself (``prefix`` ending with the separator) has no valid name and is
    rejected. This includes the zero-byte folder markers such as
    ``photos/`` that the S3 console creates, so a folder made that way
    raises :class:`InvalidNameError` when opened even if it has children.
    """

    entries: list[EntryMetadata] = []
    for page in iter_pages(client, bucket, prefix, SEPARATOR):
        for obj in page.objects:
            if obj.key.endswith(SEPARATOR):
                raise InvalidNameError(obj.key)
            entries.append(EntryMetadata.for_object(obj.key, obj.size, obj.last_modified))
        entries.extend(EntryMetadata.for_prefix(common) for common in page.prefixes)
    LOGGER.debug("Listed %d entries under '%s'", len(entries), prefix)
    return entries


class DirectoryReader:
    """An open directory: a fixed entry sequence plus a read cursor."""

    def __init__(self, entries: list[EntryMetadata], info: EntryMetadata):
        self._entries = tuple(entries)
        self._info = info
        self._cursor = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def stat(self) -> EntryMetadata:
        return self._info

    def read_entries(self, n: int = -1) -> tuple[list[EntryMetadata], bool]:
        """Return up to ``n`` entries and whether the end has been reached.

        ``n <= 0`` returns everything left. For ``n > 0`` the returned flag
        is ``True`` on the call that consumes the last entry and on every
        call made once the cursor is already at the end, so an empty page
        always comes with ``done=True``.
        """

        self._check_open()
        total = len(self._entries)
        if n <= 0:
            end = total
        else:
            end = min(self._cursor + n, total)
        out = list(self._entries[self._cursor:end])
        self._cursor = end
        return out, self._cursor >= total

    def read(self, size: int = -1) -> bytes:
        raise NotAFileError(f"cannot read a directory: {self._info.name}")

    def readinto(self, buffer) -> int:
        raise NotAFileError(f"cannot read a directory: {self._info.name}")

    def close(self) -> None:
        self._closed = True

    def __iter__(self) -> Iterator[EntryMetadata]:
        while True:
            entries, done = self.read_entries(1)
            yield from entries
            if done:
                return

    def __enter__(self) -> "DirectoryReader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"DirectoryReader(name={self._info.name!r}, entries={len(self._entries)}, cursor={self._cursor})"

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedHandleError(f"directory is closed: {self._info.name}")
