from __future__ import annotations
"""Read-only filesystem view over one S3 bucket."""
import logging
from typing import Callable, Iterator, Union

from .directory import DirectoryReader, list_directory
from .errors import NotFoundError
from .files import FileHandle
from .models import EntryMetadata
from .namespace import NodeKind, resolve
from .paths import ROOT, SEPARATOR, base_name, join_key, normalize_path
from .services import PAGE_SIZE, ObjectStoreClient, S3ObjectStoreClient

LOGGER = logging.getLogger(__name__)

Node = Union[FileHandle, DirectoryReader]

_UNWALKABLE_NAMES = frozenset({"", ".", ".."})


class S3Filesystem:
    """Presents the keys of a bucket as files and directories.

    Keys are split on ``/``. Objects become files and common prefixes
    become directories. Everything is read-only and nothing is cached
    between calls.
    """

    def __init__(self, client: ObjectStoreClient, bucket: str):
        self._client = client
        self._bucket = bucket

    @classmethod
    def connect(
        cls,
        bucket: str,
        *,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region_name: str | None = None,
        page_size: int = PAGE_SIZE,
        client_factory: Callable[..., object] | None = None,
    ) -> "S3Filesystem":
        client = S3ObjectStoreClient(
            endpoint_url=endpoint_url,
            access_key=access_key,
            secret_key=secret_key,
            region_name=region_name,
            page_size=page_size,
            client_factory=client_factory,
        )
        return cls(client, bucket)

    @property
    def bucket(self) -> str:
        return self._bucket

    def open(self, path: str) -> Node:
        """Open ``path`` as a :class:`FileHandle` or a :class:`DirectoryReader`.

        Raises:
            InvalidNameError: ``path`` is malformed; no request is made.
            NotFoundError: nothing in the bucket matches ``path``.
            AmbiguousPathError: ``path`` is both an object and a prefix.
            TransportError: the store reported any other failure.
        """

        name = normalize_path(path)
        if name == ROOT:
            return self._open_dir(ROOT)

        kind = resolve(self._client, self._bucket, name)
        if kind is NodeKind.FILE:
            return self._open_file(name)
        return self._open_dir(name)

    def stat(self, path: str) -> EntryMetadata:
        with self.open(path) as node:
            return node.stat()

    def read_dir(self, path: str) -> list[EntryMetadata]:
        """Return the entries of a directory sorted by name."""

        with self.open(path) as node:
            entries, _ = node.read_entries(-1)
        return sorted(entries, key=lambda entry: entry.name)

    def read_file(self, path: str) -> bytes:
        with self.open(path) as node:
            return node.read()

    def walk(self, path: str = ".") -> Iterator[tuple[str, list[str], list[str]]]:
        """Yield ``(dir_path, dir_names, file_names)`` top-down, like :func:`os.walk`."""

        top = normalize_path(path)
        pending = [top]
        while pending:
            current = pending.pop(0)
            entries = self.read_dir(current or ".")
            dirs = []
            for entry in entries:
                if not entry.is_dir:
                    continue
                if entry.name in _UNWALKABLE_NAMES:
                    LOGGER.debug("Skipping directory '%s' under '%s': not a valid path segment", entry.name, current)
                    continue
                dirs.append(entry.name)
            files = [entry.name for entry in entries if not entry.is_dir]
            yield (current or "."), dirs, files
            pending[0:0] = [join_key(current, name) for name in dirs]

    def _open_file(self, name: str) -> FileHandle:
        content = self._client.get_object(self._bucket, name)
        details = content.details
        info = EntryMetadata.for_object(name, details.size, details.last_modified)
        LOGGER.debug("Opened file s3://%s/%s (%d bytes)", self._bucket, name, info.size)
        return FileHandle(content.body, info)

    def _open_dir(self, name: str) -> DirectoryReader:
        prefix = name + SEPARATOR if name else ROOT
        entries = list_directory(self._client, self._bucket, prefix)
        if not entries and name != ROOT:
            raise NotFoundError(name)
        info = EntryMetadata(name=base_name(name), is_dir=True)
        LOGGER.debug("Opened directory s3://%s/%s (%d entries)", self._bucket, prefix, len(entries))
        return DirectoryReader(entries, info)
