from __future__ import annotations
"""Data models describing S3 listings and filesystem entries."""
from dataclasses import dataclass, field
from datetime import datetime
import stat
from typing import BinaryIO, Optional

from .paths import SEPARATOR, base_name

READ_ONLY_MODE = 0o400


@dataclass(frozen=True)
class EntryMetadata:
    """Name, size and type of a single file or directory node.

    ``is_dir`` is the only source of truth for the node type. Directories
    always carry a size of ``0`` and no modification time.
    """

    name: str
    size: int = 0
    last_modified: Optional[datetime] = None
    is_dir: bool = False

    @property
    def mode(self) -> int:
        if self.is_dir:
            return stat.S_IFDIR | READ_ONLY_MODE
        return stat.S_IFREG | READ_ONLY_MODE

    @classmethod
    def for_object(cls, key: str, size: int | None, last_modified: datetime | None) -> "EntryMetadata":
        return cls(name=base_name(key), size=max(int(size or 0), 0), last_modified=last_modified)

    @classmethod
    def for_prefix(cls, prefix: str) -> "EntryMetadata":
        stripped = prefix[:-1] if prefix.endswith(SEPARATOR) else prefix
        return cls(name=stripped.rsplit(SEPARATOR, 1)[-1], is_dir=True)


@dataclass(frozen=True)
class ListedObject:
    """One object record from a listing page."""

    key: str
    size: int = 0
    last_modified: Optional[datetime] = None


@dataclass
class ObjectPage:
    """Represents a single page of a delimited S3 listing."""

    number: int = 1
    objects: list[ListedObject] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)
    next_token: Optional[str] = None

    @property
    def keys(self) -> list[str]:
        return [obj.key for obj in self.objects]


@dataclass
class ObjectDetails:
    """Metadata about a single S3 object."""

    bucket: str
    key: str
    size: int = 0
    last_modified: Optional[datetime] = None


@dataclass
class ObjectContent:
    """An open object body together with its metadata."""

    details: ObjectDetails
    body: BinaryIO
