"""Read-only directory view over an S3 bucket."""
from .directory import DirectoryReader
from .errors import (
    AmbiguousPathError,
    ClosedHandleError,
    InvalidNameError,
    NotAFileError,
    NotDirectoryError,
    NotFoundError,
    S3FilesystemError,
    TransportError,
)
from .files import FileHandle
from .filesystem import S3Filesystem
from .models import EntryMetadata
from .paths import normalize_path

__all__ = [
    "AmbiguousPathError",
    "ClosedHandleError",
    "DirectoryReader",
    "EntryMetadata",
    "FileHandle",
    "InvalidNameError",
    "NotAFileError",
    "NotDirectoryError",
    "NotFoundError",
    "S3Filesystem",
    "S3FilesystemError",
    "TransportError",
    "normalize_path",
]
