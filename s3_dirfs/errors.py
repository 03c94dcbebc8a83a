from __future__ import annotations
"""Exceptions raised by the S3 filesystem view."""


class S3FilesystemError(Exception):
    """Base error for s3_dirfs."""


class InvalidNameError(S3FilesystemError, ValueError):
    """Raised when a path cannot be mapped to an object key."""

    def __init__(self, name: str):
        super().__init__(f"invalid name: {name}")
        self.name = name


class NotFoundError(S3FilesystemError, FileNotFoundError):
    """Raised when neither an object nor a common prefix matches a path."""

    def __init__(self, name: str):
        super().__init__(f"no such file or directory: {name}")
        self.name = name


class AmbiguousPathError(S3FilesystemError):
    """Raised when a path matches both an object key and a common prefix."""

    def __init__(self, name: str):
        super().__init__(f"directory name matches file name: {name}")
        self.name = name


class TransportError(S3FilesystemError):
    """Wraps any failure reported by the object store client."""


class NotAFileError(S3FilesystemError, IsADirectoryError):
    """Raised when a directory node is read as a byte stream."""


class NotDirectoryError(S3FilesystemError, NotADirectoryError):
    """Raised when a file node is asked for directory entries."""


class ClosedHandleError(S3FilesystemError, ValueError):
    """Raised when a closed file or directory is used again."""
