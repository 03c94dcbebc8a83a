from __future__ import annotations
"""Decide whether a normalized path names a file or a directory."""
from enum import Enum
import logging

from .errors import AmbiguousPathError, NotFoundError
from .paths import ROOT, SEPARATOR
from .services import ObjectStoreClient, iter_pages

LOGGER = logging.getLogger(__name__)


class NodeKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


def resolve(client: ObjectStoreClient, bucket: str, path: str) -> NodeKind:
    """Classify ``path`` using one delimited listing with ``path`` as prefix.

    S3 is not a filesystem, so a key and a common prefix can share the same
    name. Only exact matches count: the object ``path`` or the common prefix
    ``path + "/"``. Matching both raises :class:`AmbiguousPathError`,
    matching neither raises :class:`NotFoundError`.

    The bucket root is always a directory and is not listed here.
    """

    if path == ROOT:
        return NodeKind.DIRECTORY

    dir_prefix = path + SEPARATOR
    file_match = False
    dir_match = False
    for page in iter_pages(client, bucket, path, SEPARATOR):
        if path in page.keys:
            file_match = True
        if dir_prefix in page.prefixes:
            dir_match = True

    if file_match and dir_match:
        raise AmbiguousPathError(path)
    if file_match:
        LOGGER.debug("Resolved '%s' as a file", path)
        return NodeKind.FILE
    if dir_match:
        LOGGER.debug("Resolved '%s' as a directory", path)
        return NodeKind.DIRECTORY
    raise NotFoundError(path)
