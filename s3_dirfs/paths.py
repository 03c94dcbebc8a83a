from __future__ import annotations
"""Mapping of user supplied paths onto S3 keys."""

from .errors import InvalidNameError

SEPARATOR = "/"
ROOT = ""

_ROOT_SPELLING = "."
_DISALLOWED = frozenset({SEPARATOR, "./."})


def normalize_path(raw: str) -> str:
    """Return the canonical key form of ``raw``.

    ``"."`` names the bucket root and normalizes to ``""``. One leading
    ``./`` and one trailing ``/`` are dropped. Anything that would still
    need separator collapsing or parent resolution is rejected with
    :class:`InvalidNameError` instead of being rewritten.
    """

    if raw in (_ROOT_SPELLING, ROOT):
        return ROOT
    if raw in _DISALLOWED:
        raise InvalidNameError(raw)

    name = raw
    if name.startswith("./"):
        name = name[2:]
    if name.endswith(SEPARATOR):
        name = name[:-1]
    if not name:
        return ROOT

    for segment in name.split(SEPARATOR):
        if segment in ("", ".", ".."):
            raise InvalidNameError(raw)
    return name


def base_name(path: str) -> str:
    """Return the last segment of ``path`` (``"."`` for the root)."""

    if not path:
        return _ROOT_SPELLING
    return path.rsplit(SEPARATOR, 1)[-1]


def join_key(prefix: str, name: str) -> str:
    if not prefix:
        return name
    return f"{prefix}{SEPARATOR}{name}"
