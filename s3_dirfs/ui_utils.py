from __future__ import annotations
"""Formatting helpers for printing entries."""
from datetime import datetime

from .models import EntryMetadata


def format_size(size: int | None) -> str:
    if size is None:
        return "-"
    suffixes = ["B", "KB", "MB", "GB", "TB"]
    value = float(max(size, 0))
    for suffix in suffixes:
        if value < 1024 or suffix == suffixes[-1]:
            return f"{value:.1f} {suffix}" if suffix != "B" else f"{int(value)} {suffix}"
        value /= 1024
    return f"{size} B"


def format_last_modified(last_modified: object) -> str:
    if not last_modified:
        return "-"
    if isinstance(last_modified, datetime):
        return last_modified.strftime("%Y-%m-%d %H:%M:%S %Z").strip() or last_modified.isoformat()
    return str(last_modified)


def format_mode(entry: EntryMetadata) -> str:
    kind = "d" if entry.is_dir else "-"
    return f"{kind}r--------"


def format_entry(entry: EntryMetadata, *, long: bool = False) -> str:
    name = f"{entry.name}/" if entry.is_dir else entry.name
    if not long:
        return name
    size = "-" if entry.is_dir else format_size(entry.size)
    return f"{format_mode(entry)}  {size:>10}  {format_last_modified(entry.last_modified):<23}  {name}"
