from __future__ import annotations
"""Application settings persistence helpers."""

from dataclasses import asdict, dataclass
import json
from pathlib import Path

from .services import PAGE_SIZE


@dataclass
class AppSettings:
    """Simple container for persistent CLI settings."""

    page_size: int = PAGE_SIZE
    default_profile: str = ""


class SettingsStorage:
    """JSON-backed persistence for :class:`AppSettings`."""

    def __init__(self, storage_path: str | Path | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".s3_dirfs_settings.json"
        self._path = Path(storage_path)

    def load(self) -> AppSettings:
        if not self._path.exists():
            return AppSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return AppSettings()
        if not isinstance(data, dict):
            return AppSettings()
        default_profile = data.get("default_profile", "")
        if not isinstance(default_profile, str):
            default_profile = ""
        return AppSettings(
            page_size=_sanitize_page_size(data.get("page_size", AppSettings.page_size)),
            default_profile=default_profile,
        )

    def save(self, settings: AppSettings) -> None:
        payload = asdict(settings)
        payload["page_size"] = min(max(int(settings.page_size), 1), PAGE_SIZE)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            # Persist best-effort; ignore filesystem issues.
            return


def _sanitize_page_size(value: object) -> int:
    try:
        page_size = int(value)
    except (TypeError, ValueError):
        return AppSettings.page_size
    if page_size <= 0:
        return AppSettings.page_size
    return min(page_size, PAGE_SIZE)
