from __future__ import annotations
"""Connection profile models and persistence."""
from dataclasses import dataclass
import json
from pathlib import Path

import keyring
from keyring.errors import KeyringError

SERVICE_NAME = "s3-dirfs"


@dataclass
class ConnectionProfile:
    """A saved bucket connection; the secret lives in the OS keychain."""

    name: str
    bucket: str
    endpoint_url: str = ""
    access_key: str = ""
    secret_key: str = ""
    region_name: str = ""

    def to_record(self) -> dict[str, str]:
        return {
            "name": self.name,
            "bucket": self.bucket,
            "endpoint_url": self.endpoint_url,
            "access_key": self.access_key,
            "region_name": self.region_name,
        }


class KeychainStore:
    """Encapsulates OS keychain access for secrets."""

    def __init__(self, service_name: str = SERVICE_NAME):
        self._service_name = service_name

    def get_secret(self, profile_name: str) -> str:
        if not profile_name:
            return ""
        try:
            return keyring.get_password(self._service_name, profile_name) or ""
        except KeyringError:
            return ""

    def set_secret(self, profile_name: str, secret_key: str) -> None:
        if not profile_name:
            return
        if not secret_key:
            self.delete_secret(profile_name)
            return
        try:
            keyring.set_password(self._service_name, profile_name, secret_key)
        except KeyringError:
            return

    def delete_secret(self, profile_name: str) -> None:
        if not profile_name:
            return
        try:
            keyring.delete_password(self._service_name, profile_name)
        except KeyringError:
            return


class ProfileStorage:
    """JSON file of profiles; secrets found in plaintext move to the keychain."""

    def __init__(self, storage_path: str | Path | None = None, keychain: KeychainStore | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".s3_dirfs_connections.json"
        self._path = Path(storage_path)
        self._keychain = keychain or KeychainStore()

    def load(self) -> list[ConnectionProfile]:
        profiles: list[ConnectionProfile] = []
        saw_plaintext = False
        for entry in self._read_entries():
            try:
                name = entry["name"]
                bucket = entry["bucket"]
            except KeyError:
                continue
            secret_key = entry.get("secret_key", "")
            if secret_key:
                saw_plaintext = True
                self._keychain.set_secret(name, secret_key)
            else:
                secret_key = self._keychain.get_secret(name)
            profiles.append(
                ConnectionProfile(
                    name=name,
                    bucket=bucket,
                    endpoint_url=entry.get("endpoint_url", ""),
                    access_key=entry.get("access_key", ""),
                    secret_key=secret_key,
                    region_name=entry.get("region_name", ""),
                )
            )
        if saw_plaintext:
            self._write_data([profile.to_record() for profile in profiles])
        return profiles

    def get(self, name: str) -> ConnectionProfile:
        for profile in self.load():
            if profile.name == name:
                return profile
        raise ValueError(f"Profile '{name}' does not exist")

    def save(self, profiles: list[ConnectionProfile]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        for profile in profiles:
            self._keychain.set_secret(profile.name, profile.secret_key)
        existing_names = {entry.get("name") for entry in self._read_entries()}
        current_names = {profile.name for profile in profiles}
        for name in existing_names - current_names:
            if isinstance(name, str) and name:
                self._keychain.delete_secret(name)
        self._write_data([profile.to_record() for profile in profiles])

    def _read_entries(self) -> list[dict]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return []
        if not isinstance(data, list):
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    def _write_data(self, data: list[dict[str, str]]) -> None:
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
