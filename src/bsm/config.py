from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import json
import os
import sys

DEFAULT_API_URL = "http://localhost:5000/api"
PROVIDER_KINDS = ("memory", "http")


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    prefs_path: Path
    logs_dir: Path


@dataclass(frozen=True)
class ProviderSettings:
    kind: str = "memory"
    api_url: str = DEFAULT_API_URL


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "BrownieSalesManager") -> AppPaths:
    override = os.environ.get("BSM_HOME", "").strip()
    if override:
        base = Path(override)
    elif sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"
    prefs = base / "preferences.json"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, prefs_path=prefs, logs_dir=logs)


class PreferenceStore:
    """Flat key-value preferences kept in a JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


def load_provider_settings(prefs: PreferenceStore) -> ProviderSettings:
    kind = str(prefs.get("db_provider") or "memory")
    if kind not in PROVIDER_KINDS:
        kind = "memory"
    return ProviderSettings(kind=kind, api_url=str(prefs.get("api_url") or DEFAULT_API_URL))
