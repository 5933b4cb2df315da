from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any


_APP_SETTINGS_DIRNAME = "regdesk"
_LEGACY_SETTINGS_PATH = Path.home() / ".regdesk" / "config.json"
_DATA_DIRECTORY_KEY = "dataDirectory"
_DARK_MODE_KEY = "darkMode"
_RECORDS_PER_PAGE_KEY = "recordsPerPage"
DEFAULT_RECORDS_PER_PAGE = 25
RECORDS_PER_PAGE_CHOICES: tuple[int, ...] = (10, 25, 50, 100)

_log = logging.getLogger("regdesk.settings")


def _resolve_settings_path() -> Path:
    env = os.environ
    if os.name == "nt":
        appdata = str(env.get("APPDATA", "") or "").strip()
        if appdata:
            return Path(appdata) / _APP_SETTINGS_DIRNAME / "config" / "config.json"
        localappdata = str(env.get("LOCALAPPDATA", "") or "").strip()
        if localappdata:
            return Path(localappdata) / _APP_SETTINGS_DIRNAME / "config" / "config.json"
    else:
        xdg_config_home = str(env.get("XDG_CONFIG_HOME", "") or "").strip()
        if xdg_config_home:
            return Path(xdg_config_home) / _APP_SETTINGS_DIRNAME / "config.json"
        home = str(env.get("HOME", "") or "").strip()
        if home:
            return Path(home) / ".config" / _APP_SETTINGS_DIRNAME / "config.json"

    return _LEGACY_SETTINGS_PATH


def settings_path() -> Path:
    return _resolve_settings_path()


def default_data_directory() -> Path:
    return Path.home() / "RegDesk Data"


def load_settings() -> dict[str, Any]:
    path = settings_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        _log.error("Error loading config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def save_settings(settings: dict[str, Any]) -> bool:
    path = settings_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
    except OSError as exc:
        _log.error("Error saving config %s: %s", path, exc)
        return False
    return True


def normalize_data_directory(
    value: str | Path | None,
    *,
    default: Path | None = None,
) -> Path:
    fallback = Path(default) if default is not None else default_data_directory()
    if isinstance(value, Path):
        candidate = value
    elif isinstance(value, str) and value.strip():
        candidate = Path(value.strip())
    else:
        candidate = fallback

    candidate = candidate.expanduser()
    if not candidate.is_absolute():
        candidate = Path.home() / candidate
    try:
        return candidate.resolve()
    except OSError:
        return candidate


def load_data_directory(default: Path | None = None) -> Path:
    fallback = normalize_data_directory(default)
    value = load_settings().get(_DATA_DIRECTORY_KEY)
    if not isinstance(value, str) or not value.strip():
        return fallback
    return normalize_data_directory(value, default=fallback)


def save_data_directory(value: str | Path | None) -> Path | None:
    resolved = normalize_data_directory(value)
    settings = load_settings()
    settings[_DATA_DIRECTORY_KEY] = str(resolved)
    if not save_settings(settings):
        return None
    ensure_data_directory(resolved)
    return resolved


def ensure_data_directory(path: Path) -> bool:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        _log.error("Error creating data directory %s: %s", path, exc)
        return False
    return True


def load_dark_mode(default: bool = False) -> bool:
    value = load_settings().get(_DARK_MODE_KEY, default)
    if isinstance(value, bool):
        return value
    return bool(default)


def save_dark_mode(enabled: bool) -> None:
    settings = load_settings()
    settings[_DARK_MODE_KEY] = bool(enabled)
    save_settings(settings)


def normalize_records_per_page(value: Any, *, default: int = DEFAULT_RECORDS_PER_PAGE) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed < 1:
        return default
    return parsed


def load_records_per_page(default: int = DEFAULT_RECORDS_PER_PAGE) -> int:
    return normalize_records_per_page(load_settings().get(_RECORDS_PER_PAGE_KEY), default=default)


def save_records_per_page(value: int) -> int:
    resolved = normalize_records_per_page(value)
    settings = load_settings()
    settings[_RECORDS_PER_PAGE_KEY] = resolved
    save_settings(settings)
    return resolved
