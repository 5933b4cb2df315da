from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from time import perf_counter
from typing import Any

from regdesk.app.db_debug import db_debug
from regdesk.app.errors import DataStoreError


RECORDS_FILE_NAME = "records.json"
COMMUNITIES_FILE_NAME = "communities.json"

SOURCE_PRIMARY = "primary"
SOURCE_BACKUP = "backup"
SOURCE_EMPTY = "empty"
SOURCE_ERROR = "error"

_log = logging.getLogger("regdesk.storage")


@dataclass(frozen=True, slots=True)
class DataLoadResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    source: str = SOURCE_PRIMARY
    warning: str = ""

    @property
    def failed(self) -> bool:
        return self.source == SOURCE_ERROR


class LocalJsonDataStore:
    """Reads and writes whole JSON collections inside one data directory."""

    def __init__(self, data_root: Path | str) -> None:
        self.data_root = _normalize_path(Path(data_root))

    def file_path(self, file_name: str) -> Path:
        return self.data_root / file_name

    def backup_file_path(self, file_name: str) -> Path:
        target = self.file_path(file_name)
        return target.with_suffix(f"{target.suffix}.bak")

    def ensure_data_root(self) -> bool:
        try:
            self.data_root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            _log.error("Could not create data directory %s: %s", self.data_root, exc)
            return False
        return True

    def load_rows(self, file_name: str) -> DataLoadResult:
        primary_path = self.file_path(file_name)
        if not primary_path.exists():
            db_debug("json.load", file=file_name, source=SOURCE_EMPTY)
            return DataLoadResult(source=SOURCE_EMPTY)

        started_at = perf_counter()
        try:
            rows = self._read_rows(primary_path)
        except DataStoreError as primary_error:
            _log.warning("Could not read %s: %s", primary_path, primary_error.detail)
            backup_path = self.backup_file_path(file_name)
            if not backup_path.is_file():
                db_debug("json.load.error", file=file_name, error=primary_error.detail)
                return DataLoadResult(
                    source=SOURCE_ERROR,
                    warning=f"{file_name} could not be read: {primary_error.detail}.",
                )
            try:
                rows = self._read_rows(backup_path)
            except DataStoreError as backup_error:
                db_debug(
                    "json.load.error",
                    file=file_name,
                    error=primary_error.detail,
                    backup_error=backup_error.detail,
                )
                return DataLoadResult(
                    source=SOURCE_ERROR,
                    warning=(
                        f"{file_name} and its backup copy could not be read. "
                        f"Primary error: {primary_error.detail}. Backup error: {backup_error.detail}."
                    ),
                )
            db_debug("json.load", file=file_name, source=SOURCE_BACKUP, rows=len(rows))
            return DataLoadResult(
                rows=rows,
                source=SOURCE_BACKUP,
                warning=f"{file_name} could not be read; recovered from backup copy.",
            )

        db_debug(
            "json.load",
            file=file_name,
            source=SOURCE_PRIMARY,
            rows=len(rows),
            duration_ms=round((perf_counter() - started_at) * 1000.0, 2),
        )
        return DataLoadResult(rows=rows, source=SOURCE_PRIMARY)

    def read_data(self, file_name: str) -> list[dict[str, Any]]:
        """Return the stored rows, or ``[]`` when the file is missing or unreadable."""
        result = self.load_rows(file_name)
        if result.failed:
            return []
        return list(result.rows)

    def write_rows(self, file_name: str, rows: list[dict[str, Any]]) -> None:
        started_at = perf_counter()
        self.data_root.mkdir(parents=True, exist_ok=True)
        self._write_atomic_json(file_name, rows)
        db_debug(
            "json.save",
            file=file_name,
            rows=len(rows),
            duration_ms=round((perf_counter() - started_at) * 1000.0, 2),
        )

    def write_data(self, file_name: str, rows: list[dict[str, Any]]) -> bool:
        """Overwrite the collection file; return ``False`` instead of raising."""
        try:
            self.write_rows(file_name, rows)
        except (OSError, TypeError, ValueError) as exc:
            _log.error("Could not write %s: %s", self.file_path(file_name), exc)
            db_debug("json.save.error", file=file_name, error=str(exc))
            return False
        return True

    def _read_rows(self, path: Path) -> list[dict[str, Any]]:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise DataStoreError(path.name, str(exc)) from exc
        except ValueError as exc:
            raise DataStoreError(path.name, f"invalid JSON ({exc})") from exc
        if not isinstance(raw, list):
            raise DataStoreError(path.name, "expected a JSON array")
        return [row for row in raw if isinstance(row, dict)]

    def _write_atomic_json(self, file_name: str, rows: list[dict[str, Any]]) -> None:
        target_path = self.file_path(file_name)
        backup_path = self.backup_file_path(file_name)

        if target_path.exists():
            try:
                shutil.copy2(target_path, backup_path)
            except OSError as exc:
                _log.warning("Could not refresh backup %s: %s", backup_path, exc)

        fd, temp_path = tempfile.mkstemp(
            prefix=f"{target_path.stem}.",
            suffix=".tmp",
            dir=str(self.data_root),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                json.dump(rows, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, target_path)
        except BaseException:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise


def _normalize_path(path: Path) -> Path:
    expanded = path.expanduser()
    try:
        return expanded.resolve()
    except OSError:
        return expanded
