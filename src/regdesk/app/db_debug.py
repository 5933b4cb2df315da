from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any


_DB_DEBUG_ENV = "REGDESK_DB_DEBUG"
_DB_DEBUG_LOG_ENV = "REGDESK_DB_DEBUG_LOG"
_REDACTED_VALUE = "<redacted>"
_REDACTED_KEYS = {"nic", "politicalpartyid", "mobile1", "mobile2", "whatsapp", "homenumber"}
_LOCK = Lock()
_SEQUENCE = 0

_log = logging.getLogger("regdesk.storage")


def db_debug_enabled() -> bool:
    return _is_truthy_env(os.getenv(_DB_DEBUG_ENV, ""))


def db_debug(event: str, **payload: Any) -> None:
    """Trace a storage event.

    Events always go to the ``regdesk.storage`` logger at DEBUG level. With
    ``REGDESK_DB_DEBUG`` set they are also written as JSON lines to
    ``REGDESK_DB_DEBUG_LOG`` (or stderr), with personal fields redacted.
    """
    name = str(event or "").strip() or "unknown"
    data = _redact_value(payload)
    _log.debug("%s %s", name, data)
    if not db_debug_enabled():
        return
    global _SEQUENCE
    with _LOCK:
        _SEQUENCE += 1
        sequence = _SEQUENCE
    line = json.dumps(
        {
            "seq": sequence,
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "event": name,
            "data": data,
        },
        ensure_ascii=True,
        default=str,
    )
    target = str(os.getenv(_DB_DEBUG_LOG_ENV, "") or "").strip()
    if target:
        try:
            destination = Path(target).expanduser()
            destination.parent.mkdir(parents=True, exist_ok=True)
            with destination.open("a", encoding="utf-8") as handle:
                handle.write(f"{line}\n")
            return
        except OSError as exc:
            _log.warning("Could not write storage trace to %s: %s", target, exc)
    sys.stderr.write(f"[db-debug] {line}\n")
    sys.stderr.flush()


def _is_truthy_env(value: str) -> bool:
    return str(value or "").strip().casefold() in {"1", "true", "yes", "on", "y"}


def _redact_value(value: Any) -> Any:
    if isinstance(value, dict):
        redacted: dict[str, Any] = {}
        for key, raw in value.items():
            if str(key or "").strip().casefold() in _REDACTED_KEYS:
                redacted[str(key)] = _REDACTED_VALUE
            else:
                redacted[str(key)] = _redact_value(raw)
        return redacted
    if isinstance(value, (list, tuple)):
        return [_redact_value(entry) for entry in value]
    if isinstance(value, Path):
        return str(value)
    return value
