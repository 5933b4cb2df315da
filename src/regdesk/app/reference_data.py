from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from regdesk.app.record_models import Option


REFERENCE_FILE_NAME = "reference_options.json"

_log = logging.getLogger("regdesk.reference")

_DEFAULT_REGIONS: tuple[tuple[str, str], ...] = (
    ("western", "Western"),
    ("central", "Central"),
    ("southern", "Southern"),
    ("northern", "Northern"),
    ("eastern", "Eastern"),
    ("north_western", "North Western"),
    ("north_central", "North Central"),
    ("uva", "Uva"),
    ("sabaragamuwa", "Sabaragamuwa"),
)
_DEFAULT_AGA_DIVISIONS: tuple[tuple[str, str], ...] = (
    ("AGA-01", "Colombo"),
    ("AGA-02", "Thimbirigasyaya"),
    ("AGA-03", "Dehiwala"),
    ("AGA-04", "Kolonnawa"),
    ("AGA-05", "Kaduwela"),
    ("AGA-06", "Maharagama"),
    ("AGA-07", "Kesbewa"),
    ("AGA-08", "Moratuwa"),
)
_DEFAULT_GS_DIVISIONS: tuple[tuple[str, str], ...] = (
    ("GS-001", "Kotahena East"),
    ("GS-002", "Kotahena West"),
    ("GS-003", "Bambalapitiya"),
    ("GS-004", "Wellawatta North"),
    ("GS-005", "Wellawatta South"),
    ("GS-006", "Kirulapone"),
    ("GS-007", "Narahenpita"),
    ("GS-008", "Dehiwala East"),
    ("GS-009", "Kawdana West"),
    ("GS-010", "Battaramulla South"),
)
_DEFAULT_POOLING_BOOTHS: tuple[tuple[str, str], ...] = (
    ("PB-01", "Royal College Hall"),
    ("PB-02", "St. Peter's College"),
    ("PB-03", "Isipathana Maha Vidyalaya"),
    ("PB-04", "Kirulapone Community Centre"),
    ("PB-05", "Dehiwala Town Hall"),
    ("PB-06", "Battaramulla Library"),
)


def _options(rows: tuple[tuple[str, str], ...]) -> tuple[Option, ...]:
    return tuple(Option(value=value, label=label) for value, label in rows)


def _parse_options(value: Any) -> tuple[Option, ...]:
    if not isinstance(value, list):
        return ()
    rows: list[Option] = []
    for item in value:
        if isinstance(item, Mapping):
            option = Option.from_mapping(item)
        elif isinstance(item, str) and item.strip():
            option = Option(value=item.strip(), label=item.strip())
        else:
            continue
        if option.value:
            rows.append(option)
    return tuple(rows)


@dataclass(frozen=True, slots=True)
class ReferenceOptions:
    regions: tuple[Option, ...] = field(default_factory=lambda: _options(_DEFAULT_REGIONS))
    aga_divisions: tuple[Option, ...] = field(default_factory=lambda: _options(_DEFAULT_AGA_DIVISIONS))
    gs_divisions: tuple[Option, ...] = field(default_factory=lambda: _options(_DEFAULT_GS_DIVISIONS))
    pooling_booths: tuple[Option, ...] = field(default_factory=lambda: _options(_DEFAULT_POOLING_BOOTHS))

    @classmethod
    def empty(cls) -> "ReferenceOptions":
        return cls(regions=(), aga_divisions=(), gs_divisions=(), pooling_booths=())

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "ReferenceOptions":
        """Build options from a JSON payload, keeping built-in lists for missing keys."""
        defaults = cls()
        if not isinstance(payload, Mapping):
            return defaults
        return cls(
            regions=_parse_options(payload.get("regions") or payload.get("region")) or defaults.regions,
            aga_divisions=_parse_options(payload.get("agaDivisions") or payload.get("agaOptions"))
            or defaults.aga_divisions,
            gs_divisions=_parse_options(payload.get("gsDivisions") or payload.get("gsOptions"))
            or defaults.gs_divisions,
            pooling_booths=_parse_options(payload.get("poolingBooths") or payload.get("poolingOptions"))
            or defaults.pooling_booths,
        )

    def to_payload(self) -> dict[str, list[dict[str, str]]]:
        return {
            "regions": [option.to_mapping() for option in self.regions],
            "agaDivisions": [option.to_mapping() for option in self.aga_divisions],
            "gsDivisions": [option.to_mapping() for option in self.gs_divisions],
            "poolingBooths": [option.to_mapping() for option in self.pooling_booths],
        }


def load_reference_options(data_root: Path | str | None = None) -> ReferenceOptions:
    if data_root is None:
        return ReferenceOptions()
    path = Path(data_root) / REFERENCE_FILE_NAME
    if not path.is_file():
        return ReferenceOptions()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        _log.warning("Could not read %s, using built-in lists: %s", path, exc)
        return ReferenceOptions()
    return ReferenceOptions.from_payload(payload)
