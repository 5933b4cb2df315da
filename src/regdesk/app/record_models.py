from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any
from uuid import uuid4


PRIORITY_LEVELS: tuple[str, ...] = ("1", "2", "3", "4", "5")

_RECORD_KEYS: frozenset[str] = frozenset(
    {
        "id",
        "nic",
        "RegID",
        "name",
        "dob",
        "politicalPartyId",
        "priority",
        "mobile1",
        "mobile2",
        "whatsapp",
        "homeNumber",
        "address",
        "region",
        "agaDivision",
        "gsDivision",
        "poolingBooth",
        "communities",
        "connectivity",
        "createdAt",
        "updatedAt",
    }
)
_COMMUNITY_KEYS: frozenset[str] = frozenset(
    {"id", "name", "agaDivision", "gsDivision", "region", "createdAt"}
)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _safe_id(value: Any) -> str:
    normalized = _as_text(value)
    return normalized or uuid4().hex


def utc_now_iso() -> str:
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def parse_iso_datetime(value: Any) -> datetime | None:
    text = _as_text(value)
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_iso_date(value: Any) -> date | None:
    text = _as_text(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        parsed = parse_iso_datetime(text)
        return parsed.date() if parsed is not None else None


@dataclass(frozen=True, slots=True)
class Option:
    """A selectable reference-list entry (region, division, booth)."""

    value: str
    label: str

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> "Option":
        raw_value = _as_text(value.get("value"))
        raw_label = _as_text(value.get("label"))
        return cls(value=raw_value or raw_label, label=raw_label or raw_value)

    def to_mapping(self) -> dict[str, str]:
        return {"value": self.value, "label": self.label}

    def matches(self, candidate: str) -> bool:
        text = _as_text(candidate)
        if not text:
            return False
        return self.value == text or self.label == text

    @property
    def display(self) -> str:
        return self.label or self.value


@dataclass(frozen=True, slots=True)
class RawLocation:
    """A location stored as a bare string that still needs resolving."""

    text: str


LocationValue = RawLocation | Option | None


def parse_location(value: Any) -> LocationValue:
    if isinstance(value, (Option, RawLocation)):
        return value
    if isinstance(value, Mapping):
        option = Option.from_mapping(value)
        if not option.value and not option.label:
            return None
        return option
    text = _as_text(value)
    if not text:
        return None
    return RawLocation(text)


def find_option(options: Iterable[Option], candidate: Any) -> Option | None:
    text = _as_text(candidate)
    if not text:
        return None
    for option in options:
        if option.matches(text):
            return option
    return None


def option_value(option: Option | None) -> str:
    return option.value if option is not None else ""


def option_display(option: Option | None) -> str:
    return option.display if option is not None else ""


def _location_as_option(value: Any) -> Option | None:
    parsed = parse_location(value)
    if isinstance(parsed, RawLocation):
        return Option(value=parsed.text, label=parsed.text)
    return parsed


def _location_to_payload(option: Option | None) -> dict[str, str] | None:
    return option.to_mapping() if option is not None else None


def parse_communities(value: Any) -> list[str]:
    if isinstance(value, str):
        candidates: Sequence[Any] = [value]
    elif isinstance(value, (list, tuple)):
        candidates = value
    else:
        return []
    rows: list[str] = []
    for candidate in candidates:
        name = _as_text(candidate)
        if name and name not in rows:
            rows.append(name)
    return rows


def add_unique_community(communities: Sequence[str], name: str) -> list[str]:
    rows = list(communities)
    text = _as_text(name)
    if text and text not in rows:
        rows.append(text)
    return rows


def remove_community(communities: Sequence[str], name: str) -> list[str]:
    return [row for row in communities if row != name]


def _extra_keys(value: Mapping[str, Any], known: frozenset[str]) -> dict[str, Any]:
    return {str(key): raw for key, raw in value.items() if key not in known}


@dataclass(slots=True)
class VoterRecord:
    record_id: str
    name: str
    nic: str
    reg_id: str = ""
    dob: str = ""
    political_party_id: str = ""
    priority: str = ""
    mobile1: str = ""
    mobile2: str = ""
    whatsapp: str = ""
    home_number: str = ""
    address: str = ""
    region: Option | None = None
    aga_division: Option | None = None
    gs_division: Option | None = None
    pooling_booth: Option | None = None
    communities: list[str] = field(default_factory=list)
    connectivity: str = ""
    created_at: str = ""
    updated_at: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any] | None) -> "VoterRecord":
        if not isinstance(value, Mapping):
            return cls(record_id=uuid4().hex, name="", nic="")
        return cls(
            record_id=_safe_id(value.get("id")),
            name=_as_text(value.get("name")),
            nic=_as_text(value.get("nic")),
            reg_id=_as_text(value.get("RegID")),
            dob=_as_text(value.get("dob")),
            political_party_id=_as_text(value.get("politicalPartyId")),
            priority=_as_text(value.get("priority")),
            mobile1=_as_text(value.get("mobile1")),
            mobile2=_as_text(value.get("mobile2")),
            whatsapp=_as_text(value.get("whatsapp")),
            home_number=_as_text(value.get("homeNumber")),
            address=_as_text(value.get("address")),
            region=_location_as_option(value.get("region")),
            aga_division=_location_as_option(value.get("agaDivision")),
            gs_division=_location_as_option(value.get("gsDivision")),
            pooling_booth=_location_as_option(value.get("poolingBooth")),
            communities=parse_communities(value.get("communities")),
            connectivity=_as_text(value.get("connectivity")),
            created_at=_as_text(value.get("createdAt")),
            updated_at=_as_text(value.get("updatedAt")),
            extra=_extra_keys(value, _RECORD_KEYS),
        )

    def to_mapping(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "id": _safe_id(self.record_id),
                "name": _as_text(self.name),
                "nic": _as_text(self.nic),
                "mobile1": _as_text(self.mobile1),
                "mobile2": _as_text(self.mobile2),
                "whatsapp": _as_text(self.whatsapp),
                "homeNumber": _as_text(self.home_number),
                "address": _as_text(self.address),
                "dob": _as_text(self.dob),
                "politicalPartyId": _as_text(self.political_party_id),
                "region": _location_to_payload(self.region),
                "agaDivision": _location_to_payload(self.aga_division),
                "gsDivision": _location_to_payload(self.gs_division),
                "poolingBooth": _location_to_payload(self.pooling_booth),
                "priority": _as_text(self.priority),
                "connectivity": _as_text(self.connectivity),
                "communities": parse_communities(self.communities),
                "createdAt": _as_text(self.created_at),
                "updatedAt": _as_text(self.updated_at),
                "RegID": _as_text(self.reg_id),
            }
        )
        return payload

    def created_on(self) -> date | None:
        parsed = parse_iso_datetime(self.created_at)
        if parsed is None:
            return None
        return parsed.astimezone().date()


@dataclass(slots=True)
class CommunityRecord:
    community_id: str
    name: str
    aga_division: Option | None = None
    gs_division: Option | None = None
    created_at: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any] | None) -> "CommunityRecord":
        if not isinstance(value, Mapping):
            return cls(community_id=uuid4().hex, name="")
        aga_source = value.get("agaDivision")
        if not aga_source:
            aga_source = value.get("region")
        return cls(
            community_id=_safe_id(value.get("id")),
            name=_as_text(value.get("name")),
            aga_division=_location_as_option(aga_source),
            gs_division=_location_as_option(value.get("gsDivision")),
            created_at=_as_text(value.get("createdAt")),
            extra=_extra_keys(value, _COMMUNITY_KEYS),
        )

    def to_mapping(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "id": _safe_id(self.community_id),
                "name": _as_text(self.name),
                "agaDivision": _location_to_payload(self.aga_division),
                "gsDivision": _location_to_payload(self.gs_division),
                "createdAt": _as_text(self.created_at),
            }
        )
        return payload
