from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from regdesk.app.record_models import (
    CommunityRecord,
    Option,
    VoterRecord,
    find_option,
    parse_location,
    utc_now_iso,
)
from regdesk.app.reference_data import ReferenceOptions
from regdesk.app.reg_id import generate_reg_id


def normalize_location(raw: Any, options: Iterable[Option]) -> Option | None:
    """Resolve a stored location value to a canonical option.

    Structured values pass through untouched. Bare strings adopt the matching
    reference entry (by value or label) or become a ``value == label`` pair.
    """
    parsed = parse_location(raw)
    if parsed is None or isinstance(parsed, Option):
        return parsed
    match = find_option(options, parsed.text)
    if match is not None:
        return Option(value=match.value, label=match.label)
    return Option(value=parsed.text, label=parsed.text)


class RecordNormalizer:
    def __init__(
        self,
        reference: ReferenceOptions | None = None,
        *,
        reg_id_factory: Callable[[Option | None, Option | None], str] = generate_reg_id,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._reference = reference or ReferenceOptions()
        self._reg_id_factory = reg_id_factory
        self._clock = clock

    @property
    def reference(self) -> ReferenceOptions:
        return self._reference

    def normalize_record(self, raw: Mapping[str, Any] | VoterRecord) -> VoterRecord:
        source = raw.to_mapping() if isinstance(raw, VoterRecord) else dict(raw or {})
        reference = self._reference
        source["region"] = _payload(normalize_location(source.get("region"), reference.regions))
        source["agaDivision"] = _payload(normalize_location(source.get("agaDivision"), reference.aga_divisions))
        source["gsDivision"] = _payload(normalize_location(source.get("gsDivision"), reference.gs_divisions))
        source["poolingBooth"] = _payload(
            normalize_location(source.get("poolingBooth"), reference.pooling_booths)
        )
        record = VoterRecord.from_mapping(source)
        if not record.reg_id:
            record.reg_id = self._reg_id_factory(record.region, record.gs_division)
        return record

    def normalize_records(self, rows: Iterable[Any]) -> list[VoterRecord]:
        return [self.normalize_record(row) for row in rows if isinstance(row, (Mapping, VoterRecord))]

    def normalize_community(self, raw: Mapping[str, Any] | CommunityRecord) -> CommunityRecord:
        source = raw.to_mapping() if isinstance(raw, CommunityRecord) else dict(raw or {})
        reference = self._reference
        aga_source = source.get("agaDivision")
        if not aga_source:
            aga_source = source.pop("region", None)
        else:
            source.pop("region", None)
        source["agaDivision"] = _payload(normalize_location(aga_source, reference.aga_divisions))
        source["gsDivision"] = _payload(normalize_location(source.get("gsDivision"), reference.gs_divisions))
        record = CommunityRecord.from_mapping(source)
        if not record.created_at:
            record.created_at = self._clock()
        return record

    def normalize_communities(self, rows: Iterable[Any]) -> list[CommunityRecord]:
        return [
            self.normalize_community(row)
            for row in rows
            if isinstance(row, (Mapping, CommunityRecord))
        ]

    def resolve(self, field_name: str, raw: Any) -> Option | None:
        """Resolve a form value for one of the four location selectors."""
        options = {
            "region": self._reference.regions,
            "agaDivision": self._reference.aga_divisions,
            "gsDivision": self._reference.gs_divisions,
            "poolingBooth": self._reference.pooling_booths,
        }.get(field_name, ())
        return normalize_location(raw, options)


def _payload(option: Option | None) -> dict[str, str] | None:
    return option.to_mapping() if option is not None else None
