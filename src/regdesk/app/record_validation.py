from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from regdesk.app.errors import RecordValidationError
from regdesk.app.record_models import PRIORITY_LEVELS, VoterRecord, parse_communities


MIN_NIC_LENGTH = 9
_PARTY_ID_PATTERN = re.compile(r"^[0-9]{6}$")
_REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "nic",
    "address",
    "dob",
    "political_party_id",
    "region",
    "aga_division",
    "gs_division",
    "pooling_booth",
)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(slots=True)
class RecordForm:
    """Raw add/edit form input. Location fields hold the selected option value."""

    name: str = ""
    nic: str = ""
    address: str = ""
    dob: str = ""
    political_party_id: str = ""
    priority: str = ""
    mobile1: str = ""
    mobile2: str = ""
    whatsapp: str = ""
    home_number: str = ""
    region: str = ""
    aga_division: str = ""
    gs_division: str = ""
    pooling_booth: str = ""
    connectivity: str = ""
    communities: list[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> "RecordForm":
        return cls(
            name=_as_text(value.get("name")),
            nic=_as_text(value.get("nic")),
            address=_as_text(value.get("address")),
            dob=_as_text(value.get("dob")),
            political_party_id=_as_text(value.get("politicalPartyId")),
            priority=_as_text(value.get("priority")),
            mobile1=_as_text(value.get("mobile1")),
            mobile2=_as_text(value.get("mobile2")),
            whatsapp=_as_text(value.get("whatsapp")),
            home_number=_as_text(value.get("homeNumber")),
            region=_as_text(value.get("region")),
            aga_division=_as_text(value.get("agaDivision")),
            gs_division=_as_text(value.get("gsDivision")),
            pooling_booth=_as_text(value.get("poolingBooth")),
            connectivity=_as_text(value.get("connectivity")),
            communities=parse_communities(value.get("communities")),
        )

    @classmethod
    def from_record(cls, record: VoterRecord) -> "RecordForm":
        return cls(
            name=record.name,
            nic=record.nic,
            address=record.address,
            dob=record.dob,
            political_party_id=record.political_party_id,
            priority=record.priority,
            mobile1=record.mobile1,
            mobile2=record.mobile2,
            whatsapp=record.whatsapp,
            home_number=record.home_number,
            region=record.region.value if record.region else "",
            aga_division=record.aga_division.value if record.aga_division else "",
            gs_division=record.gs_division.value if record.gs_division else "",
            pooling_booth=record.pooling_booth.value if record.pooling_booth else "",
            connectivity=record.connectivity,
            communities=list(record.communities),
        )


def validate_record_form(
    form: RecordForm,
    records: Iterable[VoterRecord],
    *,
    editing_id: str = "",
) -> None:
    """Raise ``RecordValidationError`` for the first problem found in ``form``.

    Checks run in the order the form reports them: required fields, NIC
    length, NIC uniqueness (ignoring the record being edited), party ID
    format, then priority level.
    """
    for attribute in _REQUIRED_FIELDS:
        if not _as_text(getattr(form, attribute)):
            raise RecordValidationError("Please fill in all required fields", field=attribute)

    nic = _as_text(form.nic)
    if len(nic) < MIN_NIC_LENGTH:
        raise RecordValidationError(
            f"NIC must be at least {MIN_NIC_LENGTH} characters long",
            field="nic",
        )

    target_id = _as_text(editing_id)
    duplicate = next(
        (
            record
            for record in records
            if record.record_id != target_id and record.nic and record.nic.strip() == nic
        ),
        None,
    )
    if duplicate is not None:
        raise RecordValidationError(
            "This NIC number already exists. Please use a different NIC.",
            field="nic",
        )

    if not _PARTY_ID_PATTERN.fullmatch(_as_text(form.political_party_id)):
        raise RecordValidationError("Political Party ID must be exactly 6 digits", field="political_party_id")

    priority = _as_text(form.priority)
    if priority and priority not in PRIORITY_LEVELS:
        raise RecordValidationError(
            f"Priority must be one of {', '.join(PRIORITY_LEVELS)}",
            field="priority",
        )
