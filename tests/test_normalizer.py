import re

from regdesk.app.normalizer import RecordNormalizer, normalize_location
from regdesk.app.record_models import (
    Option,
    RawLocation,
    VoterRecord,
    add_unique_community,
    parse_communities,
    remove_community,
)
from regdesk.app.reference_data import ReferenceOptions


REFERENCE = ReferenceOptions()


def test_normalize_location_matches_label_or_value():
    assert normalize_location("Western", REFERENCE.regions) == Option("western", "Western")
    assert normalize_location("GS-003", REFERENCE.gs_divisions) == Option("GS-003", "Bambalapitiya")


def test_normalize_location_synthesizes_unknown_strings():
    assert normalize_location("Atlantis", REFERENCE.regions) == Option("Atlantis", "Atlantis")
    assert normalize_location(RawLocation("Atlantis"), REFERENCE.regions) == Option("Atlantis", "Atlantis")


def test_normalize_location_keeps_structured_values_and_drops_empty():
    structured = {"value": "zz", "label": "Zed"}
    assert normalize_location(structured, REFERENCE.regions) == Option("zz", "Zed")
    assert normalize_location("", REFERENCE.regions) is None
    assert normalize_location(None, REFERENCE.regions) is None
    assert normalize_location({"value": "", "label": ""}, REFERENCE.regions) is None


def test_normalize_record_resolves_all_locations():
    normalizer = RecordNormalizer(REFERENCE)
    record = normalizer.normalize_record(
        {
            "id": "r1",
            "name": "Kamal",
            "nic": "901234567V",
            "region": "Western",
            "agaDivision": "Colombo",
            "gsDivision": "GS-004",
            "poolingBooth": "Royal College Hall",
            "RegID": "WE-WE-00001",
        }
    )
    assert record.region == Option("western", "Western")
    assert record.aga_division == Option("AGA-01", "Colombo")
    assert record.gs_division == Option("GS-004", "Wellawatta North")
    assert record.pooling_booth == Option("PB-01", "Royal College Hall")
    assert record.reg_id == "WE-WE-00001"


def test_normalize_record_generates_missing_reg_id():
    normalizer = RecordNormalizer(REFERENCE, reg_id_factory=lambda region, gs: f"{region.value}|{gs.value}")
    record = normalizer.normalize_record({"id": "r1", "region": "western", "gsDivision": "GS-001"})
    assert record.reg_id == "western|GS-001"


def test_generated_reg_id_has_expected_shape():
    record = RecordNormalizer(REFERENCE).normalize_record({"id": "r1", "region": "Western"})
    assert re.match(r"^WE-GS-\d{5}$", record.reg_id)


def test_normalize_record_is_idempotent():
    normalizer = RecordNormalizer(REFERENCE)
    first = normalizer.normalize_record(
        {
            "id": "r1",
            "name": " Saman ",
            "nic": "881234567V",
            "region": "Central",
            "gsDivision": "Unknown Place",
            "communities": ["A", "A", "B"],
            "customNote": "kept",
        }
    )
    second = normalizer.normalize_record(first.to_mapping())
    assert second == first
    assert normalizer.normalize_record(first) == first
    assert first.communities == ["A", "B"]
    assert first.extra == {"customNote": "kept"}


def test_to_mapping_writes_camel_case_keys_and_null_locations():
    record = RecordNormalizer(REFERENCE).normalize_record({"id": "r1", "politicalPartyId": "123456"})
    payload = record.to_mapping()
    assert payload["politicalPartyId"] == "123456"
    assert payload["region"] is None
    assert payload["poolingBooth"] is None
    assert isinstance(VoterRecord.from_mapping(payload), VoterRecord)


def test_normalize_community_resolves_legacy_region_against_aga_list():
    normalizer = RecordNormalizer(REFERENCE, clock=lambda: "2024-01-01T00:00:00.000Z")
    community = normalizer.normalize_community({"id": "c1", "name": "Fishermen", "region": "Colombo"})
    assert community.aga_division == Option("AGA-01", "Colombo")
    assert community.created_at == "2024-01-01T00:00:00.000Z"
    assert "region" not in community.to_mapping()


def test_normalize_records_skips_non_mapping_rows():
    rows = RecordNormalizer(REFERENCE).normalize_records([{"id": "a"}, "junk", 3, None, {"id": "b"}])
    assert [row.record_id for row in rows] == ["a", "b"]


def test_community_list_helpers_keep_names_unique():
    names = add_unique_community(["Fishermen"], " Teachers ")
    assert names == ["Fishermen", "Teachers"]
    assert add_unique_community(names, "Fishermen") == names
    assert add_unique_community(names, "  ") == names
    assert remove_community(names, "Fishermen") == ["Teachers"]
    assert parse_communities("Farmers") == ["Farmers"]
    assert parse_communities(None) == []
