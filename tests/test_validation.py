import pytest

from conftest import make_form
from regdesk.app.errors import RecordValidationError
from regdesk.app.record_models import VoterRecord
from regdesk.app.record_validation import RecordForm, validate_record_form


EXISTING = [VoterRecord(record_id="r1", name="Kamal", nic="199012345678")]


def _error(form, records=(), **kwargs) -> RecordValidationError:
    with pytest.raises(RecordValidationError) as info:
        validate_record_form(form, records, **kwargs)
    return info.value


def test_valid_form_passes():
    validate_record_form(make_form(nic="200011112222"), EXISTING)


@pytest.mark.parametrize(
    "field_name",
    ["name", "nic", "address", "dob", "political_party_id", "region", "aga_division", "gs_division", "pooling_booth"],
)
def test_required_fields(field_name):
    error = _error(make_form(**{field_name: "  "}))
    assert error.message == "Please fill in all required fields"
    assert error.field == field_name


def test_optional_fields_can_be_blank():
    validate_record_form(make_form(priority="", mobile1="", connectivity="", communities=[]), [])


def test_nic_minimum_length():
    error = _error(make_form(nic="12345678"))
    assert error.field == "nic"
    assert "at least 9" in error.message


def test_duplicate_nic_is_rejected_but_own_nic_is_allowed():
    error = _error(make_form(nic=" 199012345678 "), EXISTING)
    assert error.message == "This NIC number already exists. Please use a different NIC."
    validate_record_form(make_form(nic="199012345678"), EXISTING, editing_id="r1")


@pytest.mark.parametrize("party_id", ["12345", "1234567", "12a456", "١٢٣٤٥٦"])
def test_party_id_must_be_six_ascii_digits(party_id):
    assert _error(make_form(political_party_id=party_id)).field == "political_party_id"


def test_priority_must_be_a_known_level():
    assert _error(make_form(priority="9")).field == "priority"


def test_form_from_mapping_reads_camel_case_keys():
    form = RecordForm.from_mapping(
        {
            "name": " Nimal ",
            "politicalPartyId": 123456,
            "homeNumber": "0112",
            "gsDivision": "GS-001",
            "communities": ["A", "A", " B "],
        }
    )
    assert form.name == "Nimal"
    assert form.political_party_id == "123456"
    assert form.home_number == "0112"
    assert form.gs_division == "GS-001"
    assert form.communities == ["A", "B"]
