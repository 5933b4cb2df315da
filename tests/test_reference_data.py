import json

from regdesk.app.record_models import Option
from regdesk.app.reference_data import REFERENCE_FILE_NAME, ReferenceOptions, load_reference_options


def test_built_in_lists():
    options = ReferenceOptions()
    assert options.regions[0] == Option("western", "Western")
    assert Option("GS-003", "Bambalapitiya") in options.gs_divisions
    assert len(options.pooling_booths) == 6
    assert ReferenceOptions.empty().regions == ()


def test_missing_file_uses_built_in_lists(tmp_path):
    assert load_reference_options(tmp_path) == ReferenceOptions()
    assert load_reference_options(None) == ReferenceOptions()


def test_file_overrides_only_the_lists_it_names(tmp_path):
    payload = {
        "gsDivisions": [{"value": "GS-100", "label": "Maradana"}, "Borella", {"value": "", "label": ""}, 5],
        "regions": [],
    }
    (tmp_path / REFERENCE_FILE_NAME).write_text(json.dumps(payload), encoding="utf-8")

    options = load_reference_options(tmp_path)
    assert options.gs_divisions == (Option("GS-100", "Maradana"), Option("Borella", "Borella"))
    assert options.regions == ReferenceOptions().regions
    assert options.pooling_booths == ReferenceOptions().pooling_booths


def test_unreadable_file_falls_back(tmp_path):
    (tmp_path / REFERENCE_FILE_NAME).write_text("{nope", encoding="utf-8")
    assert load_reference_options(tmp_path) == ReferenceOptions()


def test_payload_round_trip():
    options = ReferenceOptions()
    assert ReferenceOptions.from_payload(options.to_payload()) == options
