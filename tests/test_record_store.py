import json
import re

import pytest

from conftest import make_form
from regdesk.app.data_store import COMMUNITIES_FILE_NAME, RECORDS_FILE_NAME
from regdesk.app.errors import RecordValidationError
from regdesk.app.record_models import Option
from regdesk.app.record_store import STATE_LOADED, STATE_MUTATED, CommunityStore, RecordStore


def _stored(data_store, file_name=RECORDS_FILE_NAME):
    return json.loads(data_store.file_path(file_name).read_text(encoding="utf-8"))


def test_add_builds_and_prepends_record(record_store, data_store):
    first = record_store.add(make_form(nic="111111111V"))
    second = record_store.add(make_form(nic="222222222V", name="Kamal"))

    assert first.saved and second.saved
    assert [row.record_id for row in record_store.items] == ["rec-2", "rec-1"]
    record = second.item
    assert record.region == Option("western", "Western")
    assert record.gs_division == Option("GS-003", "Bambalapitiya")
    assert re.match(r"^WE-BA-\d{5}$", record.reg_id)
    assert record.created_at and record.created_at == record.updated_at
    assert [row["id"] for row in _stored(data_store)] == ["rec-2", "rec-1"]
    assert record_store.state == STATE_LOADED


def test_add_rejects_duplicate_nic_without_mutating(record_store):
    record_store.add(make_form())
    with pytest.raises(RecordValidationError):
        record_store.add(make_form(name="Other"))
    assert record_store.total == 1


def test_update_preserves_identity_fields(record_store, data_store):
    original = record_store.add(make_form()).item
    data = _stored(data_store)
    data[0]["legacyFlag"] = True
    data_store.file_path(RECORDS_FILE_NAME).write_text(json.dumps(data), encoding="utf-8")
    record_store.load()

    result = record_store.update(original.record_id, make_form(name="Nimal P.", gs_division="GS-010"))
    updated = result.item
    assert result.saved
    assert updated.name == "Nimal P."
    assert updated.nic == original.nic
    assert updated.reg_id == original.reg_id
    assert updated.created_at == original.created_at
    assert updated.updated_at != original.updated_at
    assert updated.gs_division == Option("GS-010", "Battaramulla South")
    assert _stored(data_store)[0]["legacyFlag"] is True


def test_update_unknown_id_is_a_silent_no_op(record_store):
    record_store.add(make_form())
    assert record_store.update("missing", make_form(name="Ghost")) is None
    assert record_store.items[0].name == "Nimal Perera"


def test_update_rejects_nic_of_another_record(record_store):
    record_store.add(make_form(nic="111111111V"))
    target = record_store.add(make_form(nic="222222222V")).item
    with pytest.raises(RecordValidationError):
        record_store.update(target.record_id, make_form(nic="111111111V"))


def test_delete_requires_confirmation(record_store):
    record = record_store.add(make_form()).item
    seen = []

    def _decline(row):
        seen.append(row.record_id)
        return False

    assert record_store.delete(record.record_id, confirm=_decline) is None
    assert seen == [record.record_id]
    assert record_store.total == 1
    assert record_store.delete("missing", confirm=lambda row: True) is None


def test_deleting_last_record_persists_empty_collection(record_store, data_store):
    record = record_store.add(make_form()).item
    result = record_store.delete(record.record_id, confirm=lambda row: True)
    assert result.saved
    assert result.item.record_id == record.record_id
    assert record_store.items == []
    assert _stored(data_store) == []


def test_empty_save_is_refused_while_snapshot_has_rows(record_store, data_store):
    for nic in ("111111111V", "222222222V", "333333333V"):
        record_store.add(make_form(nic=nic))
    record_store.replace_items([])

    assert record_store.save() is False
    assert record_store.total == 3
    assert len(_stored(data_store)) == 3


def test_clear_all_is_confirmed_and_persists_empty(record_store, data_store):
    record_store.add(make_form(nic="111111111V"))
    record_store.add(make_form(nic="222222222V"))
    counts = []

    assert record_store.clear_all(confirm=lambda count: counts.append(count) or False) is False
    assert counts == [2]
    assert record_store.total == 2

    assert record_store.clear_all(confirm=lambda count: True) is True
    assert record_store.total == 0
    assert _stored(data_store) == []


def test_failed_load_restores_last_good_rows(record_store, data_store):
    for index in range(1, 6):
        record_store.add(make_form(nic=f"90000000{index}V"))
    data_store.file_path(RECORDS_FILE_NAME).write_text("garbage", encoding="utf-8")
    data_store.backup_file_path(RECORDS_FILE_NAME).write_text("garbage", encoding="utf-8")

    outcome = record_store.load()
    assert outcome.failed
    assert outcome.restored_from_snapshot
    assert outcome.count == 5
    assert record_store.total == 5


def test_failed_load_without_snapshot_starts_empty(data_store, normalizer):
    data_store.ensure_data_root()
    data_store.file_path(RECORDS_FILE_NAME).write_text("garbage", encoding="utf-8")
    store = RecordStore(data_store, normalizer)

    outcome = store.load()
    assert outcome.failed
    assert not outcome.restored_from_snapshot
    assert store.items == []


def test_write_failure_keeps_memory_state(record_store, monkeypatch):
    monkeypatch.setattr(record_store.data_store, "write_data", lambda file_name, rows: False)
    result = record_store.add(make_form())
    assert result.saved is False
    assert record_store.total == 1
    assert record_store.state == STATE_MUTATED


def test_load_normalizes_legacy_rows(data_store, normalizer):
    data_store.write_data(
        RECORDS_FILE_NAME,
        [{"id": "x1", "name": "Old", "nic": "123456789V", "region": "Western", "gsDivision": "Kirulapone"}],
    )
    store = RecordStore(data_store, normalizer)
    assert store.load().count == 1
    record = store.get("x1")
    assert record.region == Option("western", "Western")
    assert record.gs_division == Option("GS-006", "Kirulapone")
    assert record.reg_id.startswith("WE-KI-")
    assert store.find_by_nic(" 123456789V ") is record
    assert store.find_by_nic("") is None


def test_generated_ids_are_saved_and_stable_across_loads(data_store, normalizer):
    data_store.write_data(
        RECORDS_FILE_NAME,
        [{"name": "Old", "nic": "123456789V", "region": "Western", "gsDivision": "Kirulapone"}],
    )
    first = RecordStore(data_store, normalizer)
    assert first.load().warning == ""
    second = RecordStore(data_store, normalizer)
    second.load()

    assert second.items[0].record_id == first.items[0].record_id
    assert second.items[0].reg_id == first.items[0].reg_id
    stored = _stored(data_store)[0]
    assert stored["id"] == first.items[0].record_id
    assert stored["RegID"] == first.items[0].reg_id


def test_community_ids_and_timestamps_are_saved_on_load(data_store, normalizer, clock):
    data_store.write_data(COMMUNITIES_FILE_NAME, [{"name": "Fishermen"}])
    first = CommunityStore(data_store, normalizer, clock=clock)
    first.load()
    second = CommunityStore(data_store, normalizer)
    second.load()

    assert second.items[0].community_id == first.items[0].community_id
    assert second.items[0].created_at == first.items[0].created_at


def test_count_created_on_uses_local_creation_day(record_store):
    record = record_store.add(make_form()).item
    assert record_store.count_created_on(record.created_on()) == 1


def test_community_add_and_delete(community_store, data_store):
    with pytest.raises(RecordValidationError):
        community_store.add("   ")

    first = community_store.add("Fishermen", aga_division="AGA-01").item
    community_store.add("Teachers", gs_division="GS-002")
    assert [row.name for row in community_store.items] == ["Fishermen", "Teachers"]
    assert first.aga_division == Option("AGA-01", "Colombo")
    assert first.gs_division is None

    result = community_store.delete(first.community_id, confirm=lambda row: True)
    assert result.saved
    assert [row["name"] for row in _stored(data_store, COMMUNITIES_FILE_NAME)] == ["Teachers"]


def test_community_suggestions_merge_communities_and_record_values(record_store, community_store):
    community_store.add("Teachers")
    record_store.add(make_form(nic="111111111V", communities=["Fishermen", "Teachers"]))
    record_store.add(make_form(nic="222222222V", communities=["Farmers"]))
    assert record_store.community_suggestions(community_store.items) == ["Teachers", "Farmers", "Fishermen"]
