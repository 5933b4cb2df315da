import json

from regdesk.app.data_store import (
    RECORDS_FILE_NAME,
    SOURCE_BACKUP,
    SOURCE_EMPTY,
    SOURCE_ERROR,
    SOURCE_PRIMARY,
    LocalJsonDataStore,
)


def test_missing_file_loads_as_empty(tmp_path):
    store = LocalJsonDataStore(tmp_path)
    result = store.load_rows(RECORDS_FILE_NAME)
    assert result.source == SOURCE_EMPTY
    assert result.rows == []
    assert not result.failed
    assert store.read_data(RECORDS_FILE_NAME) == []


def test_write_data_is_pretty_printed_and_reloadable(tmp_path):
    store = LocalJsonDataStore(tmp_path / "nested")
    rows = [{"id": "a", "name": "Nimal"}, {"id": "b", "name": "සමන්"}]
    assert store.write_data(RECORDS_FILE_NAME, rows)

    text = store.file_path(RECORDS_FILE_NAME).read_text(encoding="utf-8")
    assert text.startswith('[\n  {\n    "id": "a"')
    assert "සමන්" in text
    assert store.read_data(RECORDS_FILE_NAME) == rows
    assert store.load_rows(RECORDS_FILE_NAME).source == SOURCE_PRIMARY


def test_second_write_keeps_previous_file_as_backup(tmp_path):
    store = LocalJsonDataStore(tmp_path)
    store.write_data(RECORDS_FILE_NAME, [{"id": "old"}])
    store.write_data(RECORDS_FILE_NAME, [{"id": "new"}])
    backup = json.loads(store.backup_file_path(RECORDS_FILE_NAME).read_text(encoding="utf-8"))
    assert backup == [{"id": "old"}]
    assert store.read_data(RECORDS_FILE_NAME) == [{"id": "new"}]


def test_corrupt_primary_recovers_from_backup(tmp_path):
    store = LocalJsonDataStore(tmp_path)
    store.write_data(RECORDS_FILE_NAME, [{"id": "kept"}])
    store.write_data(RECORDS_FILE_NAME, [{"id": "kept"}, {"id": "lost"}])
    store.file_path(RECORDS_FILE_NAME).write_text("{not json", encoding="utf-8")

    result = store.load_rows(RECORDS_FILE_NAME)
    assert result.source == SOURCE_BACKUP
    assert result.rows == [{"id": "kept"}]
    assert "backup" in result.warning


def test_unreadable_primary_without_backup_fails_soft(tmp_path):
    store = LocalJsonDataStore(tmp_path)
    store.file_path(RECORDS_FILE_NAME).write_text('{"id": "not-a-list"}', encoding="utf-8")

    result = store.load_rows(RECORDS_FILE_NAME)
    assert result.failed
    assert result.source == SOURCE_ERROR
    assert "expected a JSON array" in result.warning
    assert store.read_data(RECORDS_FILE_NAME) == []


def test_non_object_rows_are_dropped(tmp_path):
    store = LocalJsonDataStore(tmp_path)
    store.file_path(RECORDS_FILE_NAME).write_text('[{"id": "a"}, 1, "x", null]', encoding="utf-8")
    assert store.read_data(RECORDS_FILE_NAME) == [{"id": "a"}]


def test_write_failure_returns_false(tmp_path):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    store = LocalJsonDataStore(blocker)
    assert store.write_data(RECORDS_FILE_NAME, [{"id": "a"}]) is False
