import json

import pytest

from regdesk.app.db_debug import db_debug
from regdesk.app.state_containers import ViewState, greeting_for_hour


@pytest.mark.parametrize(
    ("hour", "greeting"),
    [(5, "Good Morning!"), (11, "Good Morning!"), (12, "Good Afternoon!"), (17, "Good Evening!"), (21, "Good Night!"), (2, "Good Night!")],
)
def test_greeting_for_hour(hour, greeting):
    assert greeting_for_hour(hour) == greeting


def test_view_state_editing_flag():
    state = ViewState()
    assert not state.editing
    state.editing_record_id = "r1"
    assert state.editing


def test_db_debug_writes_redacted_json_lines(tmp_path, monkeypatch):
    log_path = tmp_path / "trace" / "db.log"
    monkeypatch.setenv("REGDESK_DB_DEBUG", "1")
    monkeypatch.setenv("REGDESK_DB_DEBUG_LOG", str(log_path))

    db_debug("store.save", file="records.json", row={"nic": "901234567V", "name": "Nimal", "homeNumber": "011"})
    db_debug("store.load", rows=[{"mobile1": "077"}])

    lines = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [line["event"] for line in lines] == ["store.save", "store.load"]
    assert lines[0]["data"]["row"] == {"nic": "<redacted>", "name": "Nimal", "homeNumber": "<redacted>"}
    assert lines[1]["data"]["rows"] == [{"mobile1": "<redacted>"}]
    assert lines[1]["seq"] > lines[0]["seq"]


def test_db_debug_is_silent_when_disabled(tmp_path, monkeypatch):
    log_path = tmp_path / "db.log"
    monkeypatch.delenv("REGDESK_DB_DEBUG", raising=False)
    monkeypatch.setenv("REGDESK_DB_DEBUG_LOG", str(log_path))
    db_debug("store.save", nic="x")
    assert not log_path.exists()
