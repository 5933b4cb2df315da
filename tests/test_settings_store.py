import json

import pytest

from regdesk.app import settings_store


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


def test_settings_path_prefers_xdg_config_home(config_home):
    assert settings_store.settings_path() == config_home / "config" / "regdesk" / "config.json"


def test_settings_path_falls_back_to_home(config_home, monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME")
    assert settings_store.settings_path() == config_home / "home" / ".config" / "regdesk" / "config.json"


def test_missing_or_corrupt_settings_load_as_empty(config_home):
    assert settings_store.load_settings() == {}
    path = settings_store.settings_path()
    path.parent.mkdir(parents=True)
    path.write_text("[1, 2]", encoding="utf-8")
    assert settings_store.load_settings() == {}
    path.write_text("{broken", encoding="utf-8")
    assert settings_store.load_settings() == {}


def test_data_directory_round_trip_creates_folder(config_home):
    target = config_home / "records"
    saved = settings_store.save_data_directory(str(target))
    assert saved == target.resolve()
    assert target.is_dir()
    assert settings_store.load_data_directory() == target.resolve()


def test_saved_data_directory_is_returned_even_when_missing(config_home):
    settings_store.save_settings({"dataDirectory": str(config_home / "gone")})
    assert settings_store.load_data_directory() == (config_home / "gone").resolve()


def test_blank_data_directory_uses_default(config_home):
    default = config_home / "fallback"
    assert settings_store.normalize_data_directory("  ", default=default) == default.resolve()
    assert settings_store.load_data_directory(default) == default.resolve()


def test_dark_mode_and_records_per_page_are_merged_into_one_file(config_home):
    settings_store.save_dark_mode(True)
    assert settings_store.save_records_per_page("50") == 50
    assert settings_store.load_dark_mode() is True
    assert settings_store.load_records_per_page() == 50

    stored = json.loads(settings_store.settings_path().read_text(encoding="utf-8"))
    assert stored == {"darkMode": True, "recordsPerPage": 50}


@pytest.mark.parametrize(("value", "expected"), [("abc", 25), (0, 25), (-4, 25), (None, 25), ("10", 10)])
def test_normalize_records_per_page(value, expected):
    assert settings_store.normalize_records_per_page(value) == expected


def test_non_boolean_dark_mode_uses_default(config_home):
    settings_store.save_settings({"darkMode": "yes"})
    assert settings_store.load_dark_mode() is False
    assert settings_store.load_dark_mode(default=True) is True
