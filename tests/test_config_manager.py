# tests/test_config_manager.py

import json

from smart_sorter.core.config_manager import (
    DEFAULT_SETTINGS, load_settings, save_settings, update_organizer_defaults
)


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.json")

    assert settings == DEFAULT_SETTINGS
    assert settings is not DEFAULT_SETTINGS


def test_partial_file_is_merged_with_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"organizer": {"recurse": True}}))

    settings = load_settings(path)

    assert settings["organizer"]["recurse"] is True
    assert settings["organizer"]["properties"] == ["EquipMake", "EquipModel"]
    assert settings["theme"] == "dark_theme.qss"


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")

    assert load_settings(path) == DEFAULT_SETTINGS


def test_save_creates_backup_of_previous_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"theme": "light_theme.qss"}))

    assert save_settings({"theme": "dark_theme.qss"}, path)

    assert json.loads(path.with_suffix(".json.bak").read_text()) == {"theme": "light_theme.qss"}
    assert load_settings(path)["theme"] == "dark_theme.qss"


def test_update_organizer_defaults(isolated_settings):
    assert update_organizer_defaults({"properties": ["Year", "Month"], "recurse": True})

    organizer = load_settings()["organizer"]
    assert organizer["properties"] == ["Year", "Month"]
    assert organizer["recurse"] is True
    assert organizer["duplicates"] == "replace"


def test_unknown_duplicates_value_falls_back_to_replace(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"organizer": {"duplicates": "explode", "recurse": True}}))

    organizer = load_settings(path)["organizer"]

    assert organizer["duplicates"] == "replace"
    assert organizer["recurse"] is True


def test_duplicates_value_is_case_insensitive(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"organizer": {"duplicates": "SKIP"}}))

    assert load_settings(path)["organizer"]["duplicates"] == "skip"


def test_organizer_must_be_an_object(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"organizer": ["EquipMake"], "theme": "light_theme.qss"}))

    settings = load_settings(path)

    assert settings["organizer"] == DEFAULT_SETTINGS["organizer"]
    assert settings["theme"] == "light_theme.qss"
