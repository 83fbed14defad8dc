"""Unit tests for editor settings persistence."""

import json

from parseq_prompts.config.settings import (
    EditorSettings,
    load_settings,
    save_settings,
    validate_and_migrate_settings,
)


class TestValidateSettings:
    """Test validation of raw settings data."""

    def test_valid_values(self):
        settings, warnings = validate_and_migrate_settings(
            {"import_debounce_ms": 100, "new_prompt_span": 20, "log_level": "debug"})
        assert settings == EditorSettings(import_debounce_ms=100, new_prompt_span=20, log_level="DEBUG")
        assert warnings == []

    def test_not_a_mapping(self):
        settings, warnings = validate_and_migrate_settings(["nope"])
        assert settings == EditorSettings()
        assert len(warnings) == 1

    def test_unknown_key_warned(self):
        settings, warnings = validate_and_migrate_settings({"colour": "red"})
        assert settings == EditorSettings()
        assert "colour" in warnings[0]

    def test_invalid_values_fall_back(self):
        settings, warnings = validate_and_migrate_settings(
            {"import_debounce_ms": -1, "new_prompt_span": True, "log_level": "LOUD"})
        assert settings == EditorSettings()
        assert len(warnings) == 3

    def test_debounce_seconds(self):
        assert EditorSettings(import_debounce_ms=250).import_debounce_seconds == 0.25


class TestLoadSaveSettings:
    """Test settings files on disk."""

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(str(tmp_path / "missing.json")) == EditorSettings()

    def test_round_trip(self, tmp_path):
        path = str(tmp_path / "nested" / "settings.json")
        assert save_settings(EditorSettings(new_prompt_span=12), path) is True
        assert load_settings(path).new_prompt_span == 12

    def test_malformed_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_settings(str(path)) == EditorSettings()

    def test_file_is_json(self, tmp_path):
        path = tmp_path / "settings.json"
        save_settings(EditorSettings(), str(path))
        assert json.loads(path.read_text(encoding="utf-8"))["import_debounce_ms"] == 250
