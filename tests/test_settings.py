"""Tests for persisted settings."""

from __future__ import annotations

import json

import pytest

from longpath.core.errors import ConfigError
from longpath.models.scan_config import DEFAULT_THRESHOLD
from longpath.settings import Settings, default_settings_path


class TestSettings:
    def test_default_path_honours_xdg(self, isolate_settings):
        assert default_settings_path() == isolate_settings
        assert Settings().path == isolate_settings

    def test_defaults_without_file(self, isolate_settings):
        settings = Settings()
        assert settings.threshold == DEFAULT_THRESHOLD
        assert settings.include_dirs is True
        assert not isolate_settings.exists()

    def test_set_persists(self, isolate_settings):
        Settings().set("scan.threshold", 180)

        assert json.loads(isolate_settings.read_text()) == {"scan": {"threshold": 180}}
        assert Settings().threshold == 180

    def test_get_missing_nested_key(self):
        settings = Settings()
        settings.set("scan.threshold", 10)
        assert settings.get("scan.threshold.deeper", "fallback") == "fallback"
        assert settings.get("other.key") is None

    def test_malformed_file_is_ignored(self, isolate_settings, caplog):
        isolate_settings.parent.mkdir(parents=True)
        isolate_settings.write_text("{not json")

        settings = Settings()
        assert settings.threshold == DEFAULT_THRESHOLD
        assert "Could not load settings" in caplog.text

    def test_non_object_file_is_ignored(self, isolate_settings):
        isolate_settings.parent.mkdir(parents=True)
        isolate_settings.write_text("[1, 2]")
        assert Settings().as_dict() == {"threshold": DEFAULT_THRESHOLD, "include_dirs": True}

    @pytest.mark.parametrize("value", [0, -1, "long", True, 12.5])
    def test_invalid_stored_threshold_falls_back(self, isolate_settings, value):
        isolate_settings.parent.mkdir(parents=True)
        isolate_settings.write_text(json.dumps({"scan": {"threshold": value}}))
        assert Settings().threshold == DEFAULT_THRESHOLD

    def test_invalid_stored_include_dirs_falls_back(self, isolate_settings):
        isolate_settings.parent.mkdir(parents=True)
        isolate_settings.write_text(json.dumps({"scan": {"include_dirs": "maybe"}}))
        assert Settings().include_dirs is True


class TestSettingsUpdate:
    def test_threshold(self):
        settings = Settings()
        assert settings.update("threshold", "200") == 200
        assert Settings().threshold == 200

    @pytest.mark.parametrize("raw,expected", [("no", False), ("off", False), ("YES", True), ("1", True)])
    def test_include_dirs(self, raw, expected):
        settings = Settings()
        assert settings.update("include_dirs", raw) is expected
        assert Settings().include_dirs is expected

    @pytest.mark.parametrize("raw", ["0", "-3", "abc", ""])
    def test_rejects_bad_threshold(self, raw):
        with pytest.raises(ConfigError):
            Settings().update("threshold", raw)

    def test_rejects_bad_bool(self):
        with pytest.raises(ConfigError):
            Settings().update("include_dirs", "maybe")

    def test_rejects_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown setting"):
            Settings().update("colour", "blue")
