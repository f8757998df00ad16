"""Unit tests for phrasebook.configuration settings.

Tests cover:
- I18nSettings defaults
- Environment variable overrides
- Settings aggregator and subsettings instantiation
"""

import pytest
from pydantic import ValidationError

from phrasebook.configuration import I18nSettings, Settings
from phrasebook.configuration.i18n import DEFAULT_BUNDLE_DIR


@pytest.mark.unit
class TestI18nSettings:
    """Test suite for I18nSettings."""

    def test_defaults(self, clean_i18n_env):
        settings = I18nSettings()
        assert settings.bundle_dir == DEFAULT_BUNDLE_DIR
        assert settings.basenames == ["messages", "problems"]
        assert settings.default_locale == "en"
        assert settings.miss_policy == "lenient"
        assert settings.cache_seconds == -1
        assert settings.reloadable is True
        assert settings.encoding == "utf-8"
        assert settings.preload is True
        assert settings.problem_type_base == "about:blank"

    def test_default_bundle_dir_ships_with_package(self):
        assert DEFAULT_BUNDLE_DIR.is_dir()
        assert (DEFAULT_BUNDLE_DIR / "messages_en.properties").is_file()

    def test_environment_overrides(self, clean_i18n_env, tmp_path):
        clean_i18n_env.setenv("I18N_BUNDLE_DIR", str(tmp_path))
        clean_i18n_env.setenv("I18N_BASENAMES", '["labels", "messages"]')
        clean_i18n_env.setenv("I18N_DEFAULT_LOCALE", "fr-CA")
        clean_i18n_env.setenv("I18N_MISS_POLICY", "strict")
        clean_i18n_env.setenv("I18N_CACHE_SECONDS", "30")
        clean_i18n_env.setenv("I18N_RELOADABLE", "false")
        clean_i18n_env.setenv("I18N_PRELOAD", "false")

        settings = I18nSettings()

        assert settings.bundle_dir == tmp_path
        assert settings.basenames == ["labels", "messages"]
        assert settings.default_locale == "fr-CA"
        assert settings.miss_policy == "strict"
        assert settings.cache_seconds == 30
        assert settings.reloadable is False
        assert settings.preload is False

    def test_invalid_miss_policy_rejected(self, clean_i18n_env):
        clean_i18n_env.setenv("I18N_MISS_POLICY", "loud")
        with pytest.raises(ValidationError):
            I18nSettings()

    @pytest.mark.parametrize("value", ["[]", '["", "  "]'])
    def test_empty_basenames_rejected(self, clean_i18n_env, value):
        clean_i18n_env.setenv("I18N_BASENAMES", value)
        with pytest.raises(ValidationError):
            I18nSettings()

    def test_basenames_are_stripped(self, clean_i18n_env):
        settings = I18nSettings(I18N_BASENAMES=[" messages ", "problems"])
        assert settings.basenames == ["messages", "problems"]


@pytest.mark.unit
class TestSettings:
    """Test suite for the Settings aggregator."""

    def test_subsettings_instantiated(self, clean_i18n_env):
        settings = Settings()
        assert isinstance(settings.i18n, I18nSettings)

    def test_subsettings_override(self, clean_i18n_env):
        i18n = I18nSettings(I18N_DEFAULT_LOCALE="fr")
        settings = Settings(i18n=i18n)
        assert settings.i18n.default_locale == "fr"

    def test_is_production_without_prefix(self, monkeypatch):
        monkeypatch.delenv("PREFIX", raising=False)
        assert Settings().is_production is True

    def test_is_not_production_with_prefix(self, monkeypatch):
        monkeypatch.setenv("PREFIX", "dev-")
        assert Settings().is_production is False

    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert Settings().LOG_LEVEL == "DEBUG"
