"""Shared fixtures for the phrasebook test suite."""

import pytest

from phrasebook.services.providers import (
    get_binding_scanner,
    get_message_resolver,
    get_problem_renderer,
    get_settings,
)


@pytest.fixture(autouse=True)
def clear_provider_caches():
    """Reset lru_cache singletons so settings changes do not leak between tests."""
    get_problem_renderer.cache_clear()
    get_binding_scanner.cache_clear()
    get_message_resolver.cache_clear()
    get_settings.cache_clear()
    yield
    get_problem_renderer.cache_clear()
    get_binding_scanner.cache_clear()
    get_message_resolver.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
def clean_i18n_env(monkeypatch):
    """Remove I18N_* variables inherited from the environment."""
    for name in (
        "I18N_BUNDLE_DIR",
        "I18N_BASENAMES",
        "I18N_DEFAULT_LOCALE",
        "I18N_MISS_POLICY",
        "I18N_CACHE_SECONDS",
        "I18N_RELOADABLE",
        "I18N_ENCODING",
        "I18N_PRELOAD",
        "I18N_PROBLEM_TYPE_BASE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
