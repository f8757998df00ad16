"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for the message engine.
"""

from functools import lru_cache

from phrasebook.configuration import Settings
from phrasebook.i18n.binding import BindingScanner
from phrasebook.i18n.factory import (
    create_binding_scanner,
    create_message_resolver,
    create_problem_renderer,
)
from phrasebook.i18n.problems import ProblemRenderer
from phrasebook.i18n.resolver import MessageResolver


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    The @lru_cache decorator ensures only ONE instance is created per process.
    Tests can call get_settings.cache_clear() after changing the environment.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_message_resolver() -> MessageResolver:
    """
    Get application-scoped message resolver singleton.

    Bundles are loaded (and, with I18N_PRELOAD, validated for syntax) on the
    first call, so call this during startup to fail fast on bad resources.

    Returns:
        MessageResolver: Cached resolver configured from settings.
    """
    return create_message_resolver(get_settings())


@lru_cache
def get_binding_scanner() -> BindingScanner:
    """
    Get application-scoped binding scanner singleton.

    Sharing one scanner shares its per-type Injection Point cache.

    Returns:
        BindingScanner: Cached scanner bound to the application resolver.
    """
    return create_binding_scanner(get_message_resolver())


@lru_cache
def get_problem_renderer() -> ProblemRenderer:
    """
    Get application-scoped problem renderer singleton.

    Returns:
        ProblemRenderer: Cached renderer using the application resolver and
        the configured problem type base URI.
    """
    return create_problem_renderer(get_message_resolver(), get_settings())
