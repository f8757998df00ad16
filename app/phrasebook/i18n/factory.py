"""Factory functions for creating i18n components.

Builds the source -> store -> catalog -> resolver chain from I18nSettings.
"""

from typing import Optional

from phrasebook.configuration import I18nSettings, Settings
from phrasebook.i18n.binding import BindingScanner
from phrasebook.i18n.catalog import MessageCatalog
from phrasebook.i18n.context import LocaleContext
from phrasebook.i18n.loader import BundleSource, FileBundleSource
from phrasebook.i18n.models import Locale, MissPolicy
from phrasebook.i18n.problems import ProblemRenderer
from phrasebook.i18n.resolver import MessageResolver
from phrasebook.i18n.store import BundleStore
from phrasebook.i18n.validator import BundleConsistencyValidator, ConsistencyReport
from phrasebook.logging import get_module_logger

logger = get_module_logger()


def _i18n_settings(settings: "Settings | I18nSettings | None") -> I18nSettings:
    if settings is None:
        return I18nSettings()
    if isinstance(settings, Settings):
        return settings.i18n
    return settings


def create_message_catalog(
    settings: "Settings | I18nSettings | None" = None,
    source: Optional[BundleSource] = None,
) -> MessageCatalog:
    """Create a MessageCatalog configured from settings.

    Args:
        settings: Settings or I18nSettings (default: loaded from environment).
        source: Overrides the file source built from I18N_BUNDLE_DIR.

    Returns:
        MessageCatalog, preloaded when I18N_PRELOAD is set.

    Raises:
        ValueError: If the bundle directory does not exist or the default
            locale is malformed.
        MalformedBundleError: If preloading finds an unparseable resource.
    """
    config = _i18n_settings(settings)
    if source is None:
        source = FileBundleSource(config.bundle_dir, encoding=config.encoding)

    store = BundleStore(
        source,
        cache_seconds=config.cache_seconds,
        reloadable=config.reloadable,
    )
    catalog = MessageCatalog(
        store,
        basenames=config.basenames,
        default_locale=Locale.parse(config.default_locale),
        miss_policy=MissPolicy(config.miss_policy),
    )

    if config.preload:
        catalog.preload()

    return catalog


def create_message_resolver(
    settings: "Settings | I18nSettings | None" = None,
    source: Optional[BundleSource] = None,
) -> MessageResolver:
    """Create and configure a MessageResolver.

    Usage:
        # Defaults (app/locales, preload all)
        resolver = create_message_resolver()

        # Embedded bundles
        resolver = create_message_resolver(source=InMemoryBundleSource({...}))
    """
    catalog = create_message_catalog(settings, source)
    resolver = MessageResolver(catalog, LocaleContext(catalog.default_locale))
    logger.info(
        "created_message_resolver",
        basenames=catalog.basenames,
        default_locale=catalog.default_locale.tag,
    )
    return resolver


def create_binding_scanner(resolver: MessageResolver) -> BindingScanner:
    return BindingScanner(resolver)


def create_problem_renderer(
    resolver: MessageResolver,
    settings: "Settings | I18nSettings | None" = None,
) -> ProblemRenderer:
    """Create a ProblemRenderer using I18N_PROBLEM_TYPE_BASE for problem types."""
    config = _i18n_settings(settings)
    return ProblemRenderer(resolver, type_base=config.problem_type_base)


def validate_bundles(
    settings: "Settings | I18nSettings | None" = None,
    source: Optional[BundleSource] = None,
) -> ConsistencyReport:
    """Build/test-time entry point for the bundle consistency check.

    Example:
        def test_bundles_are_consistent():
            assert validate_bundles().passed
    """
    config = _i18n_settings(settings)
    catalog = create_message_catalog(config.model_copy(update={"preload": False}), source)
    return BundleConsistencyValidator(catalog).validate()
