"""Test data factories for i18n engine testing.

Provides deterministic builders for:
- Bundle
- InMemoryBundleSource
- MessageCatalog / MessageResolver wired over in-memory bundles
"""

from typing import Optional

from phrasebook.i18n import (
    Bundle,
    BundleStore,
    InMemoryBundleSource,
    Locale,
    LocaleContext,
    MessageCatalog,
    MessageResolver,
    MissPolicy,
)

DEFAULT_BUNDLES = {
    "messages": {
        "en": {
            "app.greeting": "{0}, hello!",
            "app.farewell": "Goodbye, {0}.",
            "user.email.required": "An email address is required.",
        },
        "fr": {
            "app.farewell": "Au revoir, {0}.",
            "user.email.required": "Une adresse courriel est requise.",
        },
        "fr-CA": {
            "user.email.required": "Une adresse de courriel est obligatoire.",
        },
    },
}


def make_bundle(
    basename: str = "messages",
    locale: str = "en",
    messages: Optional[dict] = None,
) -> Bundle:
    """Create a Bundle instance.

    Args:
        basename: Logical bundle name.
        locale: Locale tag.
        messages: Key to template mapping.

    Returns:
        Bundle instance.
    """
    if messages is None:
        messages = dict(DEFAULT_BUNDLES["messages"]["en"])
    return Bundle(basename=basename, locale=Locale.parse(locale), messages=messages)


def make_source(data: Optional[dict] = None) -> InMemoryBundleSource:
    """Create an InMemoryBundleSource ({basename: {tag: {key: template}}})."""
    return InMemoryBundleSource(data if data is not None else DEFAULT_BUNDLES)


def make_catalog(
    data: Optional[dict] = None,
    default_locale: str = "en",
    miss_policy: MissPolicy = MissPolicy.LENIENT,
    basenames: Optional[list] = None,
) -> MessageCatalog:
    """Create a MessageCatalog over in-memory bundles."""
    data = data if data is not None else DEFAULT_BUNDLES
    store = BundleStore(make_source(data))
    return MessageCatalog(
        store,
        basenames=basenames or list(data),
        default_locale=Locale.parse(default_locale),
        miss_policy=miss_policy,
    )


def make_resolver(
    data: Optional[dict] = None,
    default_locale: str = "en",
    miss_policy: MissPolicy = MissPolicy.LENIENT,
    basenames: Optional[list] = None,
) -> MessageResolver:
    """Create a MessageResolver over in-memory bundles."""
    catalog = make_catalog(data, default_locale, miss_policy, basenames)
    return MessageResolver(catalog, LocaleContext(catalog.default_locale))
