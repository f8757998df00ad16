"""Public message lookup facade.

Combines the MessageCatalog with the ambient LocaleContext.

Usage:
    resolver = create_message_resolver()

    with resolver.context.using("fr"):
        resolver.resolve("app.greeting", "Monde")

    # Outbound notification to a recipient with a known locale
    resolver.resolve_for("en", "app.greeting", "World")
"""

from typing import Any, List, Optional

from phrasebook.i18n.catalog import MessageCatalog, format_template
from phrasebook.i18n.context import LocaleContext
from phrasebook.i18n.lazy import LazyMessage
from phrasebook.i18n.models import Locale


class MessageResolver:
    """Single entry point for resolving message keys.

    Attributes:
        catalog: MessageCatalog performing fallback and interpolation.
        context: LocaleContext supplying the ambient locale.
    """

    def __init__(self, catalog: MessageCatalog, context: Optional[LocaleContext] = None):
        self.catalog = catalog
        self.context = context or LocaleContext(catalog.default_locale)

    @property
    def default_locale(self) -> Locale:
        return self.catalog.default_locale

    def resolve(self, key: str, *args: Any) -> str:
        """Resolve key in the ambient locale.

        Raises:
            MessageNotFoundError: On a miss under the strict policy.
        """
        return self.catalog.resolve(self.context.current(), key, args)

    def resolve_for(self, locale: "Locale | str", key: str, *args: Any) -> str:
        """Resolve key in an explicit locale, ignoring the ambient one.

        Raises:
            MessageNotFoundError: On a miss under the strict policy.
        """
        return self.catalog.resolve(Locale.parse(locale), key, args)

    def try_resolve(self, key: str, *args: Any) -> Optional[str]:
        """Resolve key in the ambient locale, returning None on a miss.

        Never raises MessageNotFoundError, whatever the miss policy, so
        callers can tell "no translation" apart from an empty translation.
        """
        return self._try(self.context.current(), key, args)

    def try_resolve_for(self, locale: "Locale | str", key: str, *args: Any) -> Optional[str]:
        return self._try(Locale.parse(locale), key, args)

    def _try(self, locale: Locale, key: str, args: tuple) -> Optional[str]:
        template = self.catalog.find_template(locale, key)
        if template is None:
            return None
        return format_template(template, args)

    def has_message(self, key: str, locale: "Locale | str | None" = None) -> bool:
        target = Locale.parse(locale) if locale is not None else self.context.current()
        return self.catalog.has_message(target, key)

    def lazy(self, key: str) -> LazyMessage:
        """Create a handle that resolves key at render time."""
        return LazyMessage(key=key, resolver=self)

    def available_locales(self) -> List[Locale]:
        return self.catalog.registered_locales()
