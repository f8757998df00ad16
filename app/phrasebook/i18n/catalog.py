"""Message catalog with fallback-chain resolution.

Resolution order for a (basename, locale, key) lookup is fixed:

1. Exact locale (e.g., fr-CA)
2. Language-only locale (e.g., fr)
3. Default locale (and its language-only form)
4. Miss policy: the key itself (lenient) or MessageNotFoundError (strict)

Basenames are searched in registration order until one defines the key.
"""

import re
from typing import Any, Iterable, List, Optional, Sequence

from phrasebook.i18n.exceptions import MessageNotFoundError
from phrasebook.i18n.models import Locale, MissPolicy
from phrasebook.i18n.store import BundleStore
from phrasebook.logging import get_module_logger

logger = get_module_logger()

_PLACEHOLDER = re.compile(r"\{(\d+)\}")


def format_template(template: str, args: Sequence[Any] = ()) -> str:
    """Replace positional ``{n}`` placeholders with ``str(args[n])``.

    Substitution is a single left-to-right pass, so substituted text is
    never expanded again. ``None`` renders as an empty string and
    out-of-range placeholders are left literal.

    Example:
        >>> format_template("{0}, hello!", ["World"])
        'World, hello!'
        >>> format_template("{0} and {1}", ["a"])
        'a and {1}'
    """
    if not args:
        return template

    def _substitute(match: "re.Match[str]") -> str:
        index = int(match.group(1))
        if index >= len(args):
            return match.group(0)
        value = args[index]
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(_substitute, template)


class MessageCatalog:
    """Resolves message keys across basenames with locale fallback.

    Attributes:
        store: BundleStore providing bundles.
        basenames: Basenames in lookup order.
        default_locale: Locale tried when the requested locale has no text.
        miss_policy: What to do when no bundle defines a key.
    """

    def __init__(
        self,
        store: BundleStore,
        basenames: Sequence[str],
        default_locale: Locale,
        miss_policy: MissPolicy = MissPolicy.LENIENT,
    ):
        if not basenames:
            raise ValueError("MessageCatalog requires at least one basename")
        # dict.fromkeys keeps registration order and drops duplicates
        self.basenames: List[str] = list(dict.fromkeys(basenames))
        self.store = store
        self.default_locale = default_locale
        self.miss_policy = MissPolicy(miss_policy)
        logger.info(
            "initialized_message_catalog",
            basenames=self.basenames,
            default_locale=default_locale.tag,
            miss_policy=self.miss_policy.value,
        )

    def candidate_locales(self, locale: Locale) -> List[Locale]:
        """Fallback chain for a requested locale, without duplicates."""
        chain = [
            locale,
            locale.language_only(),
            self.default_locale,
            self.default_locale.language_only(),
        ]
        return list(dict.fromkeys(chain))

    def find_template(
        self,
        locale: Locale,
        key: str,
        basenames: Optional[Iterable[str]] = None,
    ) -> Optional[str]:
        """Find the raw template for a key without applying the miss policy.

        Returns:
            The template, or None if no candidate bundle defines the key.
        """
        candidates = self.candidate_locales(locale)
        for basename in self.basenames if basenames is None else basenames:
            for candidate in candidates:
                bundle = self.store.load(basename, candidate)
                if bundle is None:
                    continue
                template = bundle.get(key)
                if template is None:
                    continue
                if candidate != locale:
                    logger.debug(
                        "used_fallback_translation",
                        key=key,
                        basename=basename,
                        requested_locale=locale.tag,
                        resolved_locale=candidate.tag,
                    )
                return template
        return None

    def has_message(self, locale: Locale, key: str) -> bool:
        return self.find_template(locale, key) is not None

    def resolve(
        self,
        locale: Locale,
        key: str,
        args: Sequence[Any] = (),
        basenames: Optional[Iterable[str]] = None,
    ) -> str:
        """Resolve and interpolate a message.

        Args:
            locale: Requested locale.
            key: Message key.
            args: Positional arguments for ``{n}`` placeholders.
            basenames: Restrict the lookup to these basenames.

        Returns:
            The interpolated text, or the key itself on a lenient miss.

        Raises:
            MessageNotFoundError: On a miss under the strict policy.
        """
        template = self.find_template(locale, key, basenames)
        if template is not None:
            return format_template(template, args)

        logger.warning(
            "message_not_found",
            key=key,
            locale=locale.tag,
            default_locale=self.default_locale.tag,
            miss_policy=self.miss_policy.value,
        )
        if self.miss_policy is MissPolicy.STRICT:
            raise MessageNotFoundError(key, locale)
        return key

    def registered_locales(self) -> List[Locale]:
        """Default locale plus every locale with a resource, sorted by tag."""
        found = {self.default_locale}
        for basename in self.basenames:
            found.update(self.store.available_locales(basename))
        return sorted(found, key=lambda locale: locale.tag)

    def preload(self, locales: Optional[Iterable[Locale]] = None) -> None:
        """Load every bundle up front so malformed resources fail at startup."""
        targets = list(locales) if locales is not None else self.registered_locales()
        for basename in self.basenames:
            for locale in targets:
                self.store.load(basename, locale)
        logger.info(
            "preloaded_bundles",
            basenames=self.basenames,
            locales=[locale.tag for locale in targets],
        )
