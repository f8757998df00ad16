"""Bundle cache with timed and explicit invalidation.

The cache is published as an immutable snapshot. Writers build a new
snapshot under a lock and swap the reference, so readers never lock and
never observe a half-updated cache.
"""

import threading
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Tuple

from phrasebook.i18n.loader import BundleSource
from phrasebook.i18n.models import Bundle, Locale
from phrasebook.logging import get_module_logger

logger = get_module_logger()

CacheKey = Tuple[str, Locale]


@dataclass(frozen=True)
class _CacheEntry:
    bundle: Optional[Bundle]
    loaded_at: float


class BundleStore:
    """Loads bundles from a BundleSource and caches them.

    Both hits and misses are cached, so a locale with no resource is only
    looked up once per cache lifetime.

    Attributes:
        source: Backing resource for bundles.
        cache_seconds: -1 caches forever, 0 disables caching, a positive
            value expires entries after that many seconds.
        reloadable: When False, invalidate() keeps the cache (bundles are
            loaded once for the process lifetime).
    """

    def __init__(
        self,
        source: BundleSource,
        cache_seconds: int = -1,
        reloadable: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.cache_seconds = cache_seconds
        self.reloadable = reloadable
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Mapping[CacheKey, _CacheEntry] = MappingProxyType({})

    @property
    def cached(self) -> Mapping[CacheKey, Optional[Bundle]]:
        """Read-only view of the current snapshot."""
        return MappingProxyType(
            {key: entry.bundle for key, entry in self._entries.items()}
        )

    def _is_fresh(self, entry: _CacheEntry) -> bool:
        if self.cache_seconds < 0:
            return True
        return self._clock() - entry.loaded_at < self.cache_seconds

    def load(self, basename: str, locale: Locale) -> Optional[Bundle]:
        """Load the bundle for a (basename, locale) pair.

        Reads from the source only on a cache miss or expired entry.

        Args:
            basename: Logical bundle name.
            locale: Exact locale to load (no fallback here).

        Returns:
            The Bundle, or None when the source has no resource for it.

        Raises:
            MalformedBundleError: If the resource fails to parse.
        """
        key = (basename, locale)
        entry = self._entries.get(key)
        if entry is not None and self._is_fresh(entry):
            return entry.bundle

        messages = self.source.read(basename, locale)
        bundle = None
        if messages is not None:
            bundle = Bundle(
                basename=basename,
                locale=locale,
                messages=messages,
                source=self.source.describe(basename, locale),
            )
            logger.info(
                "loaded_bundle",
                basename=basename,
                locale=locale.tag,
                message_count=len(bundle),
            )
        else:
            logger.debug("bundle_not_found", basename=basename, locale=locale.tag)

        if self.cache_seconds != 0:
            self._publish(lambda entries: entries.update({key: _CacheEntry(bundle, self._clock())}))
        return bundle

    def invalidate(self, basename: Optional[str] = None, locale: Optional[Locale] = None) -> None:
        """Drop cached bundles so the next load re-reads the source.

        Args:
            basename: Only drop entries of this basename (all if None).
            locale: Only drop entries of this locale (all if None).
        """
        if not self.reloadable:
            logger.warning(
                "bundle_invalidation_disabled",
                basename=basename,
                locale=locale.tag if locale else None,
            )
            return

        def _drop(entries: dict) -> None:
            for cached_basename, cached_locale in list(entries):
                if basename is not None and cached_basename != basename:
                    continue
                if locale is not None and cached_locale != locale:
                    continue
                del entries[(cached_basename, cached_locale)]

        self._publish(_drop)
        logger.info(
            "invalidated_bundles",
            basename=basename,
            locale=locale.tag if locale else None,
        )

    def available_locales(self, basename: str) -> List[Locale]:
        return self.source.available_locales(basename)

    def _publish(self, mutate: Callable[[dict], None]) -> None:
        # Copy, mutate, then swap the reference; published snapshots are never touched
        with self._lock:
            entries = dict(self._entries)
            mutate(entries)
            self._entries = MappingProxyType(entries)
