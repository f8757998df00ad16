"""Core data structures for the i18n engine.

Defines locales, immutable message bundles and the miss policy.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

_TAG_PATTERN = re.compile(
    r"^(?P<language>[A-Za-z]{2,3})"
    r"(?:[-_](?P<region>[A-Za-z]{2}|[0-9]{3}))?"
    r"(?:[-_](?P<variant>[A-Za-z0-9]{1,8}))?$"
)


@dataclass(frozen=True)
class Locale:
    """A language/region identifier.

    Uses IETF BCP 47 style tags (e.g., "en", "fr-CA"). Frozen so it can be
    used as a cache key.

    Attributes:
        language: Lowercase language code (e.g., "fr").
        region: Uppercase region code (e.g., "CA"), empty if absent.
        variant: Optional variant subtag, empty if absent.
    """

    language: str
    region: str = ""
    variant: str = ""

    @classmethod
    def parse(cls, tag: "str | Locale") -> "Locale":
        """Parse a locale tag.

        Accepts "-" or "_" as separator, so "fr-CA" and "fr_CA" are equal.

        Args:
            tag: Locale tag or an existing Locale.

        Returns:
            Parsed Locale.

        Raises:
            ValueError: If the tag is blank or malformed.
        """
        if isinstance(tag, Locale):
            return tag
        match = _TAG_PATTERN.match(tag.strip()) if tag else None
        if match is None:
            raise ValueError(f"Invalid locale tag: {tag!r}")
        return cls(
            language=match.group("language").lower(),
            region=(match.group("region") or "").upper(),
            variant=match.group("variant") or "",
        )

    @property
    def tag(self) -> str:
        """Hyphenated tag (e.g., "fr-CA")."""
        return "-".join(part for part in (self.language, self.region, self.variant) if part)

    def language_only(self) -> "Locale":
        """Return the language-only locale (e.g., "fr" from "fr-CA")."""
        return Locale(self.language)

    def matches_language(self, other: "Locale") -> bool:
        """Check if both locales share the same language."""
        return self.language == other.language

    def __str__(self) -> str:
        return self.tag


class MissPolicy(str, Enum):
    """What the catalog does when no bundle defines a key."""

    LENIENT = "lenient"
    STRICT = "strict"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True, eq=False)
class Bundle:
    """Immutable key to template table for one (basename, locale) pair.

    A reload produces a new Bundle; existing instances are never mutated.

    Attributes:
        basename: Logical bundle name (e.g., "messages").
        locale: Locale this bundle holds text for.
        messages: Read-only mapping of message key to template.
        source: Where the bundle was read from (for diagnostics).
        loaded_at: Timestamp (ISO 8601) when the bundle was loaded.
    """

    basename: str
    locale: Locale
    messages: Mapping[str, str] = field(default_factory=dict)
    source: str = ""
    loaded_at: str = field(default_factory=_utc_now)

    def __post_init__(self):
        object.__setattr__(self, "messages", MappingProxyType(dict(self.messages)))

    def get(self, key: str) -> Optional[str]:
        return self.messages.get(key)

    def keys(self) -> frozenset:
        return frozenset(self.messages)

    def __contains__(self, key: object) -> bool:
        return key in self.messages

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self.messages)
