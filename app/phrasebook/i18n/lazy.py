"""Deferred message rendering."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from phrasebook.i18n.models import Locale

if TYPE_CHECKING:
    from phrasebook.i18n.resolver import MessageResolver


@runtime_checkable
class Renderable(Protocol):
    """Anything that renders to text on demand."""

    def render(self, *args: Any) -> str: ...


@dataclass(frozen=True)
class LazyMessage:
    """A message key bound to a resolver, rendered on demand.

    The locale is looked up when render() is called, not when the handle is
    created, so a handle created once at component construction renders in
    whatever locale each later request has active.

    Attributes:
        key: Message key this handle renders.
        resolver: MessageResolver used at render time.
    """

    key: str
    resolver: "MessageResolver"

    def render(self, *args: Any) -> str:
        """Resolve the key against the ambient locale."""
        return self.resolver.resolve(self.key, *args)

    def render_for(self, locale: "Locale | str", *args: Any) -> str:
        """Resolve the key against an explicit locale."""
        return self.resolver.resolve_for(locale, self.key, *args)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"LazyMessage(key={self.key!r})"
