"""Ambient current-locale holder.

The active locale lives in a ContextVar, so each thread and each asyncio
task sees its own value. While a locale is active it is also bound into
structlog's context variables, so log lines carry ``locale=<tag>``.

Usage:
    context = LocaleContext(default_locale=Locale("en"))

    with context.using(Locale.parse("fr-CA")):
        resolver.resolve("app.greeting", "Monde")

    context.current()  # back to the default
"""

import contextvars
import functools
from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional, TypeVar

import structlog

from phrasebook.i18n.models import Locale

T = TypeVar("T")

_current_locale: contextvars.ContextVar[Optional[Locale]] = contextvars.ContextVar(
    "phrasebook_current_locale", default=None
)


class LocaleContext:
    """Per-logical-unit current locale with a catalog default.

    Attributes:
        default_locale: Returned by current() when no locale was set.
    """

    def __init__(self, default_locale: Locale):
        self.default_locale = default_locale

    def current(self) -> Locale:
        """Active locale of the calling thread/task, or the default."""
        locale = _current_locale.get()
        return locale if locale is not None else self.default_locale

    def is_set(self) -> bool:
        return _current_locale.get() is not None

    def set(self, locale: Locale) -> contextvars.Token:
        """Set the locale for the current unit of work.

        Prefer using(); callers of set() must pass the token to reset().
        """
        return _current_locale.set(locale)

    def reset(self, token: contextvars.Token) -> None:
        _current_locale.reset(token)

    @contextmanager
    def using(self, locale: "Locale | str") -> Generator[Locale, None, None]:
        """Activate a locale for the duration of the block.

        The previous value is restored on every exit path: normal exit,
        exceptions and task cancellation.
        """
        locale = Locale.parse(locale)
        token = _current_locale.set(locale)
        log_tokens = structlog.contextvars.bind_contextvars(locale=locale.tag)
        try:
            yield locale
        finally:
            structlog.contextvars.reset_contextvars(**log_tokens)
            _current_locale.reset(token)

    def with_locale(self, locale: "Locale | str", fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call fn with locale active, then restore the previous locale."""
        with self.using(locale):
            return fn(*args, **kwargs)

    def wrap(self, fn: Callable[..., T]) -> Callable[..., T]:
        """Capture the caller's context for work run elsewhere.

        Threads start with an empty context, so a function submitted to a
        thread pool would otherwise see the default locale.

        Example:
            with context.using("fr"):
                executor.submit(context.wrap(send_notification), user)
        """
        captured = contextvars.copy_context()

        @functools.wraps(fn)
        def _run(*args: Any, **kwargs: Any) -> T:
            return captured.copy().run(fn, *args, **kwargs)

        return _run
