"""Custom exceptions for the i18n engine.

Load-time and scan-time errors signal a misconfigured deployment and are
meant to abort startup. Resolution misses are only raised under the strict
miss policy.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from phrasebook.i18n.validator import ConsistencyReport


class I18nError(Exception):
    """Base exception for all i18n engine errors.

    Example:
        try:
            resolver.resolve("app.greeting")
        except I18nError as e:
            logger.error("i18n_error", error=str(e))
    """

    pass


class MalformedBundleError(I18nError):
    """Raised when a bundle resource fails to parse.

    Example:
        >>> parse_properties("app.greeting={0, hello", "messages_en.properties")
        Traceback (most recent call last):
        ...
        MalformedBundleError: messages_en.properties:1: unterminated placeholder
    """

    def __init__(self, message: str, source: str = "", line: Optional[int] = None):
        self.source = source
        self.line = line
        location = source
        if line is not None:
            location = f"{source}:{line}"
        super().__init__(f"{location}: {message}" if location else message)


class MessageNotFoundError(I18nError, KeyError):
    """Raised when no bundle defines a key and the miss policy is strict."""

    def __init__(self, key: str, locale: object = None):
        self.key = key
        self.locale = locale
        super().__init__(f"No message found for key '{key}' in locale '{locale}'")

    def __str__(self) -> str:
        return self.args[0]


class BindingConfigurationError(I18nError):
    """Raised when a message-key marker is unusable.

    Covers blank keys and members whose declared carrier type cannot hold
    a message handle.

    Example:
        >>> scanner.scan(Widget)
        Traceback (most recent call last):
        ...
        BindingConfigurationError: Widget.title: carrier type str cannot hold a LazyMessage
    """

    def __init__(self, message: str, owner: Optional[type] = None, member: str = ""):
        self.owner = owner
        self.member = member
        if owner is not None:
            message = f"{owner.__qualname__}.{member}: {message}"
        super().__init__(message)


class BundleConsistencyError(I18nError):
    """Raised by ConsistencyReport.raise_if_failed() when findings exist."""

    def __init__(self, report: "ConsistencyReport"):
        self.report = report
        lines = [str(finding) for finding in report.findings]
        super().__init__(
            f"{len(lines)} bundle consistency violation(s):\n" + "\n".join(lines)
        )
