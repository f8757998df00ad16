"""i18n engine - locale-aware message resolution and binding.

Resolves message keys into locale-specific text with deterministic
fallback, supplies lazily rendered message handles to components, and
checks locale bundles for consistency.

Main components:
- models: Locale, Bundle, MissPolicy
- loader: BundleSource, FileBundleSource, InMemoryBundleSource
- store: BundleStore (cached, copy-on-write)
- catalog: MessageCatalog (fallback chain, interpolation)
- context: LocaleContext (ambient current locale)
- resolver: MessageResolver (public lookup facade)
- lazy: LazyMessage
- binding: BindingScanner, message_key, message_setter
- problems: ProblemKey registry, ProblemDetail
- validator: BundleConsistencyValidator
"""

from phrasebook.i18n.binding import (
    BindingScanner,
    InjectionKind,
    InjectionPoint,
    message_key,
    message_setter,
)
from phrasebook.i18n.catalog import MessageCatalog, format_template
from phrasebook.i18n.context import LocaleContext
from phrasebook.i18n.exceptions import (
    BindingConfigurationError,
    BundleConsistencyError,
    I18nError,
    MalformedBundleError,
    MessageNotFoundError,
)
from phrasebook.i18n.lazy import LazyMessage, Renderable
from phrasebook.i18n.loader import BundleSource, FileBundleSource, InMemoryBundleSource
from phrasebook.i18n.models import Bundle, Locale, MissPolicy
from phrasebook.i18n.problems import (
    ProblemDetail,
    ProblemKey,
    ProblemRenderer,
    build_problem_detail,
)
from phrasebook.i18n.resolver import MessageResolver
from phrasebook.i18n.store import BundleStore
from phrasebook.i18n.validator import (
    BundleConsistencyValidator,
    ConsistencyReport,
    ConsistencyViolation,
    ViolationKind,
)

__all__ = [
    "Locale",
    "Bundle",
    "MissPolicy",
    "BundleSource",
    "FileBundleSource",
    "InMemoryBundleSource",
    "BundleStore",
    "MessageCatalog",
    "format_template",
    "LocaleContext",
    "MessageResolver",
    "LazyMessage",
    "Renderable",
    "BindingScanner",
    "InjectionKind",
    "InjectionPoint",
    "message_key",
    "message_setter",
    "ProblemKey",
    "ProblemDetail",
    "build_problem_detail",
    "ProblemRenderer",
    "BundleConsistencyValidator",
    "ConsistencyReport",
    "ConsistencyViolation",
    "ViolationKind",
    "I18nError",
    "MalformedBundleError",
    "MessageNotFoundError",
    "BindingConfigurationError",
    "BundleConsistencyError",
]
