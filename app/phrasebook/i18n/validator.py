"""Bundle consistency checks for builds and tests.

Not a runtime path: run it from a test or a build step to catch missing
translations and orphaned keys before they reach users.

Checks:
1. For every basename, each locale's key set is diffed against the
   default locale's key set. Keys missing from a locale and keys only a
   non-default locale defines are both reported.
2. Every problem key registry entry must resolve its title and detail keys
   in every registered locale.

Usage:
    report = BundleConsistencyValidator(catalog).validate()
    report.raise_if_failed()
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from phrasebook.i18n.catalog import MessageCatalog
from phrasebook.i18n.exceptions import BundleConsistencyError
from phrasebook.i18n.models import Locale
from phrasebook.i18n.problems import ProblemKey
from phrasebook.logging import get_module_logger

logger = get_module_logger()


class ViolationKind(str, Enum):
    MISSING_KEY = "missing_key"
    ORPHANED_KEY = "orphaned_key"
    MISSING_PROBLEM_TEXT = "missing_problem_text"


@dataclass(frozen=True)
class ConsistencyViolation:
    """One finding, identified by basename, locale and key.

    Attributes:
        kind: What is wrong.
        basename: Basename the finding belongs to (None for problem text,
            which may live in any basename).
        locale: Locale the finding applies to.
        key: Offending message key.
    """

    kind: ViolationKind
    basename: Optional[str]
    locale: Locale
    key: str

    def sort_key(self) -> Tuple[str, str, str, str]:
        return (self.basename or "", self.locale.tag, self.kind.value, self.key)

    def __str__(self) -> str:
        where = f"{self.basename}_{self.locale.tag}" if self.basename else self.locale.tag
        return f"[{self.kind.value}] {where}: {self.key}"


@dataclass(frozen=True)
class ConsistencyReport:
    """Aggregated findings of one validation run."""

    findings: Tuple[ConsistencyViolation, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        return not self.findings

    def findings_for(self, locale: Locale) -> List[ConsistencyViolation]:
        return [finding for finding in self.findings if finding.locale == locale]

    def raise_if_failed(self) -> "ConsistencyReport":
        """Raise BundleConsistencyError when any finding exists."""
        if self.findings:
            raise BundleConsistencyError(self)
        return self


class BundleConsistencyValidator:
    """Diffs bundle key sets and checks problem key text.

    Attributes:
        catalog: MessageCatalog whose basenames and locales are checked.
        problems: Problem registry entries whose text must exist.
    """

    def __init__(
        self,
        catalog: MessageCatalog,
        problems: Iterable[ProblemKey] = ProblemKey,
    ):
        self.catalog = catalog
        self.problems = list(problems)

    def validate(self) -> ConsistencyReport:
        """Run every check and aggregate the findings."""
        findings: List[ConsistencyViolation] = []
        findings.extend(self._check_key_sets())
        findings.extend(self._check_problem_text())
        findings.sort(key=ConsistencyViolation.sort_key)

        report = ConsistencyReport(findings=tuple(findings))
        if report.passed:
            logger.info("bundle_consistency_passed", basenames=self.catalog.basenames)
        else:
            logger.warning(
                "bundle_consistency_failed",
                finding_count=len(findings),
                findings=[str(finding) for finding in findings],
            )
        return report

    def _check_key_sets(self) -> List[ConsistencyViolation]:
        findings = []
        default_locale = self.catalog.default_locale
        store = self.catalog.store

        for basename in self.catalog.basenames:
            default_bundle = store.load(basename, default_locale)
            if default_bundle is None and default_locale.region:
                default_bundle = store.load(basename, default_locale.language_only())
            expected = default_bundle.keys() if default_bundle is not None else frozenset()
            reference = default_bundle.locale if default_bundle is not None else default_locale

            for locale in store.available_locales(basename):
                if locale == reference:
                    continue
                bundle = store.load(basename, locale)
                if bundle is None:
                    continue
                actual = bundle.keys()
                for key in expected - actual:
                    findings.append(
                        ConsistencyViolation(ViolationKind.MISSING_KEY, basename, locale, key)
                    )
                for key in actual - expected:
                    findings.append(
                        ConsistencyViolation(ViolationKind.ORPHANED_KEY, basename, locale, key)
                    )
        return findings

    def _check_problem_text(self) -> List[ConsistencyViolation]:
        findings = []
        for locale in self.catalog.registered_locales():
            for problem in self.problems:
                for key in (problem.title_key, problem.detail_key):
                    if self.catalog.find_template(locale, key) is None:
                        findings.append(
                            ConsistencyViolation(
                                ViolationKind.MISSING_PROBLEM_TEXT, None, locale, key
                            )
                        )
        return findings
