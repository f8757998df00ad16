"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    make_bundle,
    make_catalog,
    make_resolver,
    make_source,
)

__all__ = [
    "make_bundle",
    "make_catalog",
    "make_resolver",
    "make_source",
]
