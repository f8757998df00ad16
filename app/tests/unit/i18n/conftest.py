"""Feature-level fixtures for i18n engine tests.

Provides bundle directories on disk and resolvers wired over them.
"""

import pytest

from phrasebook.i18n import (
    BundleStore,
    FileBundleSource,
    Locale,
    LocaleContext,
    MessageCatalog,
    MessageResolver,
    MissPolicy,
)


def write_bundle(directory, name, lines):
    """Write a .properties bundle file from a list of lines."""
    path = directory / name
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def bundle_dir(tmp_path):
    """Create a temporary directory with sample bundle files.

    Returns a directory structure like:
    - messages_en.properties
    - messages_fr.properties   (no app.greeting)
    - messages_fr_CA.properties
    - problems_en.yml
    """
    write_bundle(
        tmp_path,
        "messages_en.properties",
        [
            "# default locale",
            "app.greeting={0}, hello!",
            "app.farewell=Goodbye, {0}.",
            "user.email.required=An email address is required.",
        ],
    )
    write_bundle(
        tmp_path,
        "messages_fr.properties",
        [
            "app.farewell=Au revoir, {0}.",
            "user.email.required=Une adresse courriel est requise.",
        ],
    )
    write_bundle(
        tmp_path,
        "messages_fr_CA.properties",
        [
            "user.email.required=Une adresse de courriel est obligatoire.",
        ],
    )
    (tmp_path / "problems_en.yml").write_text(
        "problem:\n"
        "  duplicate-category:\n"
        "    title: Duplicate category\n"
        "    detail: A category named {0} already exists.\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def file_source(bundle_dir):
    return FileBundleSource(bundle_dir)


@pytest.fixture
def catalog(file_source):
    """Lenient catalog over the sample bundle directory."""
    return MessageCatalog(
        BundleStore(file_source),
        basenames=["messages", "problems"],
        default_locale=Locale("en"),
        miss_policy=MissPolicy.LENIENT,
    )


@pytest.fixture
def strict_catalog(file_source):
    return MessageCatalog(
        BundleStore(file_source),
        basenames=["messages", "problems"],
        default_locale=Locale("en"),
        miss_policy=MissPolicy.STRICT,
    )


@pytest.fixture
def resolver(catalog):
    return MessageResolver(catalog, LocaleContext(catalog.default_locale))


@pytest.fixture
def strict_resolver(strict_catalog):
    return MessageResolver(strict_catalog, LocaleContext(strict_catalog.default_locale))
