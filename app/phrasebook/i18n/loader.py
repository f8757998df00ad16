"""Bundle resource sources and parsers.

Defines the contract for reading raw bundle resources and provides a
directory-backed source (``.properties`` and YAML files) and an in-memory
source for embedded data.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from phrasebook.i18n.exceptions import MalformedBundleError
from phrasebook.i18n.models import Locale
from phrasebook.logging import get_module_logger

logger = get_module_logger()

# "{" + digits not followed by a closing "}"
_UNTERMINATED_PLACEHOLDER = re.compile(r"\{\d+(?!\d|\})")

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t"}

PROPERTIES_SUFFIX = ".properties"
YAML_SUFFIXES = (".yml", ".yaml")


def check_template(template: str, source: str = "", line: Optional[int] = None) -> str:
    """Reject templates with unterminated positional placeholders.

    Raises:
        MalformedBundleError: If a placeholder like "{0" is never closed.
    """
    match = _UNTERMINATED_PLACEHOLDER.search(template)
    if match:
        raise MalformedBundleError(
            f"unterminated placeholder {match.group(0)!r} in {template!r}",
            source=source,
            line=line,
        )
    return template


def _trailing_backslashes(line: str) -> int:
    return len(line) - len(line.rstrip("\\"))


def _unescape(template: str) -> str:
    return _ESCAPE.sub(lambda match: _ESCAPES.get(match.group(1), match.group(1)), template)


def parse_properties(text: str, source: str = "") -> Dict[str, str]:
    """Parse a flat ``key=template`` resource.

    Format:
        # comment
        ! comment
        app.greeting={0}, hello!
        app.long=first part \\
            continued
        app.path=C:\\\\temp

    In templates a backslash escapes the next character: ``\\\\`` is a
    literal backslash, ``\\n`` and ``\\t`` are a newline and a tab, and any
    other escaped character stands for itself. Keys are taken verbatim.

    Args:
        text: Decoded resource text.
        source: Resource name used in error messages.

    Returns:
        Dict of message key to template.

    Raises:
        MalformedBundleError: On a line without "=", an empty key or an
            unterminated placeholder.
    """
    messages: Dict[str, str] = {}
    lines = text.splitlines()
    index = 0
    while index < len(lines):
        line_number = index + 1
        line = lines[index].strip()
        index += 1

        if not line or line[0] in "#!":
            continue

        # An odd run of trailing backslashes continues the value on the next line
        while _trailing_backslashes(line) % 2 == 1:
            line = line[:-1]
            if index >= len(lines):
                break
            line += lines[index].strip()
            index += 1

        if "=" not in line:
            raise MalformedBundleError(
                "expected 'key=template'", source=source, line=line_number
            )

        key, template = line.split("=", 1)
        key = key.strip()
        template = _unescape(template.strip())
        if not key:
            raise MalformedBundleError("empty message key", source=source, line=line_number)

        check_template(template, source=source, line=line_number)

        if key in messages:
            logger.warning("duplicate_message_key", key=key, source=source, line=line_number)
        messages[key] = template

    return messages


def flatten_messages(data: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten a nested mapping into dot-separated keys with string values."""
    items: Dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            items.update(flatten_messages(value, full_key))
        elif value is None:
            items[full_key] = ""
        else:
            items[full_key] = str(value)
    return items


def parse_yaml(text: str, source: str = "") -> Dict[str, str]:
    """Parse a YAML resource into flat dotted keys.

    Raises:
        MalformedBundleError: On YAML syntax errors, a non-mapping document
            or an unterminated placeholder.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise MalformedBundleError(f"invalid YAML: {e}", source=source) from e

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise MalformedBundleError("expected a mapping at document root", source=source)

    messages = flatten_messages(data)
    for template in messages.values():
        check_template(template, source=source)
    return messages


def _suffixes_for(locale: Locale) -> List[str]:
    underscored = locale.tag.replace("-", "_")
    if underscored == locale.tag:
        return [locale.tag]
    return [underscored, locale.tag]


class BundleSource(ABC):
    """Abstract backing resource for bundles.

    Implementations read the raw key to template table for one
    (basename, locale) pair and report which locales exist.
    """

    @abstractmethod
    def read(self, basename: str, locale: Locale) -> Optional[Dict[str, str]]:
        """Read the messages for a (basename, locale) pair.

        Returns:
            Dict of key to template, or None when no resource exists.

        Raises:
            MalformedBundleError: If the resource fails to parse.
        """
        pass

    @abstractmethod
    def available_locales(self, basename: str) -> List[Locale]:
        """List locales that have a resource for basename, sorted by tag."""
        pass

    def describe(self, basename: str, locale: Locale) -> str:
        """Human-readable resource name for diagnostics."""
        return f"{basename}_{locale.tag}"


class FileBundleSource(BundleSource):
    """Directory of bundle resources.

    Expects files named ``<basename>_<locale>.properties`` (``fr_CA`` or
    ``fr-CA``), or ``<basename>_<locale>.yml``/``.yaml`` with nested
    mappings. A ``.properties`` file wins when both exist.

    Attributes:
        directory: Path to the directory containing resources.
        encoding: Text encoding of resources.
    """

    def __init__(self, directory: Path, encoding: str = "utf-8"):
        self.directory = Path(directory)
        self.encoding = encoding

        if not self.directory.is_dir():
            raise ValueError(f"Bundle directory not found: {self.directory}")

        logger.info(
            "initialized_file_bundle_source",
            directory=str(self.directory),
            encoding=encoding,
        )

    def _find(self, basename: str, locale: Locale) -> Optional[Path]:
        for suffix in (PROPERTIES_SUFFIX,) + YAML_SUFFIXES:
            for locale_part in _suffixes_for(locale):
                path = self.directory / f"{basename}_{locale_part}{suffix}"
                if path.is_file():
                    return path
        return None

    def describe(self, basename: str, locale: Locale) -> str:
        path = self._find(basename, locale)
        return str(path) if path else super().describe(basename, locale)

    def read(self, basename: str, locale: Locale) -> Optional[Dict[str, str]]:
        path = self._find(basename, locale)
        if path is None:
            return None

        raw = path.read_bytes()
        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            logger.error("bundle_decode_error", file=str(path), error=str(e))
            raise MalformedBundleError(
                f"cannot decode as {self.encoding}: {e}", source=str(path)
            ) from e

        if path.suffix == PROPERTIES_SUFFIX:
            return parse_properties(text, source=str(path))
        return parse_yaml(text, source=str(path))

    def available_locales(self, basename: str) -> List[Locale]:
        found = set()
        prefix = f"{basename}_"
        for path in self.directory.iterdir():
            if not path.is_file() or not path.name.startswith(prefix):
                continue
            if path.suffix not in (PROPERTIES_SUFFIX,) + YAML_SUFFIXES:
                continue
            locale_part = path.stem[len(prefix):]
            try:
                found.add(Locale.parse(locale_part))
            except ValueError:
                # Files like messages_legacy_v2.properties are not bundles
                logger.debug("skipped_unrecognized_bundle_file", file=path.name)
        return sorted(found, key=lambda locale: locale.tag)


class InMemoryBundleSource(BundleSource):
    """Embedded bundle data.

    Example:
        source = InMemoryBundleSource({
            "messages": {
                "en": {"app.greeting": "{0}, hello!"},
                "fr": {"app.greeting": "{0}, bonjour !"},
            }
        })
    """

    def __init__(self, data: Mapping[str, Mapping[str, Mapping[str, str]]]):
        self._data: Dict[str, Dict[Locale, Dict[str, str]]] = {}
        for basename, locales in data.items():
            self._data[basename] = {}
            for tag, messages in locales.items():
                source = f"{basename}_{tag}"
                flat = flatten_messages(messages)
                for template in flat.values():
                    check_template(template, source=source)
                self._data[basename][Locale.parse(tag)] = flat

    def read(self, basename: str, locale: Locale) -> Optional[Dict[str, str]]:
        messages = self._data.get(basename, {}).get(locale)
        return dict(messages) if messages is not None else None

    def available_locales(self, basename: str) -> List[Locale]:
        return sorted(self._data.get(basename, {}), key=lambda locale: locale.tag)
