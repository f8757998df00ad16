"""Tests for phrasebook.i18n.loader module."""

import pytest

from phrasebook.i18n import FileBundleSource, InMemoryBundleSource, Locale, MalformedBundleError
from phrasebook.i18n.loader import flatten_messages, parse_properties, parse_yaml


class TestParseProperties:
    """Tests for parse_properties()."""

    def test_parses_key_template_pairs(self):
        """Each line becomes one key/template pair."""
        messages = parse_properties("app.greeting={0}, hello!\napp.farewell=Bye\n")
        assert messages == {"app.greeting": "{0}, hello!", "app.farewell": "Bye"}

    def test_skips_comments_and_blank_lines(self):
        """Lines starting with # or ! and blank lines are ignored."""
        text = "# comment\n! also a comment\n\n   \napp.ok=OK\n"
        assert parse_properties(text) == {"app.ok": "OK"}

    def test_strips_whitespace_around_key_and_value(self):
        assert parse_properties("  app.ok =  OK  ") == {"app.ok": "OK"}

    def test_value_may_contain_equals(self):
        """Only the first '=' separates key and template."""
        assert parse_properties("math.rule=a=b") == {"math.rule": "a=b"}

    def test_empty_value_allowed(self):
        assert parse_properties("app.blank=") == {"app.blank": ""}

    def test_line_continuation(self):
        """A trailing backslash continues the template on the next line."""
        text = "app.long=first part \\\n    second part\napp.next=x\n"
        assert parse_properties(text) == {
            "app.long": "first part second part",
            "app.next": "x",
        }

    def test_even_trailing_backslashes_do_not_continue(self):
        """An escaped backslash at the end of a line is a literal backslash."""
        text = "app.path=C:\\\\temp\\\\\napp.next=x\n"
        assert parse_properties(text) == {"app.path": "C:\\temp\\", "app.next": "x"}

    def test_odd_trailing_backslashes_continue(self):
        """Three trailing backslashes are an escaped backslash plus a continuation."""
        text = "app.path=C:\\\\\\\n    temp\n"
        assert parse_properties(text) == {"app.path": "C:\\temp"}

    def test_escape_sequences(self):
        text = "app.lines=one\\ntwo\\tthree \\{0}\n"
        assert parse_properties(text) == {"app.lines": "one\ntwo\tthree {0}"}

    def test_duplicate_key_last_wins(self):
        assert parse_properties("a=1\na=2") == {"a": "2"}

    def test_missing_separator_raises(self):
        """A non-comment line without '=' is malformed."""
        with pytest.raises(MalformedBundleError) as exc_info:
            parse_properties("app.ok=OK\njust some text\n", source="messages_en.properties")
        assert exc_info.value.line == 2
        assert "messages_en.properties:2" in str(exc_info.value)

    def test_empty_key_raises(self):
        with pytest.raises(MalformedBundleError):
            parse_properties("=orphan value")

    @pytest.mark.parametrize("template", ["{0, hello", "hello {12", "{1 and {2}"])
    def test_unterminated_placeholder_raises(self, template):
        """Positional placeholders must be closed."""
        with pytest.raises(MalformedBundleError):
            parse_properties(f"app.bad={template}")

    def test_literal_braces_are_not_placeholders(self):
        """Non-numeric braces are plain text."""
        assert parse_properties("app.json={name} {")["app.json"] == "{name} {"


class TestParseYaml:
    """Tests for parse_yaml()."""

    def test_flattens_nested_mappings(self):
        text = "problem:\n  duplicate-category:\n    title: Duplicate\n"
        assert parse_yaml(text) == {"problem.duplicate-category.title": "Duplicate"}

    def test_empty_document(self):
        assert parse_yaml("") == {}

    def test_invalid_yaml_raises(self):
        with pytest.raises(MalformedBundleError):
            parse_yaml("invalid: yaml: content: [", source="bad.yml")

    def test_non_mapping_root_raises(self):
        with pytest.raises(MalformedBundleError):
            parse_yaml("- a\n- b\n")

    def test_unterminated_placeholder_raises(self):
        with pytest.raises(MalformedBundleError):
            parse_yaml("app:\n  bad: '{0 oops'\n")

    def test_flatten_messages_stringifies_values(self):
        assert flatten_messages({"a": {"b": 1, "c": None}}) == {"a.b": "1", "a.c": ""}


class TestFileBundleSource:
    """Tests for FileBundleSource."""

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(ValueError):
            FileBundleSource(tmp_path / "nonexistent")

    def test_read_properties(self, file_source):
        messages = file_source.read("messages", Locale("en"))
        assert messages["app.greeting"] == "{0}, hello!"

    def test_read_region_file_with_underscore(self, file_source):
        """fr-CA is read from messages_fr_CA.properties."""
        messages = file_source.read("messages", Locale("fr", "CA"))
        assert list(messages) == ["user.email.required"]

    def test_read_region_file_with_hyphen(self, tmp_path):
        (tmp_path / "messages_pt-BR.properties").write_text("a=A\n", encoding="utf-8")
        source = FileBundleSource(tmp_path)
        assert source.read("messages", Locale("pt", "BR")) == {"a": "A"}

    def test_read_yaml(self, file_source):
        messages = file_source.read("problems", Locale("en"))
        assert messages["problem.duplicate-category.title"] == "Duplicate category"

    def test_missing_resource_returns_none(self, file_source):
        """Absence of a locale resource is not an error."""
        assert file_source.read("messages", Locale("de")) is None
        assert file_source.read("unknown", Locale("en")) is None

    def test_properties_preferred_over_yaml(self, tmp_path):
        (tmp_path / "messages_en.properties").write_text("a=from properties\n", encoding="utf-8")
        (tmp_path / "messages_en.yml").write_text("a: from yaml\n", encoding="utf-8")
        source = FileBundleSource(tmp_path)
        assert source.read("messages", Locale("en")) == {"a": "from properties"}

    def test_encoding_error_raises(self, tmp_path):
        """Bytes that are not valid UTF-8 make the bundle malformed."""
        (tmp_path / "messages_en.properties").write_bytes(b"app.bad=caf\xe9\n")
        source = FileBundleSource(tmp_path)
        with pytest.raises(MalformedBundleError):
            source.read("messages", Locale("en"))

    def test_configurable_encoding(self, tmp_path):
        (tmp_path / "messages_fr.properties").write_bytes("app.ok=café\n".encode("latin-1"))
        source = FileBundleSource(tmp_path, encoding="latin-1")
        assert source.read("messages", Locale("fr")) == {"app.ok": "café"}

    def test_available_locales(self, file_source):
        """available_locales() lists locales per basename, sorted by tag."""
        assert file_source.available_locales("messages") == [
            Locale("en"),
            Locale("fr"),
            Locale("fr", "CA"),
        ]
        assert file_source.available_locales("problems") == [Locale("en")]

    def test_available_locales_ignores_other_basenames(self, tmp_path):
        (tmp_path / "messages_en.properties").write_text("a=A\n", encoding="utf-8")
        (tmp_path / "messages_extra_en.properties").write_text("a=A\n", encoding="utf-8")
        (tmp_path / "messages_en.txt").write_text("a=A\n", encoding="utf-8")
        source = FileBundleSource(tmp_path)
        assert source.available_locales("messages") == [Locale("en")]


class TestInMemoryBundleSource:
    """Tests for InMemoryBundleSource."""

    def test_read_and_available_locales(self):
        source = InMemoryBundleSource(
            {"messages": {"fr": {"a": "A"}, "en": {"a": "A", "b": "B"}}}
        )
        assert source.read("messages", Locale("en")) == {"a": "A", "b": "B"}
        assert source.read("messages", Locale("de")) is None
        assert source.available_locales("messages") == [Locale("en"), Locale("fr")]

    def test_nested_data_is_flattened(self):
        source = InMemoryBundleSource({"messages": {"en": {"app": {"ok": "OK"}}}})
        assert source.read("messages", Locale("en")) == {"app.ok": "OK"}

    def test_malformed_template_rejected(self):
        with pytest.raises(MalformedBundleError):
            InMemoryBundleSource({"messages": {"en": {"a": "{0"}}})
